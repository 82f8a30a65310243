"""
Media selection and retrieval URL construction.

Picks, for each logical media kind, the single best asset out of a
game's unordered media list using a region priority scan.
"""

import logging
from typing import Dict, List, Optional, Sequence
from urllib.parse import parse_qs, urlsplit

from rompom.metadata.game_record import GameRecord, MediaAsset
from .media_types import MEDIA_DEFINITIONS, MediaDefinition, MediaKind, get_definition

logger = logging.getLogger(__name__)


DEFAULT_REGION_PRIORITIES = ['fr', 'eu', 'us', 'wor', 'jp', 'ss']
DEFAULT_MEDIA_BASE_URL = 'https://screenscraper.fr/medias'
FALLBACK_REGION = 'wor'


def find_media(
    media_list: Sequence[MediaAsset],
    media_type: str,
    region_priorities: Sequence[str]
) -> Optional[MediaAsset]:
    """
    Find the first asset of a ScreenScraper type in region priority order.

    For each region in order, the first asset whose type matches and
    whose region is either absent or equal to that region is returned.

    Args:
        media_list: Assets attached to the game
        media_type: ScreenScraper media type (e.g., 'box-2D')
        region_priorities: Region codes, most preferred first

    Returns:
        Matching asset or None
    """
    for region in region_priorities:
        for media in media_list:
            if media.kind != media_type:
                continue
            if media.region is not None and media.region != region:
                continue
            return media
    return None


class MediaSelector:
    """
    Selects one asset per logical media kind.

    Handles:
    - Region prioritization
    - Upstream type synonyms (each synonym exhausted before the next)
    - Restricting selection to enabled kinds
    """

    def __init__(
        self,
        region_priorities: Optional[Sequence[str]] = None,
        enabled_kinds: Optional[Sequence[MediaKind]] = None
    ):
        """
        Initialize media selector.

        Args:
            region_priorities: Region priority list (e.g., ['fr', 'eu', 'us'])
            enabled_kinds: Logical kinds to select. If None, all kinds.
        """
        self.region_priorities: List[str] = (
            list(region_priorities) if region_priorities else list(DEFAULT_REGION_PRIORITIES)
        )
        self.enabled_kinds = set(enabled_kinds) if enabled_kinds is not None else set(MediaKind)

    def select(self, media_list: Sequence[MediaAsset], kind: MediaKind) -> Optional[MediaAsset]:
        """
        Select the best asset for a logical kind.

        Returns:
            Selected asset, or None when no upstream type matches
        """
        definition = get_definition(kind)
        for media_type in definition.upstream_types:
            media = find_media(media_list, media_type, self.region_priorities)
            if media is not None:
                logger.debug(f"  {kind.value}: selected {media_type} (region={media.region or 'N/A'})")
                return media
        logger.debug(f"  {kind.value}: no media available")
        return None

    def select_all(self, record: Optional[GameRecord]) -> Dict[MediaKind, MediaAsset]:
        """
        Select media for every enabled kind, in manifest order.

        Args:
            record: Game record, or None for an unknown game

        Returns:
            Ordered dict of kind to asset; kinds without media are absent
        """
        selected: Dict[MediaKind, MediaAsset] = {}
        if record is None:
            return selected

        logger.debug(f"Selecting media among {len(record.media)} assets")
        for definition in MEDIA_DEFINITIONS:
            if definition.kind not in self.enabled_kinds:
                continue
            media = self.select(record.media, definition.kind)
            if media is not None:
                selected[definition.kind] = media

        logger.debug(f"Final selection: {[kind.value for kind in selected]}")
        return selected


def media_region(asset: MediaAsset, definition: MediaDefinition) -> Optional[str]:
    """
    Region token used when building the retrieval URL.

    For kinds whose declared region is unreliable, the value of the
    ``media=`` query parameter of the asset URL is used instead
    (e.g., ``box-2D(wor)``).

    Returns:
        Region token, or None if the URL carries no media parameter
    """
    if not definition.region_from_url:
        return asset.region or FALLBACK_REGION

    values = parse_qs(urlsplit(asset.url).query).get('media')
    if not values or not values[0]:
        logger.warning(f"No media parameter in {definition.kind.value} URL, skipping asset")
        return None
    return values[0]


def retrieval_url(
    asset: MediaAsset,
    definition: MediaDefinition,
    system_id: int,
    game_id: str,
    media_base: str = DEFAULT_MEDIA_BASE_URL
) -> Optional[str]:
    """
    Build the public URL the package downloads the asset from.

    Returns:
        URL string, or None if the asset cannot be located
    """
    region = media_region(asset, definition)
    if region is None:
        return None
    remote = definition.remote_name.format(region=region, format=asset.format)
    return f"{media_base.rstrip('/')}/{system_id}/{game_id}/{remote}"
