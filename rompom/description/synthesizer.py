"""
Description synthesis.

Composes localization resolution and media selection into one
ResolvedDescription per game.
"""

import logging
from typing import Optional

from rompom.metadata.game_record import GameRecord
from rompom.metadata.localization import LocalizationResolver
from rompom.media.media_types import get_definition
from rompom.media.selector import MediaSelector
from .entry import ResolvedDescription

logger = logging.getLogger(__name__)

# ScreenScraper notes are out of 20
RATING_SCALE = 20.0


def convert_rating(text: Optional[str]) -> float:
    """
    Convert a ScreenScraper note (0-20) to a 0.0-1.0 fraction.

    Missing or unparsable notes yield 0.0; out-of-range values are clamped.
    """
    if not text:
        return 0.0
    try:
        value = float(text) / RATING_SCALE
    except ValueError:
        logger.debug(f"Unparsable rating '{text}', using 0.0")
        return 0.0
    if value != value:  # NaN
        return 0.0
    return min(max(value, 0.0), 1.0)


class DescriptionSynthesizer:
    """Builds ResolvedDescription objects from provider records."""

    def __init__(self, resolver: LocalizationResolver, selector: MediaSelector):
        self.resolver = resolver
        self.selector = selector

    def synthesize(
        self,
        record: Optional[GameRecord],
        rom_filename: str,
        romname: str
    ) -> ResolvedDescription:
        """
        Resolve a game record into a single-language description.

        Args:
            record: Provider record, or None when the game is unknown
            rom_filename: ROM file name as packaged (e.g., "Game (USA).zip")
            romname: Normalized ROM name, used for media directory paths

        Returns:
            ResolvedDescription with every field populated
        """
        path = f"./{rom_filename}"

        if record is None:
            logger.info(f"No metadata for {rom_filename}, using defaults")
            return ResolvedDescription(path=path)

        description = ResolvedDescription(
            path=path,
            name=self.resolver.resolve_name(record),
            desc=self.resolver.resolve_description(record),
            rating=convert_rating(record.rating_text),
            releasedate=self.resolver.resolve_date(record),
            developer=record.developer or self.resolver.default,
            publisher=record.publisher or self.resolver.default,
            genre=self.resolver.resolve_genre(record),
            players=record.players or self.resolver.default,
            region=record.rom.regions if record.rom and record.rom.regions else '',
            game_id=record.game_id,
        )

        for kind, asset in self.selector.select_all(record).items():
            definition = get_definition(kind)
            description.media[kind] = asset
            description.media_paths[definition.tag] = (
                f"./data/{romname}/{definition.artifact_name(asset.format)}"
            )

        logger.debug(f"Resolved '{description.name}' with {len(description.media)} media")
        return description
