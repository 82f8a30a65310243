"""
Resolved description of a single game.

Defines the single-language record written to description.xml.
"""

from dataclasses import dataclass, field
from typing import Dict

from rompom.metadata.game_record import MediaAsset
from rompom.metadata.localization import UNKNOWN
from rompom.media.media_types import MediaKind

EPOCH_RELEASE_DATE = '19700101T000000'


@dataclass
class ResolvedDescription:
    """
    One fully resolved view of a game record.

    Every scalar field is always populated; defaults stand in for
    anything the provider did not supply. Text fields are stored
    decoded by the response parser; lxml handles XML escaping when writing.
    """
    path: str                           # Relative path to ROM (e.g., "./Game.zip")
    name: str = UNKNOWN
    desc: str = UNKNOWN
    rating: float = 0.0                 # 0.0-1.0
    releasedate: str = EPOCH_RELEASE_DATE  # YYYYMMDDTHHMMSS
    developer: str = UNKNOWN
    publisher: str = UNKNOWN
    genre: str = UNKNOWN
    players: str = UNKNOWN
    region: str = ''
    game_id: str = ''

    # Selected assets by logical kind, and their package-relative paths by tag
    media: Dict[MediaKind, MediaAsset] = field(default_factory=dict)
    media_paths: Dict[str, str] = field(default_factory=dict)

    def drop_media(self, kind: MediaKind, tag: str) -> None:
        """Forget a selected asset (e.g., after it failed to download)."""
        self.media.pop(kind, None)
        self.media_paths.pop(tag, None)
