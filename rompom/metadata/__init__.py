"""
Game metadata model and localization resolution for rompom.
"""

from .game_record import GameRecord, GenreEntry, LocalizedValue, MediaAsset, RomInfo
from .localization import (
    DEFAULT_PRIORITIES,
    UNKNOWN,
    LocalizationResolver,
    normalize_release_date,
)

__all__ = [
    'GameRecord',
    'GenreEntry',
    'LocalizedValue',
    'MediaAsset',
    'RomInfo',
    'DEFAULT_PRIORITIES',
    'UNKNOWN',
    'LocalizationResolver',
    'normalize_release_date',
]
