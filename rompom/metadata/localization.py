"""
Language and region fallback resolution.

Picks one value out of the localized alternatives of a game record using
an ordered priority list of region/language codes. Resolution never
fails: every path ends in a documented default.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .game_record import GameRecord, LocalizedValue

logger = logging.getLogger(__name__)


DEFAULT_PRIORITIES = ['fr', 'eu', 'en', 'us', 'wor', 'jp', 'ss']
UNKNOWN = 'Unknown'

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
UNKNOWN_DATE = '0000-00-00'


def normalize_release_date(text: Optional[str]) -> str:
    """
    Normalize an upstream release date to the compact sortable form.

    ScreenScraper dates are either a bare year or ``YYYY-MM-DD``, with
    ``0000-00-00`` meaning unknown.

    Examples:
        "1990"        -> "19900101T000000"
        "1990-05-17"  -> "19900517T000000"
        "0000-00-00"  -> "19700101T000000"
        "bad"         -> "19700101T000000"

    Args:
        text: Raw date text (or None)

    Returns:
        Date formatted as YYYYMMDDTHHMMSS, epoch when unknown
    """
    moment = EPOCH

    if text and len(text) == 4:
        moment = _parse_date(f"{text}-01-01") or EPOCH
    elif text and len(text) == 10 and text != UNKNOWN_DATE:
        moment = _parse_date(text) or EPOCH

    # strftime does not zero-pad years below 1000 on every platform
    return (
        f"{moment.year:04d}{moment.month:02d}{moment.day:02d}"
        f"T{moment.hour:02d}{moment.minute:02d}{moment.second:02d}"
    )


def _parse_date(text: str) -> Optional[datetime]:
    try:
        return datetime.strptime(text, '%Y-%m-%d').replace(tzinfo=timezone.utc)
    except ValueError:
        logger.debug(f"Unparsable release date '{text}', using epoch")
        return None


class LocalizationResolver:
    """
    Resolves localized fields of a GameRecord to single values.

    The priority list is supplied by configuration; the resolver holds
    no other state.
    """

    def __init__(self, priorities: Optional[Sequence[str]] = None, default: str = UNKNOWN):
        """
        Initialize resolver.

        Args:
            priorities: Ordered region/language codes, most preferred first
            default: Value returned when no code matches
        """
        self.priorities: List[str] = list(priorities) if priorities else list(DEFAULT_PRIORITIES)
        self.default = default

    def resolve(self, value: LocalizedValue, priorities: Optional[Sequence[str]] = None) -> str:
        """Return the value of the first priority code present, else the default."""
        for code in priorities if priorities is not None else self.priorities:
            text = value.get(code)
            if text is not None:
                return text
        return self.default

    def resolve_name(self, record: GameRecord) -> str:
        """
        Resolve the game name.

        The ROM's own region list is tried first, code by code, before
        falling back to the generic priority list.
        """
        for code in record.rom_regions():
            text = record.names.get(code)
            if text is not None:
                logger.debug(f"Name resolved from ROM region '{code}'")
                return text
        return self.resolve(record.names)

    def resolve_description(self, record: GameRecord) -> str:
        return self.resolve(record.synopsis)

    def resolve_date(self, record: GameRecord) -> str:
        """Resolve and normalize the release date (YYYYMMDDTHHMMSS)."""
        raw = self.resolve(record.release_dates)
        return normalize_release_date(raw if raw != self.default else None)

    def resolve_genre(self, record: GameRecord) -> str:
        """
        Resolve the principal genre name.

        Only genres flagged principal are considered, even when a
        non-principal entry carries a name in a preferred language.
        """
        principal = [genre for genre in record.genres if genre.principal]
        for code in self.priorities:
            for genre in principal:
                text = genre.names.get(code)
                if text is not None:
                    return text
        return self.default
