"""
Game data structures as returned by the metadata provider.

These mirror the loosely-typed ScreenScraper ``jeu`` record closely enough
to resolve from, without committing to any single language or region.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


class LocalizedValue:
    """
    Immutable mapping of region/language code to text.

    Built from upstream lists such as ``[{"region": "us", "text": "..."}]``.
    When a code appears more than once, the first occurrence wins.
    """

    __slots__ = ('_items',)

    def __init__(self, items: Iterable[Tuple[str, str]] = ()):
        values: Dict[str, str] = {}
        for code, text in items:
            if code is None or text is None:
                continue
            values.setdefault(code, text)
        object.__setattr__(self, '_items', values)

    def __setattr__(self, name, value):
        raise AttributeError("LocalizedValue is immutable")

    @classmethod
    def from_entries(cls, entries: Optional[List[Dict]], key: str) -> 'LocalizedValue':
        """
        Build from upstream entries keyed by ``key`` ('region' or 'langue').

        Args:
            entries: List of dicts with ``key`` and ``text`` members (or None)
            key: Name of the code member

        Returns:
            LocalizedValue (empty when entries is None)
        """
        if not entries:
            return cls()
        return cls(
            (entry.get(key), entry.get('text'))
            for entry in entries
            if isinstance(entry, dict)
        )

    def get(self, code: str) -> Optional[str]:
        return self._items.get(code)

    def codes(self) -> List[str]:
        return list(self._items)

    def __contains__(self, code: object) -> bool:
        return code in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalizedValue):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"LocalizedValue({self._items!r})"


@dataclass(frozen=True)
class GenreEntry:
    """A genre classification with its localized names."""
    id: str
    principal: bool
    names: LocalizedValue = field(default_factory=LocalizedValue)


@dataclass
class MediaAsset:
    """
    A single media entry attached to a game.

    The declared checksums come from the provider and are advisory only.
    ``verified_sha1`` is filled in by the asset fetcher after the file
    has actually been retrieved (or found intact on disk).
    """
    kind: str                       # Upstream media type (e.g., 'box-2D', 'ss')
    url: str
    format: str = ''
    region: Optional[str] = None
    parent: str = ''
    declared_crc: str = ''
    declared_md5: str = ''
    declared_sha1: str = ''
    verified_sha1: Optional[str] = None

    @property
    def checksum(self) -> str:
        """Checksum to publish: verified when known, declared otherwise."""
        if self.verified_sha1:
            return self.verified_sha1
        return self.declared_sha1.lower() if self.declared_sha1 else ''


@dataclass(frozen=True)
class RomInfo:
    """The provider's view of the ROM that matched the query."""
    filename: str = ''
    regions: Optional[str] = None   # Comma-separated region preference list
    size: Optional[str] = None
    crc: Optional[str] = None
    md5: Optional[str] = None
    sha1: Optional[str] = None

    def region_list(self) -> List[str]:
        """Split the ROM's region tag into individual codes."""
        if not self.regions:
            return []
        return [code.strip() for code in self.regions.split(',') if code.strip()]


@dataclass
class GameRecord:
    """
    Raw per-game entity from the metadata provider.

    Every localized field defaults to empty so that partially populated
    responses resolve to documented defaults.
    """
    game_id: str
    names: LocalizedValue = field(default_factory=LocalizedValue)
    synopsis: LocalizedValue = field(default_factory=LocalizedValue)
    release_dates: LocalizedValue = field(default_factory=LocalizedValue)
    genres: List[GenreEntry] = field(default_factory=list)
    developer: Optional[str] = None
    publisher: Optional[str] = None
    players: Optional[str] = None
    rating_text: Optional[str] = None  # ScreenScraper 0-20 scale
    system_name: Optional[str] = None
    media: List[MediaAsset] = field(default_factory=list)
    rom: Optional[RomInfo] = None

    def rom_regions(self) -> List[str]:
        return self.rom.region_list() if self.rom else []
