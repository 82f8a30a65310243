"""Target system definitions from the configuration file."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class SystemsError(Exception):
    """System definition errors."""
    pass


@dataclass(frozen=True)
class SystemProfile:
    """Represents one target system (ScreenScraper system id + install layout)."""
    id: int
    name: str
    dir: str
    basename: str                   # Package name prefix (e.g., 'segacd-rom-')
    depends: Optional[str] = None
    checksum: Optional[str] = None  # 'disable' skips checksum lookups

    @property
    def checksum_disabled(self) -> bool:
        return self.checksum == 'disable'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SystemProfile':
        """
        Build a SystemProfile from a configuration mapping.

        Raises:
            SystemsError: If a required key is missing or the id is not numeric
        """
        missing = [key for key in ('id', 'name', 'dir', 'basename') if data.get(key) in (None, '')]
        if missing:
            raise SystemsError(f"System entry {data!r} is missing: {', '.join(missing)}")
        try:
            system_id = int(data['id'])
        except (TypeError, ValueError):
            raise SystemsError(f"System id must be an integer, got '{data['id']}'")

        return cls(
            id=system_id,
            name=str(data['name']),
            dir=str(data['dir']),
            basename=str(data['basename']),
            depends=data.get('depends'),
            checksum=data.get('checksum'),
        )


UNKNOWN_SYSTEM = SystemProfile(
    id=0,
    name='unknown',
    dir='unknown',
    basename='unknown-rom-',
)


def parse_systems(entries: Optional[List[Dict[str, Any]]]) -> List[SystemProfile]:
    """Parse the ``systems`` configuration list."""
    return [SystemProfile.from_dict(entry) for entry in entries or []]


def find_system(systems: List[SystemProfile], system_id: int) -> SystemProfile:
    """
    Find a system by ScreenScraper id.

    Returns:
        Matching SystemProfile, or UNKNOWN_SYSTEM if none matches
    """
    for system in systems:
        if system.id == system_id:
            return system
    return UNKNOWN_SYSTEM
