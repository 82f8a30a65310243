"""
Package descriptor data structure and PKGBUILD rendering.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


def escape_single_quotes(text: str) -> str:
    """Escape text for use inside a single-quoted shell string."""
    return text.replace("'", "'\\''")


def escape_double_quotes(text: str) -> str:
    """Escape text for use inside a double-quoted shell string."""
    for char in ('\\', '"', '$', '`'):
        text = text.replace(char, '\\' + char)
    return text


@dataclass
class PackageDescriptor:
    """
    Declarative build manifest for one game.

    ``sources`` and ``checksums`` are parallel arrays: entry i of each
    always describes the same artifact. Append only through
    ``add_source`` to keep them paired.
    """
    pkgname: str
    romname: str
    pkgdesc: str
    url: str = ''
    depends: Optional[str] = None
    pkgver: str = '1'
    pkgrel: int = 1
    sources: List[str] = field(default_factory=list)
    checksums: List[str] = field(default_factory=list)
    build: List[str] = field(default_factory=list)
    package: List[str] = field(default_factory=list)

    # Extra files written next to the PKGBUILD (name -> content)
    generated_files: Dict[str, bytes] = field(default_factory=dict)

    # Local files copied next to the PKGBUILD (source name -> path)
    local_sources: Dict[str, Path] = field(default_factory=dict)

    def add_source(self, entry: str, checksum: str) -> None:
        """
        Append a source and its checksum together.

        Args:
            entry: Source entry, optionally ``name::url``
            checksum: sha1 of the artifact

        Raises:
            ValueError: If the checksum is empty
        """
        if not checksum:
            raise ValueError(f"Source '{entry}' has no checksum")
        self.sources.append(entry)
        self.checksums.append(checksum)

    def render(self) -> str:
        """Render the descriptor as PKGBUILD text."""
        lines = [
            f"pkgname=('{self.pkgname}')",
            f'_romname="{escape_double_quotes(self.romname)}"',
            f"pkgver={self.pkgver}",
            f"pkgrel={self.pkgrel}",
            f'pkgdesc="{escape_double_quotes(self.pkgdesc)}"',
            "arch=('any')",
            f'url="{self.url}"',
            "license=('All rights reserved')",
        ]

        if self.depends:
            lines.append(f"depends=('{self.depends}')")

        lines.append("source=(")
        lines.extend(f"  '{item}'" for item in self.sources)
        lines.append(")")

        lines.append("sha1sums=(")
        lines.extend(f"  '{item}'" for item in self.checksums)
        lines.append(")")

        lines.append("build()")
        lines.append("{")
        lines.extend(self.build)
        lines.append("}")

        lines.append("package()")
        lines.append("{")
        lines.extend(self.package)
        lines.append("}")

        return "\n".join(lines) + "\n"
