"""
Per-system packaging profiles.

A profile decides how the package for one target system is assembled:
which extra sources it carries, what build() and package() do, and
where the description's path points. Profiles are looked up by system
id in a ProfileRegistry; unregistered ids use the default profile.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Union
from xml.sax.saxutils import escape as xml_escape

from rompom.config.systems import SystemProfile
from rompom.description.entry import ResolvedDescription
from rompom.scanner.cue_parser import CueError, parse_cue
from rompom.scanner.hash_calculator import calculate_hash, hash_bytes
from .descriptor import PackageDescriptor, escape_double_quotes, escape_single_quotes

logger = logging.getLogger(__name__)


DEFAULT_INSTALL_ROOT = 'userdata/roms'
DEFAULT_CATALOG_DIR = 'userdata/system/pacman/batoexec'
MEDIA_PATTERNS = '*.mp4 *.png *.jpg *.xml *.pdf'


@dataclass(frozen=True)
class PackagingContext:
    """Everything a profile needs to know about the package being built."""
    system: SystemProfile
    rom_filename: str
    romname: str
    install_root: str = DEFAULT_INSTALL_ROOT
    catalog_dir: str = DEFAULT_CATALOG_DIR
    rom_path: Optional[Path] = None   # Local ROM file, when there is one

    @property
    def system_dir(self) -> str:
        """Install directory of the system, relative to $pkgdir."""
        return f"{self.install_root}/{self.system.dir}"


def _sed_escape(text: str) -> str:
    """Escape a literal for a basic sed regex delimited by '|'."""
    for char in ('\\', '.', '*', '[', ']', '^', '$', '|'):
        text = text.replace(char, '\\' + char)
    return text


class PackagingProfile:
    """
    Base packaging profile.

    Subclasses override the contribute_* hooks they need; the shared
    helpers produce the media and catalog install steps every profile
    ends with.
    """

    name = 'base'

    def adjust_description(self, description: ResolvedDescription, context: PackagingContext) -> None:
        """Repoint the description before it is serialized."""

    def contribute_extra_sources(
        self,
        descriptor: PackageDescriptor,
        description: ResolvedDescription,
        context: PackagingContext
    ) -> None:
        """Append profile-specific sources (with checksums)."""

    def contribute_build_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        descriptor.build.append("  true")

    def contribute_install_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        raise NotImplementedError

    def _mkdir_steps(self, context: PackagingContext, *extra_dirs: str) -> List[str]:
        directories = [f"$pkgdir/{context.system_dir}/data/$_romname/"]
        directories.extend(f"$pkgdir/{context.system_dir}/{extra}" for extra in extra_dirs)
        directories.append(f"$pkgdir/{context.catalog_dir}/")

        steps = [f'  mkdir -m 0700 -p "{directories[0]}" \\']
        for directory in directories[1:-1]:
            steps.append(f'                   "{directory}" \\')
        steps.append(f'                   "{directories[-1]}"')
        return steps

    def _media_install_steps(self, context: PackagingContext) -> List[str]:
        return [
            f"  for file in $(ls {MEDIA_PATTERNS} 2>/dev/null); do",
            f'    install -Dm600 {{,"$pkgdir"/{context.system_dir}/data/$_romname/}}$file',
            "  done",
        ]

    def _catalog_steps(self, context: PackagingContext) -> List[str]:
        entry = f'"$pkgdir"/{context.catalog_dir}/${{pkgname[0]}}'
        return [
            f'  echo "gamelist = {context.system.dir}" > {entry}',
            f"  cat description.xml >> {entry}",
        ]


class DefaultProfile(PackagingProfile):
    """Single-file ROM copied into the system directory."""

    name = 'default'

    def contribute_install_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        rom = escape_double_quotes(context.rom_filename)
        descriptor.package.extend(self._mkdir_steps(context))
        descriptor.package.append(
            f'  install -Dm600 "{rom}" "$pkgdir"/{context.system_dir}/"{rom}"'
        )
        descriptor.package.extend(self._media_install_steps(context))
        descriptor.package.extend(self._catalog_steps(context))


class DiscImageProfile(PackagingProfile):
    """
    Cue sheet plus binary tracks.

    Tracks go to the per-game data directory, so the FILE references
    inside the cue sheet are rewritten at build time. The cue sheet name
    is only known once sources are extracted, so the description's path
    is patched during package().
    """

    name = 'disc-image'

    def contribute_extra_sources(
        self,
        descriptor: PackageDescriptor,
        description: ResolvedDescription,
        context: PackagingContext
    ) -> None:
        """Add the tracks the local cue sheet references as sources."""
        rom_path = context.rom_path
        if rom_path is None or rom_path.suffix.lower() != '.cue':
            return

        try:
            tracks = parse_cue(rom_path)
        except CueError as e:
            logger.warning(f"Cannot read tracks of {rom_path.name}: {e}")
            return

        for track in tracks:
            if not track.is_file():
                logger.warning(f"Track {track.name} referenced by {rom_path.name} not found")
                continue
            descriptor.add_source(escape_single_quotes(track.name), calculate_hash(track, 'sha1'))
            descriptor.local_sources[track.name] = track

    def contribute_build_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        descriptor.build.extend([
            "  IFS=$'\\n'",
            "  cuefile=$(ls *.cue)",
            '  sed -i "s@FILE \\"@FILE \\"data/$_romname/@g" "${cuefile}"',
        ])

    def contribute_install_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        rom_pattern = escape_double_quotes(_sed_escape(xml_escape(context.rom_filename)))
        descriptor.package.append("  IFS=$'\\n'")
        descriptor.package.extend(self._mkdir_steps(context))
        descriptor.package.extend([
            "  cuefile=$(ls *.cue)",
            f'  install -Dm600 "${{cuefile}}" "$pkgdir"/{context.system_dir}/"${{cuefile}}"',
            "  for file in $(ls *.bin); do",
            f'    install -Dm600 {{,"$pkgdir"/{context.system_dir}/data/$_romname/}}${{file}}',
            "  done",
            f'  sed -i "s|{rom_pattern}|${{cuefile}}|" description.xml',
        ])
        descriptor.package.extend(self._media_install_steps(context))
        descriptor.package.extend(self._catalog_steps(context))


class CompressedDiscProfile(PackagingProfile):
    """
    Compressed disc tracks (chd) behind an m3u playlist.

    Tracks are installed into a hidden data directory; the playlist is
    the visible entry in the system directory.
    """

    name = 'compressed-disc'

    def adjust_description(self, description: ResolvedDescription, context: PackagingContext) -> None:
        description.path = f"./{context.romname}.m3u"

    def contribute_build_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        descriptor.build.extend([
            "  IFS=$'\\n'",
            '  rm -f "${_romname}.m3u"',
            "  for file in $(ls *.chd); do",
            '    echo ".data/$_romname/${file}" >> "${_romname}.m3u"',
            "  done",
        ])

    def contribute_install_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        hidden = f"$pkgdir/{context.system_dir}/.data/$_romname/"
        descriptor.package.append("  IFS=$'\\n'")
        descriptor.package.extend(self._mkdir_steps(context, ".data/$_romname/"))
        descriptor.package.extend([
            f'  install -m 0600 *.chd "{hidden}"',
            f'  install -m 0600 "${{_romname}}.m3u" "$pkgdir/{context.system_dir}/"',
        ])
        descriptor.package.extend(self._media_install_steps(context))
        descriptor.package.extend(self._catalog_steps(context))


class StandaloneLauncherProfile(PackagingProfile):
    """
    ROM run by an external engine through a generated launcher script.

    The launcher sets the library search path and passes the ROM as the
    engine's only argument.
    """

    name = 'launcher'
    launcher_source = 'launcher'

    def __init__(self, engine: str):
        if not engine:
            raise ValueError("Launcher profile requires an engine binary name")
        self.engine = engine

    def render_launcher(self, context: PackagingContext) -> str:
        return (
            "#!/bin/sh\n"
            'DIR="$(dirname "$(readlink -f "$0")")"\n'
            'cd "${DIR}/.data/" || exit 1\n'
            "\n"
            'export LD_LIBRARY_PATH="${DIR}/.data/lib/"\n'
            f"exec ./{self.engine} '{escape_single_quotes(context.rom_filename)}'\n"
        )

    def adjust_description(self, description: ResolvedDescription, context: PackagingContext) -> None:
        description.path = f"./{context.romname}.sh"

    def contribute_extra_sources(
        self,
        descriptor: PackageDescriptor,
        description: ResolvedDescription,
        context: PackagingContext
    ) -> None:
        content = self.render_launcher(context).encode('utf-8')
        descriptor.generated_files[self.launcher_source] = content
        descriptor.add_source(self.launcher_source, hash_bytes(content))

    def contribute_install_steps(self, descriptor: PackageDescriptor, context: PackagingContext) -> None:
        rom = escape_double_quotes(context.rom_filename)
        descriptor.package.extend(self._mkdir_steps(context, ".data/"))
        descriptor.package.extend([
            f'  install -Dm600 "{rom}" "$pkgdir"/{context.system_dir}/.data/"{rom}"',
            f'  install -Dm700 {self.launcher_source} "$pkgdir"/{context.system_dir}/"$_romname".sh',
        ])
        descriptor.package.extend(self._media_install_steps(context))
        descriptor.package.extend(self._catalog_steps(context))


ProfileFactory = Callable[[Optional[str]], PackagingProfile]

PROFILE_TYPES: Dict[str, ProfileFactory] = {
    'default': lambda arg: DefaultProfile(),
    'disc-image': lambda arg: DiscImageProfile(),
    'compressed-disc': lambda arg: CompressedDiscProfile(),
    'launcher': lambda arg: StandaloneLauncherProfile(arg or ''),
}


def create_profile(spec: str) -> PackagingProfile:
    """
    Create a profile from a configuration string.

    Examples:
        "disc-image"        -> DiscImageProfile()
        "launcher:OpenBOR"  -> StandaloneLauncherProfile("OpenBOR")

    Raises:
        ValueError: If the profile type is unknown
    """
    type_name, _, argument = spec.partition(':')
    factory = PROFILE_TYPES.get(type_name.strip())
    if factory is None:
        raise ValueError(
            f"Unknown packaging profile '{type_name}' "
            f"(expected one of: {', '.join(sorted(PROFILE_TYPES))})"
        )
    return factory(argument.strip() or None)


class ProfileRegistry:
    """Maps system ids to packaging profiles."""

    def __init__(self, default: Optional[PackagingProfile] = None):
        self.default = default or DefaultProfile()
        self._profiles: Dict[int, PackagingProfile] = {}

    def register(self, system_id: int, profile: PackagingProfile) -> None:
        self._profiles[int(system_id)] = profile

    def get(self, system_id: int) -> PackagingProfile:
        """Profile for an exact system id, or the default profile."""
        return self._profiles.get(int(system_id), self.default)

    def __contains__(self, system_id: object) -> bool:
        return system_id in self._profiles


def default_registry() -> ProfileRegistry:
    """Registry with the built-in system profiles."""
    registry = ProfileRegistry()
    registry.register(20, DiscImageProfile())        # Mega-CD / Sega CD
    registry.register(22, CompressedDiscProfile())   # Saturn
    registry.register(57, CompressedDiscProfile())   # PlayStation
    registry.register(214, StandaloneLauncherProfile('OpenBOR'))
    return registry


def build_registry(overrides: Optional[Mapping[Union[int, str], str]] = None) -> ProfileRegistry:
    """
    Built-in registry with configured overrides applied.

    Args:
        overrides: System id to profile spec (see create_profile)

    Raises:
        ValueError: If an id is not numeric or a spec is unknown
    """
    registry = default_registry()
    for system_id, spec in (overrides or {}).items():
        try:
            numeric_id = int(system_id)
        except (TypeError, ValueError):
            raise ValueError(f"Packaging profile key must be a system id, got '{system_id}'")
        registry.register(numeric_id, create_profile(spec))
        logger.debug(f"Packaging profile for system {numeric_id}: {spec}")
    return registry
