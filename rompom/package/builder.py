"""
Package descriptor assembly.

Combines the resolved description, the system's packaging profile and
the selected media into one PackageDescriptor.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from rompom.config.systems import SystemProfile
from rompom.description.entry import ResolvedDescription
from rompom.description.xml_writer import DescriptionWriter
from rompom.media.media_types import MEDIA_DEFINITIONS
from rompom.media.selector import DEFAULT_MEDIA_BASE_URL, retrieval_url
from rompom.scanner.hash_calculator import hash_bytes
from .descriptor import PackageDescriptor, escape_single_quotes
from .name_normalizer import normalize_name
from .profiles import (
    DEFAULT_CATALOG_DIR,
    DEFAULT_INSTALL_ROOT,
    PackagingContext,
    ProfileRegistry,
    default_registry,
)

logger = logging.getLogger(__name__)


DESCRIPTION_FILENAME = 'description.xml'
GAME_PAGE_URL = 'https://screenscraper.fr/gameinfos.php?gameid={game_id}'


@dataclass
class BuildResult:
    """A fully constructed package, ready to be written."""
    descriptor: PackageDescriptor
    description: ResolvedDescription
    description_xml: bytes


class ManifestBuilder:
    """
    Builds PackageDescriptor objects.

    Source order is fixed: ROM, description file, media in manifest kind
    order, then profile extras. Identical input yields identical output.
    """

    def __init__(
        self,
        registry: Optional[ProfileRegistry] = None,
        writer: Optional[DescriptionWriter] = None,
        media_base: str = DEFAULT_MEDIA_BASE_URL,
        install_root: str = DEFAULT_INSTALL_ROOT,
        catalog_dir: str = DEFAULT_CATALOG_DIR
    ):
        """
        Initialize builder.

        Args:
            registry: Packaging profiles by system id (built-ins if None)
            writer: Description serializer
            media_base: Base URL media is downloaded from
            install_root: System directories' parent, relative to $pkgdir
            catalog_dir: Catalog entry directory, relative to $pkgdir
        """
        self.registry = registry or default_registry()
        self.writer = writer or DescriptionWriter()
        self.media_base = media_base
        self.install_root = install_root
        self.catalog_dir = catalog_dir

    def build(
        self,
        system: SystemProfile,
        description: ResolvedDescription,
        rom_filename: str,
        rom_checksum: str,
        package_name: str,
        rom_url: Optional[str] = None,
        rom_path: Optional[Path] = None
    ) -> BuildResult:
        """
        Build the package descriptor for one game.

        Args:
            system: Target system
            description: Resolved description (repointed in place by the profile)
            rom_filename: ROM file name as packaged
            rom_checksum: sha1 of the ROM
            package_name: Name to normalize into the package name
            rom_url: Where makepkg downloads the ROM from (local file if None)
            rom_path: Local ROM file, staged next to the PKGBUILD when there
                is no rom_url

        Returns:
            BuildResult holding the descriptor and the serialized description
        """
        romname = normalize_name(package_name)
        profile = self.registry.get(system.id)
        context = PackagingContext(
            system=system,
            rom_filename=rom_filename,
            romname=romname,
            install_root=self.install_root,
            catalog_dir=self.catalog_dir,
            rom_path=rom_path,
        )
        logger.debug(f"Packaging {rom_filename} for {system.name} with '{profile.name}' profile")

        media_sources = self._media_sources(description, system)

        profile.adjust_description(description, context)
        description_xml = self.writer.to_bytes(description)

        descriptor = PackageDescriptor(
            pkgname=f"{system.basename}{romname}",
            romname=romname,
            pkgdesc=description.name,
            url=GAME_PAGE_URL.format(game_id=description.game_id) if description.game_id else '',
            depends=system.depends,
        )

        rom_entry = escape_single_quotes(rom_filename)
        if rom_url:
            rom_entry = f"{rom_entry}::{rom_url}"
        elif rom_path is not None:
            descriptor.local_sources[rom_filename] = rom_path
        descriptor.add_source(rom_entry, rom_checksum)
        descriptor.add_source(DESCRIPTION_FILENAME, hash_bytes(description_xml))

        for entry, checksum in media_sources:
            descriptor.add_source(entry, checksum)

        profile.contribute_extra_sources(descriptor, description, context)
        profile.contribute_build_steps(descriptor, context)
        profile.contribute_install_steps(descriptor, context)

        return BuildResult(
            descriptor=descriptor,
            description=description,
            description_xml=description_xml,
        )

    def _media_sources(
        self,
        description: ResolvedDescription,
        system: SystemProfile
    ) -> List[Tuple[str, str]]:
        """
        Source entries for the selected media, in manifest order.

        Assets without a checksum or a retrievable URL are dropped from
        the description as well, so it never points at a missing file.
        """
        sources = []
        for definition in MEDIA_DEFINITIONS:
            asset = description.media.get(definition.kind)
            if asset is None:
                continue

            checksum = asset.checksum
            url = retrieval_url(asset, definition, system.id, description.game_id, self.media_base)
            if not checksum or url is None:
                logger.warning(f"Skipping {definition.kind.value}: no checksum or retrievable URL")
                description.drop_media(definition.kind, definition.tag)
                continue

            sources.append((f"{definition.artifact_name(asset.format)}::{url}", checksum))
        return sources
