"""
Single-game packaging workflow.

Runs the whole pipeline for one ROM: hash, metadata lookup, description
synthesis, media retrieval, descriptor assembly and output writing.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from rompom.api.client import ScreenScraperClient
from rompom.config.systems import SystemProfile
from rompom.description.synthesizer import DescriptionSynthesizer
from rompom.media.fetcher import AssetFetcher, AssetUnavailable
from rompom.media.media_types import get_definition
from rompom.media.selector import retrieval_url
from rompom.package.builder import DESCRIPTION_FILENAME, BuildResult, ManifestBuilder
from rompom.package.name_normalizer import normalize_name
from rompom.scanner.hash_calculator import calculate_hash

logger = logging.getLogger(__name__)


PKGBUILD_FILENAME = 'PKGBUILD'


class WriteFailed(Exception):
    """An output file could not be written."""

    def __init__(self, filename: Path, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Failed to write {filename}: {reason}")


@dataclass
class PackageRequest:
    """What to package, as given on the command line."""
    system: SystemProfile
    rom_path: Path
    package_name: Optional[str] = None   # Defaults to the ROM file stem
    rom_url: Optional[str] = None
    game_id: Optional[str] = None

    @property
    def rom_filename(self) -> str:
        return self.rom_path.name

    @property
    def effective_package_name(self) -> str:
        return self.package_name or self.rom_path.stem


@dataclass
class PackageResult:
    """Outcome of one packaging run."""
    output_dir: Path
    build: BuildResult
    written: List[Path] = field(default_factory=list)
    unavailable_assets: List[AssetUnavailable] = field(default_factory=list)


def output_directory(rom_path: Path) -> Path:
    """Directory the package files go to: the ROM path without extension."""
    directory = rom_path.with_suffix('')
    if directory == rom_path:
        directory = rom_path.with_name(f"{rom_path.name}.pkg")
    return directory


class Packager:
    """
    Packages one ROM per run.

    Media that cannot be retrieved is reported and left out of the
    package; provider and write failures abort the run.
    """

    def __init__(
        self,
        provider: ScreenScraperClient,
        synthesizer: DescriptionSynthesizer,
        builder: ManifestBuilder,
        fetcher: Optional[AssetFetcher] = None
    ):
        """
        Initialize packager.

        Args:
            provider: Metadata provider
            synthesizer: Description synthesizer
            builder: Manifest builder
            fetcher: Asset fetcher; when None, declared checksums are used
                and nothing is downloaded
        """
        self.provider = provider
        self.synthesizer = synthesizer
        self.builder = builder
        self.fetcher = fetcher

    def run(self, request: PackageRequest) -> PackageResult:
        """
        Package one ROM.

        Raises:
            ProviderUnavailable: If the metadata lookup fails
            ProviderMalformed: If the metadata response is unparsable
            WriteFailed: If an output file cannot be written
        """
        rom_filename = request.rom_filename
        logger.info(f"Packaging {rom_filename} for {request.system.name}")

        rom_checksum = calculate_hash(request.rom_path, 'sha1')
        record = self.provider.get_game(
            request.system,
            rom_filename,
            sha1=rom_checksum,
            game_id=request.game_id,
        )

        package_name = request.effective_package_name
        romname = normalize_name(package_name)
        description = self.synthesizer.synthesize(record, rom_filename, romname)

        output_dir = output_directory(request.rom_path)
        unavailable = self._fetch_media(description, request.system, output_dir)

        build = self.builder.build(
            request.system,
            description,
            rom_filename,
            rom_checksum,
            package_name,
            rom_url=request.rom_url,
            rom_path=request.rom_path,
        )

        files: Dict[str, bytes] = {DESCRIPTION_FILENAME: build.description_xml}
        files.update(build.descriptor.generated_files)
        files[PKGBUILD_FILENAME] = build.descriptor.render().encode('utf-8')

        written = stage_local_sources(output_dir, build.descriptor.local_sources)
        written.extend(write_outputs(output_dir, files))
        logger.info(f"Wrote {output_dir / PKGBUILD_FILENAME}")

        return PackageResult(
            output_dir=output_dir,
            build=build,
            written=written,
            unavailable_assets=unavailable,
        )

    def _fetch_media(self, description, system: SystemProfile, output_dir: Path) -> List[AssetUnavailable]:
        """Download selected media; unavailable assets are dropped from the description."""
        failures: List[AssetUnavailable] = []
        if self.fetcher is None:
            return failures

        for kind, asset in list(description.media.items()):
            definition = get_definition(kind)
            url = retrieval_url(asset, definition, system.id, description.game_id, self.builder.media_base)
            if url is None:
                continue

            destination = output_dir / definition.artifact_name(asset.format)
            try:
                self.fetcher.fetch(asset, destination, url)
            except AssetUnavailable as e:
                logger.warning(f"{kind.value} unavailable, leaving it out: {e}")
                failures.append(e)
                description.drop_media(kind, definition.tag)

        return failures


def stage_local_sources(output_dir: Path, local_sources: Dict[str, Path]) -> List[Path]:
    """
    Copy local source files next to the PKGBUILD.

    A target that already exists with the same size and timestamp is left
    as it is.

    Raises:
        WriteFailed: If a file cannot be copied
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteFailed(output_dir, str(e)) from e

    staged = []
    for name, source in local_sources.items():
        target = output_dir / name

        if target.exists():
            source_stat = source.stat()
            target_stat = target.stat()
            if (
                source_stat.st_size == target_stat.st_size
                and abs(source_stat.st_mtime - target_stat.st_mtime) < 2
            ):
                logger.debug(f"Skipping {name} (already staged)")
                staged.append(target)
                continue

        try:
            shutil.copy2(source, target)
        except OSError as e:
            raise WriteFailed(target, str(e)) from e
        logger.debug(f"Copied {name}")
        staged.append(target)
    return staged


def write_outputs(output_dir: Path, files: Dict[str, bytes]) -> List[Path]:
    """
    Write output files so that none is left half-written.

    Every file is first written to a temporary name; only when all of
    them succeeded are they moved into place.

    Raises:
        WriteFailed: If a file cannot be written
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteFailed(output_dir, str(e)) from e

    staged = []
    try:
        for name, content in files.items():
            target = output_dir / name
            temp_path = target.with_name(target.name + '.tmp')
            staged.append((temp_path, target))
            temp_path.write_bytes(content)
    except OSError as e:
        for temp_path, _ in staged:
            if temp_path.exists():
                temp_path.unlink()
        raise WriteFailed(staged[-1][1], str(e)) from e

    written = []
    for temp_path, target in staged:
        try:
            temp_path.replace(target)
        except OSError as e:
            raise WriteFailed(target, str(e)) from e
        logger.debug(f"Writing {target}")
        written.append(target)
    return written
