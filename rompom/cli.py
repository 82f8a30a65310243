"""Command-line interface for rompom."""

import sys
import logging
import argparse
import httpx
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

from rompom import __version__
from rompom.config.loader import (
    ConfigError,
    get_config_value,
    load_config,
    load_reference,
)
from rompom.config.validator import validate_config, ValidationError
from rompom.config.systems import find_system, parse_systems, UNKNOWN_SYSTEM
from rompom.api.client import ScreenScraperClient
from rompom.api.error_handler import ProviderMalformed, ProviderUnavailable
from rompom.description.synthesizer import DescriptionSynthesizer
from rompom.metadata.localization import LocalizationResolver
from rompom.media.fetcher import AssetFetcher
from rompom.media.media_types import parse_media_kinds
from rompom.media.selector import DEFAULT_MEDIA_BASE_URL, MediaSelector
from rompom.package.builder import ManifestBuilder
from rompom.package.profiles import DEFAULT_CATALOG_DIR, DEFAULT_INSTALL_ROOT, build_registry
from rompom.workflow.packager import Packager, PackageRequest, WriteFailed


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='rompom',
        description='Package a ROM, its ScreenScraper metadata and media as a PKGBUILD',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Package a Mega Drive ROM
  rompom --system 1 --rom "Sonic The Hedgehog (USA, Europe).zip"

  # Force the ScreenScraper game id and a package name
  rompom --system 20 --rom "Snatcher (USA).zip" --id 2419 --name Snatcher

  # Use a reference file instead of --system/--id
  rompom --reference snatcher.yml --rom "Snatcher (USA).zip"
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '-c', '--config',
        type=Path,
        metavar='PATH',
        help='Path to rompom.yml (default: ~/.config/rompom.yml)'
    )

    parser.add_argument(
        '-s', '--system',
        type=int,
        metavar='SYSTEM',
        help='ScreenScraper system id'
    )

    parser.add_argument(
        '-r', '--rom',
        type=Path,
        metavar='ROM',
        help='ROM file to package'
    )

    parser.add_argument(
        '-i', '--id',
        metavar='ID',
        help='ScreenScraper game id (skips lookup by file name/checksum)'
    )

    parser.add_argument(
        '-n', '--name',
        metavar='NAME',
        help='Package name before normalization (default: ROM file name without extension)'
    )

    parser.add_argument(
        '-u', '--url',
        metavar='URL',
        help='URL makepkg downloads the ROM from (default: local file)'
    )

    parser.add_argument(
        '--reference',
        metavar='PATH',
        help='YAML file with gameid, gamerom and systemid'
    )

    parser.add_argument(
        '--no-fetch',
        action='store_true',
        help='Do not download media; trust the checksums declared by ScreenScraper'
    )

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging') or {}

    level_str = str(logging_config.get('level', 'INFO')).upper()
    level = getattr(logging, level_str, logging.INFO)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        handlers.append(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True
    )

    # httpx logs full URLs at DEBUG level, which would expose API credentials
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)


def build_packager(config: dict, client: httpx.Client, fetch_media: bool = True) -> Packager:
    """
    Wire the packaging pipeline from configuration.

    Args:
        config: Validated configuration
        client: Shared HTTP client
        fetch_media: Download media to verify checksums

    Returns:
        Packager ready to run
    """
    resolver = LocalizationResolver(get_config_value(config, 'localization.priorities'))

    enabled = get_config_value(config, 'media.kinds')
    selector = MediaSelector(
        get_config_value(config, 'media.region_priorities'),
        enabled_kinds=parse_media_kinds(enabled) if enabled is not None else None,
    )

    builder = ManifestBuilder(
        registry=build_registry(get_config_value(config, 'packaging.profiles')),
        media_base=get_config_value(config, 'media.base_url', DEFAULT_MEDIA_BASE_URL),
        install_root=get_config_value(config, 'packaging.install_root', DEFAULT_INSTALL_ROOT),
        catalog_dir=get_config_value(config, 'packaging.catalog_dir', DEFAULT_CATALOG_DIR),
    )

    fetcher = None
    if fetch_media:
        fetcher = AssetFetcher(client, timeout=get_config_value(config, 'api.request_timeout', 30))

    return Packager(
        provider=ScreenScraperClient(config, client),
        synthesizer=DescriptionSynthesizer(resolver, selector),
        builder=builder,
        fetcher=fetcher,
    )


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for rompom CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(str(args.config) if args.config else None)
        validate_config(config)
        systems = parse_systems(config.get('systems'))
        reference = load_reference(args.reference) if args.reference else None
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)

    system_id = args.system if args.system is not None else (reference.systemid if reference else None)
    rom_path = args.rom or (Path(reference.gamerom) if reference else None)
    game_id = args.id or (str(reference.gameid) if reference else None)

    if system_id is None or rom_path is None:
        parser.print_usage(sys.stderr)
        print("Error: --system and --rom are required (or provide them with --reference)", file=sys.stderr)
        return 1

    if not rom_path.is_file():
        logger.error(f"ROM file not found: {rom_path}")
        return 1

    system = find_system(systems, system_id)
    if system is UNKNOWN_SYSTEM:
        logger.warning(f"System {system_id} is not configured, packaging as '{system.name}'")

    request = PackageRequest(
        system=system,
        rom_path=rom_path,
        package_name=args.name,
        rom_url=args.url,
        game_id=game_id,
    )

    with httpx.Client(follow_redirects=True) as client:
        packager = build_packager(config, client, fetch_media=not args.no_fetch)
        try:
            result = packager.run(request)
        except ProviderUnavailable as e:
            logger.error(f"Metadata provider unavailable: {e}")
            return 1
        except ProviderMalformed as e:
            logger.error(f"Metadata provider returned a malformed response: {e}")
            return 1
        except WriteFailed as e:
            logger.error(f"Write failed: {e}")
            return 1
        except KeyboardInterrupt:
            print("\n\nPackaging interrupted by user.", file=sys.stderr)
            return 130

    for failure in result.unavailable_assets:
        logger.warning(f"Asset unavailable: {failure}")

    print(f"{result.build.descriptor.pkgname}: {result.output_dir}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
