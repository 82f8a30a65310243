"""Configuration validation."""

import logging
from typing import Dict, Any, List

from rompom.media.media_types import MediaKind
from rompom.package.profiles import create_profile
from .systems import SystemsError, SystemProfile

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    errors.extend(_validate_screenscraper(config.get('screenscraper') or {}))
    errors.extend(_validate_systems(config.get('systems')))
    errors.extend(_validate_priorities(config.get('localization') or {}, 'localization', 'priorities'))
    errors.extend(_validate_priorities(config.get('media') or {}, 'media', 'region_priorities'))
    errors.extend(_validate_media_kinds(config.get('media') or {}))
    errors.extend(_validate_packaging(config.get('packaging') or {}))
    errors.extend(_validate_api(config.get('api') or {}))
    errors.extend(_validate_logging(config.get('logging') or {}))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_screenscraper(section: Dict[str, Any]) -> List[str]:
    """Validate screenscraper credentials section."""
    errors = []

    for account in ('dev', 'user'):
        credentials = section.get(account)
        if not isinstance(credentials, dict):
            errors.append(f"screenscraper.{account} is required")
            continue
        for key in ('login', 'password'):
            if not credentials.get(key):
                errors.append(f"screenscraper.{account}.{key} is required")

    return errors


def _validate_systems(systems: Any) -> List[str]:
    """Validate systems list."""
    if systems is None:
        return []
    if not isinstance(systems, list):
        return ["systems must be a list"]

    errors = []
    seen_ids = set()
    for index, entry in enumerate(systems):
        if not isinstance(entry, dict):
            errors.append(f"systems[{index}] must be a mapping")
            continue
        try:
            system = SystemProfile.from_dict(entry)
        except SystemsError as e:
            errors.append(f"systems[{index}]: {e}")
            continue
        if system.id in seen_ids:
            errors.append(f"systems[{index}]: duplicate system id {system.id}")
        seen_ids.add(system.id)
        if system.checksum not in (None, 'disable'):
            errors.append(f"systems[{index}].checksum must be 'disable' when set")

    return errors


def _validate_priorities(section: Dict[str, Any], name: str, key: str) -> List[str]:
    """Validate a region/language priority list."""
    value = section.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not value:
        return [f"{name}.{key} must be a non-empty list"]
    if any(not isinstance(code, str) for code in value):
        return [f"{name}.{key} entries must be strings"]
    return []


def _validate_media_kinds(section: Dict[str, Any]) -> List[str]:
    """Validate the list of media kinds to package."""
    kinds = section.get('kinds')
    if kinds is None:
        return []
    if not isinstance(kinds, list):
        return ["media.kinds must be a list"]

    valid_kinds = [kind.value for kind in MediaKind]
    return [
        f"media.kinds entry '{kind}' must be one of: {', '.join(valid_kinds)}"
        for kind in kinds
        if kind not in valid_kinds
    ]


def _validate_packaging(section: Dict[str, Any]) -> List[str]:
    """Validate packaging section."""
    errors = []

    for key in ('install_root', 'catalog_dir'):
        value = section.get(key)
        if value is not None and (not isinstance(value, str) or not value.strip('/')):
            errors.append(f"packaging.{key} must be a non-empty relative path")

    profiles = section.get('profiles')
    if profiles is None:
        return errors
    if not isinstance(profiles, dict):
        errors.append("packaging.profiles must be a mapping of system id to profile")
        return errors

    for system_id, spec in profiles.items():
        try:
            int(system_id)
        except (TypeError, ValueError):
            errors.append(f"packaging.profiles key '{system_id}' must be a system id")
            continue
        try:
            create_profile(str(spec))
        except ValueError as e:
            errors.append(f"packaging.profiles.{system_id}: {e}")

    return errors


def _validate_api(section: Dict[str, Any]) -> List[str]:
    """Validate api section."""
    timeout = section.get('request_timeout', 30)
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        return ["api.request_timeout must be a positive number"]
    return []


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = []

    level = section.get('level', 'INFO')
    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if not isinstance(level, str) or level.upper() not in valid_levels:
        errors.append(f"logging.level must be one of: {', '.join(valid_levels)}")

    console = section.get('console', True)
    if not isinstance(console, bool):
        errors.append("logging.console must be true or false")

    return errors
