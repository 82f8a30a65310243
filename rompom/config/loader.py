"""Configuration loading and parsing."""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional


CONFIG_FILENAME = "rompom.yml"


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


@dataclass(frozen=True)
class Reference:
    """Known ScreenScraper identity of a ROM, loaded from a reference file."""
    gameid: int
    gamerom: str
    systemid: int


def default_config_path() -> Path:
    """Location of rompom.yml in the user configuration directory."""
    config_home = os.environ.get('XDG_CONFIG_HOME')
    base = Path(config_home) if config_home else Path.home() / '.config'
    return base / CONFIG_FILENAME


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"File not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}")


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and parse configuration file.

    Args:
        config_path: Path to rompom.yml. If None, uses the user
            configuration directory.

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigError: If config file cannot be loaded or parsed
    """
    path = Path(config_path) if config_path is not None else default_config_path()

    if not path.exists():
        raise ConfigError(
            f"Configuration file not found: {path}\n"
            f"Create it with your ScreenScraper credentials and system list."
        )

    config = _read_yaml(path)

    if not isinstance(config, dict):
        raise ConfigError("Configuration file must contain a YAML dictionary")

    if not isinstance(config.get('screenscraper'), dict):
        config['screenscraper'] = {}
    config['screenscraper'].setdefault('softname', 'RomPom')

    return config


def load_reference(reference_path: str) -> Reference:
    """
    Load a reference file pinning a ROM to a ScreenScraper game.

    Expected keys: gameid, gamerom, systemid.

    Raises:
        ConfigError: If the file cannot be read or a key is missing
    """
    data = _read_yaml(Path(reference_path))
    if not isinstance(data, dict):
        raise ConfigError(f"Reference file must contain a YAML dictionary: {reference_path}")

    try:
        return Reference(
            gameid=int(data['gameid']),
            gamerom=str(data['gamerom']),
            systemid=int(data['systemid']),
        )
    except KeyError as e:
        raise ConfigError(f"Reference file {reference_path} is missing {e}")
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in reference file {reference_path}: {e}")


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., 'media.region_priorities')
        default: Default value if path not found

    Returns:
        Configuration value or default

    Example:
        >>> get_config_value(config, 'localization.priorities')
        ['fr', 'eu', 'en', 'us', 'wor', 'jp', 'ss']
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
