"""
Shared pytest fixtures and utilities for the rompom test suite.
"""

import copy
from pathlib import Path
from typing import Dict, Any, Callable, Optional

import pytest
import yaml

from rompom.api.response_parser import parse_game_info
from rompom.config.systems import SystemProfile


JEU_INFOS_RESPONSE: Dict[str, Any] = {
    "header": {
        "APIversion": "2.0",
        "dateTime": "2024-03-01 10:00:00",
        "commandRequested": "jeuInfos.php",
        "success": "true",
        "error": "",
    },
    "response": {
        "ssuser": {
            "id": "tester",
            "niveau": "1",
            "maxthreads": "1",
            "requeststoday": "12",
            "maxrequestsperday": "20000",
        },
        "jeu": {
            "id": "2419",
            "romid": "51234",
            "notgame": "false",
            "noms": [
                {"region": "ss", "text": "Snatcher (SS)"},
                {"region": "us", "text": "Snatcher"},
                {"region": "jp", "text": "スナッチャー"},
            ],
            "systeme": {"id": "20", "text": "Mega-CD"},
            "editeur": {"id": "63", "text": "Konami"},
            "developpeur": {"id": "63", "text": "Konami"},
            "joueurs": {"text": "1"},
            "note": {"text": "17"},
            "synopsis": [
                {"langue": "en", "text": "Cyberpunk adventure &amp; mystery."},
                {"langue": "fr", "text": "Aventure cyberpunk."},
            ],
            "dates": [
                {"region": "us", "text": "1994-11-01"},
                {"region": "jp", "text": "1988"},
            ],
            "genres": [
                {
                    "id": "13", "principale": "0", "parentid": "0",
                    "noms": [{"langue": "fr", "text": "Science-fiction"}],
                },
                {
                    "id": "7", "principale": "1", "parentid": "0",
                    "noms": [
                        {"langue": "en", "text": "Adventure"},
                        {"langue": "fr", "text": "Aventure"},
                    ],
                },
            ],
            "medias": [
                {
                    "type": "ss", "parent": "jeu", "region": "us", "format": "png",
                    "url": "https://neoclone.screenscraper.fr/api2/mediaJeu.php?systemeid=20&jeuid=2419&media=ss(us)",
                    "crc": "aa", "md5": "bb", "sha1": "1111111111111111111111111111111111111111",
                },
                {
                    "type": "box-2D", "parent": "jeu", "region": "us", "format": "png",
                    "url": "https://neoclone.screenscraper.fr/api2/mediaJeu.php?systemeid=20&jeuid=2419&media=box-2D(wor)",
                    "crc": "cc", "md5": "dd", "sha1": "2222222222222222222222222222222222222222",
                },
                {
                    "type": "video", "parent": "jeu", "format": "mp4",
                    "url": "https://neoclone.screenscraper.fr/api2/mediaVideoJeu.php?systemeid=20&jeuid=2419&media=video",
                    "crc": "ee", "md5": "ff", "sha1": "3333333333333333333333333333333333333333",
                },
                {
                    "type": "wheel", "parent": "jeu", "region": "us", "format": "png",
                    "url": "https://neoclone.screenscraper.fr/api2/mediaJeu.php?systemeid=20&jeuid=2419&media=wheel(wor)",
                    "crc": "gg", "md5": "hh", "sha1": "4444444444444444444444444444444444444444",
                },
            ],
            "rom": {
                "id": "51234",
                "romfilename": "Snatcher (USA).cue",
                "romregions": "us",
                "romsha1": "5555555555555555555555555555555555555555",
            },
        },
    },
}


@pytest.fixture
def jeu_infos_response() -> Dict[str, Any]:
    """Decoded jeuInfos.php response for one game (fresh copy per test)."""
    return copy.deepcopy(JEU_INFOS_RESPONSE)


@pytest.fixture
def game_record(jeu_infos_response):
    """GameRecord parsed from the sample response."""
    return parse_game_info(jeu_infos_response)


@pytest.fixture
def default_system() -> SystemProfile:
    return SystemProfile(id=1, name='megadrive', dir='megadrive', basename='megadrive-rom-')


@pytest.fixture
def segacd_system() -> SystemProfile:
    return SystemProfile(
        id=20,
        name='segacd',
        dir='segacd',
        basename='segacd-rom-',
        depends='retroarch-genesis',
    )


@pytest.fixture
def base_config() -> Dict[str, Any]:
    """Complete valid configuration."""
    return {
        'screenscraper': {
            'dev': {'login': 'dev', 'password': 'devpass'},
            'user': {'login': 'user', 'password': 'userpass'},
            'softname': 'RomPom',
        },
        'systems': [
            {'name': 'megadrive', 'id': 1, 'basename': 'megadrive-rom-', 'dir': 'megadrive'},
            {'name': 'segacd', 'id': 20, 'basename': 'segacd-rom-', 'dir': 'segacd'},
            {'name': 'psx', 'id': 57, 'basename': 'psx-rom-', 'dir': 'psx', 'checksum': 'disable'},
        ],
        'localization': {'priorities': ['fr', 'eu', 'en', 'us', 'wor', 'jp', 'ss']},
        'media': {'region_priorities': ['fr', 'eu', 'us', 'wor', 'jp', 'ss']},
        'packaging': {'profiles': {214: 'launcher:OpenBOR'}},
        'api': {'request_timeout': 5},
        'logging': {'level': 'INFO', 'console': True, 'file': None},
    }


@pytest.fixture
def make_config(tmp_path: Path, base_config) -> Callable[[Optional[Dict[str, Any]]], Path]:
    """
    Create a rompom.yml in a temp directory.

    Usage:
        path = make_config({"logging": {"level": "DEBUG"}})
    """

    def _builder(overrides: Optional[Dict[str, Any]] = None) -> Path:
        config = merge_dicts(base_config, overrides or {})
        cfg_path = tmp_path / "rompom.yml"
        cfg_path.write_text(yaml.safe_dump(config))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow+deep merge helper for fixture config dictionaries.
    """
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


@pytest.fixture
def config_with(base_config) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """Return base_config deep-merged with overrides."""

    def _builder(overrides: Dict[str, Any]) -> Dict[str, Any]:
        return merge_dicts(base_config, overrides)

    return _builder
