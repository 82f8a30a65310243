"""ScreenScraper API response parsing."""

import html
import json
import logging
import re
from typing import Any, Dict, List, Optional

from rompom.metadata.game_record import (
    GameRecord,
    GenreEntry,
    LocalizedValue,
    MediaAsset,
    RomInfo,
)
from .error_handler import ProviderMalformed

logger = logging.getLogger(__name__)


# Some jeuInfos.php responses carry a trailing comma before a closing brace
_TRAILING_COMMA = re.compile(r',\s*}')

# Plain-text body returned when no game matches the query
_NOT_FOUND_MARKERS = ('non trouv', 'not found')


def is_not_found_body(text: str) -> bool:
    """Check whether a response body is ScreenScraper's "not found" text."""
    stripped = text.strip()
    if stripped.startswith('{'):
        return False
    lowered = stripped.lower()
    return any(marker in lowered for marker in _NOT_FOUND_MARKERS)


def decode_json(text: str) -> Dict[str, Any]:
    """
    Decode a JSON response body.

    When the first attempt fails, trailing commas before closing braces
    are stripped and decoding is retried exactly once.

    Raises:
        ProviderMalformed: If the body is empty or still unparsable
    """
    if not text or not text.strip():
        raise ProviderMalformed("Empty response body received")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as first_error:
        repaired = _TRAILING_COMMA.sub('}', text)
        if repaired == text:
            raise ProviderMalformed(f"Malformed JSON: {first_error}")
        logger.debug("Retrying JSON decode after stripping trailing commas")
        try:
            data = json.loads(repaired)
        except json.JSONDecodeError as e:
            raise ProviderMalformed(f"Malformed JSON: {e}")

    if not isinstance(data, dict):
        raise ProviderMalformed("Response root is not a JSON object")

    return data


def parse_game_info(data: Dict[str, Any]) -> GameRecord:
    """
    Parse game information from a decoded jeuInfos.php response.

    Args:
        data: Decoded JSON document

    Returns:
        GameRecord

    Raises:
        ProviderMalformed: If the response has no game object
    """
    jeu = (data.get('response') or {}).get('jeu')
    if not isinstance(jeu, dict):
        raise ProviderMalformed("Response has no 'response.jeu' object")

    game_id = jeu.get('id')
    if game_id in (None, ''):
        raise ProviderMalformed("Game object has no id")

    return GameRecord(
        game_id=str(game_id),
        names=_localized(jeu.get('noms'), 'region'),
        synopsis=_localized(jeu.get('synopsis'), 'langue'),
        release_dates=_localized(jeu.get('dates'), 'region'),
        genres=_parse_genres(jeu.get('genres')),
        developer=_text(jeu.get('developpeur')),
        publisher=_text(jeu.get('editeur')),
        players=_text(jeu.get('joueurs')),
        rating_text=_text(jeu.get('note')),
        system_name=_text(jeu.get('systeme')) or jeu.get('systemenom'),
        media=parse_media(jeu.get('medias')),
        rom=_parse_rom(jeu.get('rom')),
    )


def parse_media(entries: Optional[List[Dict[str, Any]]]) -> List[MediaAsset]:
    """
    Parse the medias list of a game.

    Entries without a type or URL are skipped.
    """
    media = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        media_type = entry.get('type')
        url = entry.get('url')
        if not media_type or not url:
            continue
        media.append(MediaAsset(
            kind=media_type,
            url=url,
            format=entry.get('format') or '',
            region=entry.get('region') or None,
            parent=entry.get('parent') or '',
            declared_crc=entry.get('crc') or '',
            declared_md5=entry.get('md5') or '',
            declared_sha1=entry.get('sha1') or '',
        ))
    return media


def decode_html_entities(text: Optional[str]) -> Optional[str]:
    """
    Decode HTML entities in API response text.

    ScreenScraper returns text with HTML entities that must be decoded.
    """
    if not text:
        return text
    return html.unescape(text)


def _localized(entries: Optional[List[Dict[str, Any]]], key: str) -> LocalizedValue:
    if not entries:
        return LocalizedValue()
    return LocalizedValue(
        (entry.get(key), decode_html_entities(entry.get('text')))
        for entry in entries
        if isinstance(entry, dict)
    )


def _text(value: Any) -> Optional[str]:
    """Text of a ``{"id": ..., "text": ...}`` or ``{"text": ...}`` object."""
    if isinstance(value, dict):
        return decode_html_entities(value.get('text')) or None
    if isinstance(value, str):
        return decode_html_entities(value) or None
    return None


def _parse_genres(entries: Optional[List[Dict[str, Any]]]) -> List[GenreEntry]:
    genres = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        genres.append(GenreEntry(
            id=str(entry.get('id', '')),
            principal=str(entry.get('principale', '0')) == '1',
            names=_localized(entry.get('noms'), 'langue'),
        ))
    return genres


def _parse_rom(entry: Any) -> Optional[RomInfo]:
    if not isinstance(entry, dict):
        return None
    return RomInfo(
        filename=entry.get('romfilename') or '',
        regions=entry.get('romregions') or None,
        size=entry.get('romsize'),
        crc=entry.get('romcrc'),
        md5=entry.get('rommd5'),
        sha1=entry.get('romsha1'),
    )


def parse_user_info(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract the ssuser block (quota information) from a response.

    Returns:
        Dictionary with user info, empty when absent
    """
    ssuser = (data.get('response') or {}).get('ssuser')
    if not isinstance(ssuser, dict):
        return {}

    user_info = {}
    for field in ('id', 'niveau', 'maxthreads', 'requeststoday', 'maxrequestsperday'):
        value = ssuser.get(field)
        if value is None:
            continue
        try:
            user_info[field] = int(value)
        except (TypeError, ValueError):
            user_info[field] = value

    logger.debug(f"Parsed user_info from API response: {user_info}")
    return user_info
