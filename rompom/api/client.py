"""ScreenScraper API client implementation."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from rompom.config.systems import SystemProfile
from rompom.metadata.game_record import GameRecord
from .error_handler import ProviderUnavailable, handle_http_status, is_not_found
from .response_parser import decode_json, is_not_found_body, parse_game_info, parse_user_info

logger = logging.getLogger(__name__)


class ScreenScraperClient:
    """
    Client for the ScreenScraper jeuInfos.php endpoint.

    Handles authentication and maps transport failures to provider
    errors. Requests are made one at a time and never retried.
    """

    BASE_URL = "https://www.screenscraper.fr/api2"

    def __init__(self, config: Dict[str, Any], client: httpx.Client):
        """
        Initialize API client.

        Args:
            config: Configuration dictionary with screenscraper credentials
            client: httpx.Client used for requests
        """
        screenscraper = config['screenscraper']
        self.devid = screenscraper['dev']['login']
        self.devpassword = screenscraper['dev']['password']
        self.ssid = screenscraper['user']['login']
        self.sspassword = screenscraper['user']['password']
        self.softname = screenscraper.get('softname', 'RomPom')
        self.base_url = screenscraper.get('base_url', self.BASE_URL)

        self.request_timeout = (config.get('api') or {}).get('request_timeout', 30)
        self._timeout = httpx.Timeout(
            connect=5.0,
            read=self.request_timeout,
            write=5.0,
            pool=5.0
        )

        self.client = client
        self.user_info: Dict[str, Any] = {}

    def _build_redacted_url(self, url: str, params: Dict[str, Any]) -> str:
        """Build URL with credentials redacted for logging."""
        redacted_params = params.copy()
        redacted_params['devpassword'] = 'redacted'
        redacted_params['sspassword'] = 'redacted'
        query_string = urlencode(redacted_params)
        return f"{url}?{query_string}"

    def build_params(
        self,
        system: SystemProfile,
        rom_filename: str,
        sha1: Optional[str] = None,
        game_id: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Build jeuInfos.php query parameters.

        The checksum is omitted when the system disables checksum lookups,
        and the game id only when a real one is known.
        """
        params = {
            'devid': self.devid,
            'devpassword': self.devpassword,
            'softname': self.softname,
            'ssid': self.ssid,
            'sspassword': self.sspassword,
            'output': 'json',
            'systemeid': str(system.id),
            'romnom': rom_filename,
        }

        if sha1 and not system.checksum_disabled:
            params['sha1'] = sha1

        if game_id and str(game_id) != '0':
            params['gameid'] = str(game_id)

        return params

    def get_game(
        self,
        system: SystemProfile,
        rom_filename: str,
        sha1: Optional[str] = None,
        game_id: Optional[str] = None
    ) -> Optional[GameRecord]:
        """
        Query ScreenScraper for game information.

        Args:
            system: Target system
            rom_filename: ROM file name sent as ``romnom``
            sha1: ROM sha1 (ignored when the system disables checksums)
            game_id: Known ScreenScraper game id, if any

        Returns:
            GameRecord, or None when the game is unknown

        Raises:
            ProviderUnavailable: For network, authentication or quota failures
            ProviderMalformed: If the response cannot be parsed
        """
        url = f"{self.base_url}/jeuInfos.php"
        params = self.build_params(system, rom_filename, sha1, game_id)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"API Request: {self._build_redacted_url(url, params)}")

        try:
            response = self.client.get(url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise ProviderUnavailable(f"Request timeout: {e}")
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"Network error: {e}")

        if is_not_found(response.status_code) or is_not_found_body(response.text):
            logger.info(f"{rom_filename}: game not found on ScreenScraper")
            return None

        handle_http_status(response.status_code, context=rom_filename)

        data = decode_json(response.text)
        self.user_info = parse_user_info(data)
        if self.user_info:
            logger.debug(
                f"API quota: {self.user_info.get('requeststoday', 0)}/"
                f"{self.user_info.get('maxrequestsperday', 0)} requests today"
            )

        record = parse_game_info(data)
        system_label = f" ({record.system_name})" if record.system_name else ''
        logger.info(f"{rom_filename}: matched ScreenScraper game {record.game_id}{system_label}")
        return record
