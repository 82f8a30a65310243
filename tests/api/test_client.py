import json
import logging
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
import respx

from rompom.api.client import ScreenScraperClient
from rompom.api.error_handler import (
    ProviderMalformed,
    ProviderUnavailable,
    get_error_message,
    handle_http_status,
)
from rompom.config.systems import SystemProfile


API_URL = "https://www.screenscraper.fr/api2/jeuInfos.php"


@pytest.fixture
def http_client():
    with httpx.Client() as client:
        yield client


@pytest.fixture
def api_client(base_config, http_client):
    return ScreenScraperClient(base_config, http_client)


@pytest.mark.unit
def test_build_params_includes_credentials_and_checksum(api_client, segacd_system):
    params = api_client.build_params(segacd_system, 'Snatcher (USA).cue', sha1='abc')

    assert params == {
        'devid': 'dev',
        'devpassword': 'devpass',
        'softname': 'RomPom',
        'ssid': 'user',
        'sspassword': 'userpass',
        'output': 'json',
        'systemeid': '20',
        'romnom': 'Snatcher (USA).cue',
        'sha1': 'abc',
    }


@pytest.mark.unit
def test_build_params_omits_checksum_when_disabled(api_client):
    psx = SystemProfile(id=57, name='psx', dir='psx', basename='psx-rom-', checksum='disable')

    params = api_client.build_params(psx, 'Game.chd', sha1='abc')

    assert 'sha1' not in params


@pytest.mark.unit
@pytest.mark.parametrize("game_id,expected", [(None, None), ('', None), ('0', None), ('2419', '2419'), (2419, '2419')])
def test_build_params_game_id(api_client, default_system, game_id, expected):
    params = api_client.build_params(default_system, 'Game.zip', game_id=game_id)
    assert params.get('gameid') == expected


@pytest.mark.unit
@respx.mock
def test_get_game_returns_record(api_client, segacd_system, jeu_infos_response):
    route = respx.get(API_URL).mock(return_value=httpx.Response(200, json=jeu_infos_response))

    record = api_client.get_game(segacd_system, 'Snatcher (USA).cue', sha1='abc', game_id='2419')

    assert record.game_id == '2419'
    request = route.calls.last.request
    assert request.url.params['romnom'] == 'Snatcher (USA).cue'
    assert request.url.params['gameid'] == '2419'
    assert request.url.params['sha1'] == 'abc'
    assert api_client.user_info['requeststoday'] == 12


@pytest.mark.unit
@respx.mock
def test_get_game_repairs_trailing_comma(api_client, default_system, jeu_infos_response):
    body = json.dumps(jeu_infos_response)[:-1] + ',}'
    respx.get(API_URL).mock(return_value=httpx.Response(200, text=body))

    record = api_client.get_game(default_system, 'Game.zip')

    assert record.game_id == '2419'


@pytest.mark.unit
@respx.mock
def test_get_game_not_found_status(api_client, default_system):
    respx.get(API_URL).mock(return_value=httpx.Response(404, text="Erreur : Jeu non trouvée !"))
    assert api_client.get_game(default_system, 'Game.zip') is None


@pytest.mark.unit
@respx.mock
def test_get_game_not_found_body(api_client, default_system):
    respx.get(API_URL).mock(return_value=httpx.Response(200, text="Erreur : Rom/Iso/Dossier non trouvée !"))
    assert api_client.get_game(default_system, 'Game.zip') is None


@pytest.mark.unit
@respx.mock
@pytest.mark.parametrize("status", [401, 403, 429, 430, 500])
def test_get_game_error_status_raises(api_client, default_system, status):
    respx.get(API_URL).mock(return_value=httpx.Response(status, text="error"))

    with pytest.raises(ProviderUnavailable) as exc_info:
        api_client.get_game(default_system, 'Game.zip')

    assert exc_info.value.status_code == status


@pytest.mark.unit
@respx.mock
def test_get_game_network_error(api_client, default_system):
    respx.get(API_URL).mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(ProviderUnavailable):
        api_client.get_game(default_system, 'Game.zip')


@pytest.mark.unit
@respx.mock
def test_get_game_timeout(api_client, default_system):
    respx.get(API_URL).mock(side_effect=httpx.ReadTimeout("slow"))

    with pytest.raises(ProviderUnavailable, match="timeout"):
        api_client.get_game(default_system, 'Game.zip')


@pytest.mark.unit
@respx.mock
def test_get_game_malformed_body(api_client, default_system):
    respx.get(API_URL).mock(return_value=httpx.Response(200, text="{garbage"))

    with pytest.raises(ProviderMalformed):
        api_client.get_game(default_system, 'Game.zip')


@pytest.mark.unit
@respx.mock
def test_custom_base_url(base_config, http_client, default_system, jeu_infos_response):
    base_config['screenscraper']['base_url'] = 'https://mirror.test/api2'
    route = respx.get('https://mirror.test/api2/jeuInfos.php').mock(
        return_value=httpx.Response(200, json=jeu_infos_response)
    )

    ScreenScraperClient(base_config, http_client).get_game(default_system, 'Game.zip')

    assert route.called


@pytest.mark.unit
def test_redacted_url_hides_passwords(api_client, default_system):
    params = api_client.build_params(default_system, 'Game.zip')
    url = api_client._build_redacted_url(API_URL, params)
    query = parse_qs(urlsplit(url).query)

    assert query['devpassword'] == ['redacted']
    assert query['sspassword'] == ['redacted']
    assert '=devpass&' not in url
    assert '=userpass&' not in url


@pytest.mark.unit
def test_null_api_section_uses_default_timeout(config_with, http_client):
    client = ScreenScraperClient(config_with({'api': None}), http_client)

    assert client.request_timeout == 30


@pytest.mark.unit
@respx.mock
def test_get_game_logs_quota_and_system(api_client, segacd_system, jeu_infos_response, caplog):
    respx.get(API_URL).mock(return_value=httpx.Response(200, json=jeu_infos_response))

    with caplog.at_level(logging.DEBUG, logger='rompom.api.client'):
        api_client.get_game(segacd_system, 'Snatcher (USA).cue')

    assert 'API quota: 12/' in caplog.text
    assert 'matched ScreenScraper game 2419 (Mega-CD)' in caplog.text


@pytest.mark.unit
def test_handle_http_status():
    handle_http_status(200)
    handle_http_status(404)
    with pytest.raises(ProviderUnavailable, match="Daily quota exceeded"):
        handle_http_status(430, context='Game.zip')
    assert get_error_message(999) == "Unknown error (HTTP 999)"
