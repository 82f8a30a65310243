import json

import pytest

from rompom.api.error_handler import ProviderMalformed
from rompom.api.response_parser import (
    decode_json,
    is_not_found_body,
    parse_game_info,
    parse_media,
    parse_user_info,
)


@pytest.mark.unit
def test_parse_game_info_sample(jeu_infos_response):
    record = parse_game_info(jeu_infos_response)

    assert record.game_id == '2419'
    assert record.names.get('us') == 'Snatcher'
    assert record.names.codes() == ['ss', 'us', 'jp']
    assert record.synopsis.get('en') == 'Cyberpunk adventure & mystery.'
    assert record.release_dates.get('jp') == '1988'
    assert [genre.principal for genre in record.genres] == [False, True]
    assert record.genres[1].names.get('fr') == 'Aventure'
    assert record.developer == 'Konami'
    assert record.publisher == 'Konami'
    assert record.players == '1'
    assert record.rating_text == '17'
    assert record.system_name == 'Mega-CD'
    assert record.rom.filename == 'Snatcher (USA).cue'
    assert record.rom_regions() == ['us']
    assert len(record.media) == 4


@pytest.mark.unit
def test_parse_game_info_sparse_game():
    record = parse_game_info({"response": {"jeu": {"id": 7}}})

    assert record.game_id == '7'
    assert not record.names
    assert record.genres == []
    assert record.media == []
    assert record.rom is None
    assert record.developer is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "data",
    [{}, {"response": {}}, {"response": {"jeu": []}}, {"response": {"jeu": {"noms": []}}}],
)
def test_parse_game_info_without_game_raises(data):
    with pytest.raises(ProviderMalformed):
        parse_game_info(data)


@pytest.mark.unit
def test_parse_media_keeps_declared_checksums(jeu_infos_response):
    media = parse_media(jeu_infos_response['response']['jeu']['medias'])

    video = media[2]
    assert video.kind == 'video'
    assert video.region is None
    assert video.format == 'mp4'
    assert video.declared_sha1 == '3333333333333333333333333333333333333333'
    assert video.verified_sha1 is None


@pytest.mark.unit
def test_parse_media_skips_incomplete_entries():
    media = parse_media([{"type": "ss"}, {"url": "http://x"}, "junk", {"type": "ss", "url": "http://y"}])
    assert [asset.url for asset in media] == ["http://y"]


@pytest.mark.unit
def test_decode_json_valid(jeu_infos_response):
    assert decode_json(json.dumps(jeu_infos_response)) == jeu_infos_response


@pytest.mark.unit
def test_decode_json_repairs_trailing_comma():
    text = '{"response": {"jeu": {"id": "1", "noms": [{"region": "us", "text": "A"}],\n}}}'
    data = decode_json(text)
    assert data["response"]["jeu"]["id"] == "1"


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "{not json",
        '{"a": [1, 2,]}',
        '{"a": {"b": 1,}, "c": [,]}',
        "[1, 2]",
    ],
)
def test_decode_json_malformed_raises(text):
    with pytest.raises(ProviderMalformed):
        decode_json(text)


@pytest.mark.unit
def test_is_not_found_body():
    assert is_not_found_body("Erreur : Rom/Iso/Dossier non trouvée !  ")
    assert is_not_found_body("Game not found")
    assert not is_not_found_body('{"error": "not found"}')
    assert not is_not_found_body("Erreur de login")


@pytest.mark.unit
def test_parse_user_info(jeu_infos_response):
    info = parse_user_info(jeu_infos_response)

    assert info['id'] == 'tester'
    assert info['requeststoday'] == 12
    assert info['maxrequestsperday'] == 20000
    assert parse_user_info({}) == {}
