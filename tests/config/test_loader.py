import pytest
import yaml

from rompom.config.loader import (
    ConfigError,
    Reference,
    default_config_path,
    get_config_value,
    load_config,
    load_reference,
)
from rompom.config.systems import (
    UNKNOWN_SYSTEM,
    SystemProfile,
    SystemsError,
    find_system,
    parse_systems,
)


@pytest.mark.unit
def test_load_config_reads_file(make_config):
    config = load_config(str(make_config()))

    assert config['screenscraper']['dev']['login'] == 'dev'
    assert config['packaging']['profiles'] == {214: 'launcher:OpenBOR'}


@pytest.mark.unit
def test_load_config_sets_softname_default(tmp_path):
    path = tmp_path / "rompom.yml"
    path.write_text(yaml.safe_dump({'systems': []}))

    config = load_config(str(path))

    assert config['screenscraper'] == {'softname': 'RomPom'}


@pytest.mark.unit
def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "missing.yml"))


@pytest.mark.unit
@pytest.mark.parametrize("content", ["- a\n- b\n", "key: [unclosed\n", ""])
def test_load_config_rejects_bad_content(tmp_path, content):
    path = tmp_path / "rompom.yml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_config(str(path))


@pytest.mark.unit
def test_default_config_path_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
    assert default_config_path() == tmp_path / 'rompom.yml'


@pytest.mark.unit
def test_load_config_default_location(monkeypatch, tmp_path, base_config):
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
    (tmp_path / 'rompom.yml').write_text(yaml.safe_dump(base_config))

    assert load_config()['api']['request_timeout'] == 5


@pytest.mark.unit
def test_load_reference(tmp_path):
    path = tmp_path / "snatcher.yml"
    path.write_text("gameid: 2419\ngamerom: Snatcher (USA).cue\nsystemid: '20'\n")

    assert load_reference(str(path)) == Reference(gameid=2419, gamerom='Snatcher (USA).cue', systemid=20)


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    ["gameid: 1\nsystemid: 2\n", "gameid: abc\ngamerom: x\nsystemid: 2\n", "- 1\n"],
)
def test_load_reference_invalid(tmp_path, content):
    path = tmp_path / "ref.yml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_reference(str(path))


@pytest.mark.unit
def test_get_config_value(base_config):
    assert get_config_value(base_config, 'api.request_timeout') == 5
    assert get_config_value(base_config, 'media.kinds', ['cover']) == ['cover']
    assert get_config_value(base_config, 'api.request_timeout.deeper', 'x') == 'x'


@pytest.mark.unit
def test_parse_and_find_systems(base_config):
    systems = parse_systems(base_config['systems'])

    assert [system.id for system in systems] == [1, 20, 57]
    assert find_system(systems, 57).checksum_disabled is True
    assert find_system(systems, 20).checksum_disabled is False
    assert find_system(systems, 999) is UNKNOWN_SYSTEM


@pytest.mark.unit
def test_unknown_system_shape():
    assert UNKNOWN_SYSTEM.id == 0
    assert UNKNOWN_SYSTEM.basename == 'unknown-rom-'
    assert UNKNOWN_SYSTEM.dir == 'unknown'


@pytest.mark.unit
@pytest.mark.parametrize(
    "entry",
    [
        {'id': 1, 'name': 'x', 'dir': 'x'},
        {'id': 'one', 'name': 'x', 'dir': 'x', 'basename': 'x-'},
        {'name': 'x', 'dir': 'x', 'basename': 'x-'},
    ],
)
def test_system_from_dict_invalid(entry):
    with pytest.raises(SystemsError):
        SystemProfile.from_dict(entry)


@pytest.mark.unit
def test_system_from_dict_string_id():
    system = SystemProfile.from_dict({'id': '20', 'name': 'segacd', 'dir': 'segacd', 'basename': 'segacd-rom-',
                                      'depends': 'retroarch'})
    assert system.id == 20
    assert system.depends == 'retroarch'
