import pytest

from rompom.package.name_normalizer import normalize_name


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Pac-Man (USA)!", "pac-manusa"),
        ("Tom & Jerry", "tomandjerry"),
        ("Zelda ~ Link's Awakening", "zelda-linksawakening"),
        ("A=B", "a-b"),
        ("100% [Hack]; $5 ^_^", "100hack5_"),
        ("snatcher", "snatcher"),
        ("", ""),
    ],
)
def test_normalize_name(raw, expected):
    assert normalize_name(raw) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    ["Pac-Man (USA)!", "Tom & Jerry", "Street Fighter II' Turbo", "~=&&==~", "Ça (Europe)"],
)
def test_normalize_name_is_idempotent(raw):
    once = normalize_name(raw)
    assert normalize_name(once) == once


@pytest.mark.unit
def test_normalize_name_output_has_no_unsafe_characters():
    result = normalize_name("Mr. Do! (Tom & Jerry's) [a] ~ v1 = 2%^;$,")
    for char in "() ,'!%^;$[]&~=":
        assert char not in result
    assert result == result.lower()
