"""Package-name normalization."""

# Characters dropped outright, and characters with a replacement
REMOVED_CHARACTERS = "() ,'!%^;$[]"
REPLACEMENTS = {
    '&': 'and',
    '~': '-',
    '=': '-',
}

_TRANSLATION = str.maketrans(
    {**{char: None for char in REMOVED_CHARACTERS}, **REPLACEMENTS}
)


def normalize_name(name: str) -> str:
    """
    Convert a free-form game title into a package-name-safe identifier.

    Idempotent: normalize_name(normalize_name(s)) == normalize_name(s).

    Examples:
        "Pac-Man (USA)!"     -> "pac-manusa"
        "Tom & Jerry"        -> "tomandjerry"
        "Zelda ~ Link's Awakening" -> "zelda-linksawakening"
    """
    return name.translate(_TRANSLATION).lower()
