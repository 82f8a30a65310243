"""
XML writer for description.xml files.

Serializes one ResolvedDescription as a single <game> element, the
format the target frontend reads its catalog entries from.
"""

from lxml import etree

from rompom.media.media_types import DESCRIPTION_TAGS
from .entry import ResolvedDescription


class DescriptionWriter:
    """
    Serializes ResolvedDescription objects.

    Features:
    - Fixed field order
    - HTML entity handling (lxml auto-escapes)
    - Pretty-printed UTF-8 output
    """

    def to_bytes(self, description: ResolvedDescription) -> bytes:
        """
        Serialize a description in memory.

        Args:
            description: Resolved description

        Returns:
            UTF-8 encoded XML document
        """
        root = self._create_game_element(description)
        return etree.tostring(
            root,
            encoding='utf-8',
            xml_declaration=True,
            pretty_print=True
        )

    def _create_game_element(self, description: ResolvedDescription) -> etree._Element:
        game = etree.Element("game")

        self._add_element(game, "path", description.path)
        self._add_element(game, "name", description.name)
        self._add_element(game, "desc", description.desc)
        self._add_element(game, "rating", format_rating(description.rating))
        self._add_element(game, "releasedate", description.releasedate)
        self._add_element(game, "developer", description.developer)
        self._add_element(game, "publisher", description.publisher)
        self._add_element(game, "genre", description.genre)
        self._add_element(game, "players", description.players)
        self._add_element(game, "region", description.region)

        for tag in DESCRIPTION_TAGS:
            if tag in description.media_paths:
                self._add_element(game, tag, description.media_paths[tag])

        return game

    def _add_element(self, parent: etree._Element, tag: str, text: str) -> None:
        elem = etree.SubElement(parent, tag)
        elem.text = text


def format_rating(rating: float) -> str:
    """Format rating without trailing zeros (0.9 instead of 0.900000)."""
    return f"{rating:.6f}".rstrip('0').rstrip('.') or '0'
