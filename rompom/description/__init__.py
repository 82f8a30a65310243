"""
Description generation package for rompom.

Resolves a provider record into one description and writes it as
description.xml.
"""

from .entry import ResolvedDescription
from .synthesizer import DescriptionSynthesizer, convert_rating
from .xml_writer import DescriptionWriter, format_rating

__all__ = [
    'ResolvedDescription',
    'DescriptionSynthesizer',
    'convert_rating',
    'DescriptionWriter',
    'format_rating',
]
