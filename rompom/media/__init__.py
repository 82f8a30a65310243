"""
Media selection and retrieval package for rompom.

Selects the best ScreenScraper media per logical kind and downloads it
for packaging.
"""

from .media_types import (
    MediaKind,
    MediaDefinition,
    MEDIA_DEFINITIONS,
    DESCRIPTION_TAGS,
    get_definition,
    parse_media_kinds,
)
from .selector import MediaSelector, find_media, media_region, retrieval_url
from .fetcher import AssetFetcher, AssetUnavailable

__all__ = [
    "MediaKind",
    "MediaDefinition",
    "MEDIA_DEFINITIONS",
    "DESCRIPTION_TAGS",
    "get_definition",
    "parse_media_kinds",
    "MediaSelector",
    "find_media",
    "media_region",
    "retrieval_url",
    "AssetFetcher",
    "AssetUnavailable",
]
