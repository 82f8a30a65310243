"""ScreenScraper metadata provider."""

from .client import ScreenScraperClient
from .error_handler import ProviderError, ProviderMalformed, ProviderUnavailable

__all__ = [
    'ScreenScraperClient',
    'ProviderError',
    'ProviderMalformed',
    'ProviderUnavailable',
]
