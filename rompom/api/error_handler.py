"""Error handling for ScreenScraper API interactions."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for metadata provider errors."""
    pass


class ProviderUnavailable(ProviderError):
    """The provider could not be reached or refused the request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ProviderMalformed(ProviderError):
    """The provider's response could not be parsed."""
    pass


# HTTP status code mapping
HTTP_STATUS_MESSAGES = {
    200: "Success",
    400: "Malformed request",
    401: "API closed for non-members (server overload)",
    403: "Invalid credentials",
    404: "Game not found",
    423: "API fully closed",
    426: "Software blacklisted",
    429: "Thread limit reached",
    430: "Daily quota exceeded",
    431: "Too many not-found requests",
}

NOT_FOUND_STATUS = 404


def get_error_message(status_code: int) -> str:
    """
    Get user-friendly error message for HTTP status code.

    Args:
        status_code: HTTP status code

    Returns:
        Error message string
    """
    return HTTP_STATUS_MESSAGES.get(
        status_code,
        f"Unknown error (HTTP {status_code})"
    )


def is_not_found(status_code: int) -> bool:
    return status_code == NOT_FOUND_STATUS


def handle_http_status(status_code: int, context: str = "") -> None:
    """
    Raise for any status that is neither success nor "game not found".

    A missing game is a valid outcome and is left to the caller. Nothing
    is retried: every other failure aborts the current game.

    Args:
        status_code: HTTP status code from API
        context: Additional context for error message

    Raises:
        ProviderUnavailable: For every error status except 404
    """
    if status_code == 200 or is_not_found(status_code):
        return

    msg = get_error_message(status_code)
    if context:
        msg = f"{msg} ({context})"

    if status_code == 403:
        logger.critical("Authentication failure - check screenscraper credentials")

    raise ProviderUnavailable(msg, status_code=status_code)
