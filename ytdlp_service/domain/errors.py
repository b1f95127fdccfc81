"""
Error Handling Module

Defines domain exceptions and the extraction error taxonomy.
Domain exceptions are pure and have no external dependencies.
"""

from enum import Enum
from typing import Any, Dict, Optional


# Raw diagnostic text kept on an error is cut to this many characters.
DIAGNOSTIC_PREFIX_LENGTH = 500


class ExtractionErrorKind(Enum):
    """Fixed taxonomy of extraction failures."""

    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    YTDLP_NOT_FOUND = "YTDLP_NOT_FOUND"
    VIDEO_UNAVAILABLE = "VIDEO_UNAVAILABLE"
    UNSUPPORTED_URL = "UNSUPPORTED_URL"
    NO_FORMATS = "NO_FORMATS"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    YTDLP_ERROR = "YTDLP_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


# Caller-facing messages
ERROR_MESSAGES: Dict[ExtractionErrorKind, str] = {
    ExtractionErrorKind.TIMEOUT_ERROR: "Request timed out. The video might be too large or the server is slow.",
    ExtractionErrorKind.YTDLP_NOT_FOUND: "yt-dlp is not installed or not found in PATH.",
    ExtractionErrorKind.VIDEO_UNAVAILABLE: "Video is unavailable, private, or has been removed.",
    ExtractionErrorKind.UNSUPPORTED_URL: "This URL is not supported by yt-dlp.",
    ExtractionErrorKind.NO_FORMATS: "No downloadable video formats found for this URL.",
    ExtractionErrorKind.AUTH_REQUIRED: "This video requires authentication or age verification.",
    ExtractionErrorKind.RATE_LIMITED: "Rate limited by the video platform. Please try again later.",
    ExtractionErrorKind.NETWORK_ERROR: "Network error occurred while accessing the video.",
    ExtractionErrorKind.YTDLP_ERROR: "Failed to process video URL.",
    ExtractionErrorKind.PARSE_ERROR: "Failed to parse video information from yt-dlp output.",
}

METADATA_PARSE_MESSAGE = "Failed to parse video information from yt-dlp output."
FORMATS_PARSE_MESSAGE = "Failed to parse download formats from yt-dlp output."


# HTTP status per kind; kinds not listed map to 500.
HTTP_STATUS_BY_KIND: Dict[ExtractionErrorKind, int] = {
    ExtractionErrorKind.VIDEO_UNAVAILABLE: 404,
    ExtractionErrorKind.NO_FORMATS: 404,
    ExtractionErrorKind.UNSUPPORTED_URL: 400,
    ExtractionErrorKind.TIMEOUT_ERROR: 408,
    ExtractionErrorKind.RATE_LIMITED: 429,
    ExtractionErrorKind.AUTH_REQUIRED: 403,
}


def truncate_diagnostic(text: Optional[str], limit: int = DIAGNOSTIC_PREFIX_LENGTH) -> str:
    """Return at most ``limit`` characters of diagnostic text."""
    if not text:
        return ""
    return text[:limit]


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class InvalidUrlError(DomainError):
    """
    Raised when URL validation fails.

    This is typically raised by the VideoUrl value object.
    """

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class ExtractionError(DomainError):
    """
    Typed failure of an extraction request.

    ``kind`` and ``message`` are safe to show to API callers.
    ``diagnostic`` holds a truncated prefix of the tool's stderr and is
    meant for logs only.
    """

    def __init__(
        self,
        kind: ExtractionErrorKind,
        message: Optional[str] = None,
        diagnostic: Optional[str] = None,
        original_error: Exception = None,
    ):
        self.kind = kind
        self.message = message or ERROR_MESSAGES[kind]
        self.diagnostic = truncate_diagnostic(diagnostic)
        super().__init__(self.message, original_error=original_error)

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_KIND.get(self.kind, 500)

    def to_dict(self) -> Dict[str, Any]:
        """Caller-facing representation; never includes the diagnostic."""
        return {"error": self.message, "code": self.code}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, message={self.message!r})"


class OutputParseError(ExtractionError):
    """
    Raised when the tool's stdout cannot be decoded into the expected shape.

    Signals a local bug or an incompatible yt-dlp release rather than a
    problem with the requested video.
    """

    def __init__(
        self,
        message: str = METADATA_PARSE_MESSAGE,
        sample: Optional[str] = None,
        original_error: Exception = None,
    ):
        super().__init__(
            ExtractionErrorKind.PARSE_ERROR,
            message=message,
            diagnostic=sample,
            original_error=original_error,
        )


class NoFormatsAvailableError(DomainError):
    """
    Raised when extraction succeeded but no format survived filtering.

    Carries the catalog identity so the caller can still tell which
    video was resolved.
    """

    def __init__(self, title: str, webpage_url: str):
        super().__init__(
            "This video does not have any downloadable formats available. "
            "This could be due to platform restrictions, geographic limitations, "
            "or the content being unavailable."
        )
        self.title = title
        self.webpage_url = webpage_url
