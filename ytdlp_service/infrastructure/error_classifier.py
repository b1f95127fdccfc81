"""
Extraction Error Classifier

Maps a raw child-process failure onto the ExtractionError taxonomy.
Pure: the same (condition, diagnostic text) always yields the same kind.
"""

from enum import Enum
from typing import Optional, Tuple

from ytdlp_service.domain.errors import ExtractionError, ExtractionErrorKind


class FailureCondition(Enum):
    """How the child process failed, as observed by the invoker."""

    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    EXIT_STATUS = "exit_status"
    OUTPUT_LIMIT = "output_limit"


# Checked in order against lower-cased stderr; first match wins.
DIAGNOSTIC_RULES: Tuple[Tuple[Tuple[str, ...], ExtractionErrorKind], ...] = (
    (("video unavailable", "private video"), ExtractionErrorKind.VIDEO_UNAVAILABLE),
    (("unsupported url",), ExtractionErrorKind.UNSUPPORTED_URL),
    (("no video formats found",), ExtractionErrorKind.NO_FORMATS),
    (("sign in to confirm",), ExtractionErrorKind.AUTH_REQUIRED),
    (("too many requests",), ExtractionErrorKind.RATE_LIMITED),
    (("network",), ExtractionErrorKind.NETWORK_ERROR),
)


def classify_kind(condition: FailureCondition, diagnostic: Optional[str]) -> ExtractionErrorKind:
    """
    Classify a failure into an ExtractionErrorKind.

    Args:
        condition: How the process failed
        diagnostic: Captured stderr text, possibly empty

    Returns:
        The first matching kind; YTDLP_ERROR when nothing matches
    """
    if condition is FailureCondition.TIMEOUT:
        return ExtractionErrorKind.TIMEOUT_ERROR
    if condition is FailureCondition.NOT_FOUND:
        return ExtractionErrorKind.YTDLP_NOT_FOUND

    text = (diagnostic or "").lower()
    for needles, kind in DIAGNOSTIC_RULES:
        if any(needle in text for needle in needles):
            return kind

    return ExtractionErrorKind.YTDLP_ERROR


def classify_failure(
    condition: FailureCondition,
    diagnostic: Optional[str],
    original_error: Exception = None,
) -> ExtractionError:
    """Build the typed ExtractionError for a raw process failure."""
    return ExtractionError(
        classify_kind(condition, diagnostic),
        diagnostic=diagnostic,
        original_error=original_error,
    )
