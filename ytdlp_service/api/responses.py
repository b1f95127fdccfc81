"""
Response Envelopes

Every API answer is ``{"success": ..., "data" | "error": ..., "meta": {...}}``.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import g

from ytdlp_service import __version__ as API_VERSION
from ytdlp_service.domain.errors import ExtractionError

ResponseTuple = Tuple[Dict[str, Any], int]


def current_request_id() -> str:
    return getattr(g, "request_id", None) or "unknown"


def elapsed(started: Optional[float]) -> str:
    """Milliseconds since ``started`` (a ``time.monotonic()`` value), as ``"123ms"``."""
    if started is None:
        return "0ms"
    return f"{int((time.monotonic() - started) * 1000)}ms"


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_response(data: Dict[str, Any], platform: str, status: int = 200, **meta: Any) -> ResponseTuple:
    return {
        "success": True,
        "data": data,
        "meta": {
            "request_id": current_request_id(),
            "platform": platform,
            "api_version": API_VERSION,
            **meta,
        },
    }, status


def error_response(
    message: str,
    code: str,
    status: int,
    platform: str = "unknown",
    started: Optional[float] = None,
    **extra: Any,
) -> ResponseTuple:
    """
    Build the error envelope.

    Args:
        message: Caller-facing message
        code: Machine-readable error code
        status: HTTP status
        platform: Platform name of the requested URL, if known
        started: Request start time used for ``processing_time``
        **extra: Additional top-level keys such as ``details``

    Returns:
        (body, status) tuple
    """
    return {
        "success": False,
        "error": message,
        "code": code,
        **extra,
        "meta": {
            "request_id": current_request_id(),
            "platform": platform,
            "processing_time": elapsed(started),
            "timestamp": timestamp(),
        },
    }, status


def extraction_error_response(error: ExtractionError, platform: str, started: float) -> ResponseTuple:
    """Map a typed extraction failure to its status; never exposes the diagnostic."""
    return error_response(
        error.message,
        error.code,
        error.http_status,
        platform=platform,
        started=started,
    )


def validation_error_response(
    details: List[Dict[str, Any]],
    started: Optional[float] = None,
) -> ResponseTuple:
    return error_response(
        "Validation failed",
        "VALIDATION_ERROR",
        400,
        started=started,
        details=details,
    )
