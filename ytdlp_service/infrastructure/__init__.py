"""
Infrastructure Layer

Adapters for the yt-dlp executable.
"""

from .error_classifier import FailureCondition, classify_failure, classify_kind
from .process_invoker import ProcessInvoker, redact_urls
from .video_metadata_extractor import YtDlpExtractor

__all__ = [
    "FailureCondition",
    "classify_failure",
    "classify_kind",
    "ProcessInvoker",
    "redact_urls",
    "YtDlpExtractor",
]
