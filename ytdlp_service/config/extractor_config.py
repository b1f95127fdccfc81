"""
Extractor Configuration

Environment-based configuration for the yt-dlp child process.
"""

import os
from dataclasses import dataclass


@dataclass
class ExtractorConfig:
    """
    yt-dlp invocation settings from environment variables.

    Timeouts are in milliseconds. ``max_buffer_bytes`` caps each captured
    output stream of a single invocation.
    """

    binary: str = "yt-dlp"
    metadata_timeout_ms: int = 30000
    formats_timeout_ms: int = 45000
    probe_timeout_ms: int = 5000
    max_buffer_bytes: int = 10 * 1024 * 1024

    def __post_init__(self):
        for name in ("metadata_timeout_ms", "formats_timeout_ms", "probe_timeout_ms", "max_buffer_bytes"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """
        Load configuration from environment variables.

        Returns:
            ExtractorConfig instance with loaded configuration
        """
        return cls(
            binary=os.getenv("YTDLP_BINARY", "yt-dlp"),
            metadata_timeout_ms=int(os.getenv("YTDLP_METADATA_TIMEOUT_MS", "30000")),
            formats_timeout_ms=int(os.getenv("YTDLP_FORMATS_TIMEOUT_MS", "45000")),
            probe_timeout_ms=int(os.getenv("YTDLP_PROBE_TIMEOUT_MS", "5000")),
            max_buffer_bytes=int(os.getenv("YTDLP_MAX_BUFFER_BYTES", str(10 * 1024 * 1024))),
        )
