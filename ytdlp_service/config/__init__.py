"""Environment-driven configuration."""

from .extractor_config import ExtractorConfig
from .logging_config import configure_logging

__all__ = ["ExtractorConfig", "configure_logging"]
