"""
Video Processing Domain

Handles URL validation, platform policy, and normalization of extraction output.
"""

from ytdlp_service.domain.errors import ExtractionError, InvalidUrlError, OutputParseError

from .entities import FormatCatalog, FormatEntry, VideoMetadata
from .platform_policy import PlatformPolicy, resolve_policy
from .repositories import IVideoMetadataExtractor
from .services import FormatNormalizer, MetadataNormalizer, build_catalog
from .value_objects import SUPPORTED_PLATFORMS, FormatType, ToolStatus, VideoUrl

__all__ = [
    "VideoMetadata",
    "FormatEntry",
    "FormatCatalog",
    "FormatType",
    "VideoUrl",
    "ToolStatus",
    "SUPPORTED_PLATFORMS",
    "PlatformPolicy",
    "resolve_policy",
    "IVideoMetadataExtractor",
    "MetadataNormalizer",
    "FormatNormalizer",
    "build_catalog",
    "ExtractionError",
    "OutputParseError",
    "InvalidUrlError",
]
