"""
Video Processing Repositories

Repository interfaces for metadata extraction.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entities import FormatCatalog, VideoMetadata
    from .value_objects import ToolStatus, VideoUrl


class IVideoMetadataExtractor(ABC):
    """
    Abstract interface for extracting video metadata and formats.

    Domain layer defines the contract, infrastructure provides implementation.
    Implementations must only ever raise ExtractionError (or its
    OutputParseError subclass) for extraction failures.
    """

    @abstractmethod
    def extract_metadata(self, url: "VideoUrl") -> "VideoMetadata":
        """
        Extract video metadata.

        Args:
            url: Validated VideoUrl value object

        Returns:
            VideoMetadata entity

        Raises:
            ExtractionError: If extraction fails for any reason
        """
        pass  # pragma: no cover

    @abstractmethod
    def extract_formats(self, url: "VideoUrl") -> "FormatCatalog":
        """
        Extract the categorized catalog of downloadable formats.

        Args:
            url: Validated VideoUrl value object

        Returns:
            FormatCatalog entity

        Raises:
            ExtractionError: If extraction fails for any reason
        """
        pass  # pragma: no cover

    @abstractmethod
    def check_availability(self) -> "ToolStatus":
        """
        Probe the extraction tool.

        Returns:
            ToolStatus with availability flag and trimmed version string.
            Never raises for a missing or broken tool.
        """
        pass  # pragma: no cover
