"""
Video Application Service

Coordinates video extraction use cases.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from ytdlp_service.domain.errors import NoFormatsAvailableError
from ytdlp_service.domain.video_processing import IVideoMetadataExtractor, ToolStatus, VideoUrl

logger = logging.getLogger(__name__)

# Direct media URLs returned by platforms are time-limited.
DOWNLOAD_URL_TTL = timedelta(hours=6)

USAGE_NOTES = {
    "expiration": "Download URLs typically expire within 6 hours",
    "rate_limits": "Respect the platform's rate limits when downloading",
    "quality_recommendation": "Use recommended formats for best compatibility",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class VideoService:
    """
    Application service for video extraction operations.

    Wraps the extractor results with response-level fields (extraction
    time, link expiry). Extraction errors propagate unchanged.
    """

    def __init__(
        self,
        extractor: IVideoMetadataExtractor,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize VideoService.

        Args:
            extractor: IVideoMetadataExtractor implementation (required)
            clock: Returns the current UTC time; injectable for tests
        """
        self.extractor = extractor
        self.clock = clock or utc_now

    def get_video_info(self, url: VideoUrl) -> Dict[str, Any]:
        """
        Get full video metadata.

        Args:
            url: Validated video URL

        Returns:
            Metadata dictionary with ``extracted_at``

        Raises:
            ExtractionError: If extraction fails
        """
        logger.info(f"Fetching video info (platform={url.platform})")
        metadata = self.extractor.extract_metadata(url)

        data = metadata.to_dict()
        data["extracted_at"] = isoformat_utc(self.clock())
        return data

    def get_quick_info(self, url: VideoUrl) -> Dict[str, Any]:
        """Get the reduced metadata view."""
        logger.info(f"Fetching quick info (platform={url.platform})")
        return self.extractor.extract_metadata(url).to_quick_dict()

    def get_download_links(self, url: VideoUrl) -> Dict[str, Any]:
        """
        Get the categorized download catalog.

        Args:
            url: Validated video URL

        Returns:
            Catalog dictionary with ``extracted_at``, ``expires_at``,
            ``usage_notes``, ``format_categories`` and, when known,
            ``thumbnail_url``

        Raises:
            ExtractionError: If extraction fails
            NoFormatsAvailableError: If no format survived filtering
        """
        logger.info(f"Fetching download links (platform={url.platform})")
        catalog = self.extractor.extract_formats(url)

        if catalog.total_formats == 0:
            logger.warning(f"No downloadable formats for {url.platform} video: {catalog.title!r}")
            raise NoFormatsAvailableError(catalog.title, catalog.webpage_url)

        now = self.clock()
        data = catalog.to_dict()
        data["extracted_at"] = isoformat_utc(now)
        data["expires_at"] = isoformat_utc(now + DOWNLOAD_URL_TTL)
        data["usage_notes"] = dict(USAGE_NOTES)
        data["format_categories"] = catalog.category_counts()
        if catalog.thumbnail:
            data["thumbnail_url"] = catalog.thumbnail
        return data

    def get_tool_status(self) -> ToolStatus:
        status = self.extractor.check_availability()
        if not status.available:
            logger.warning("yt-dlp is not available")
        return status
