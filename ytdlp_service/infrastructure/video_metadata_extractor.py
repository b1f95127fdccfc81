"""
Video Metadata Extractor Infrastructure Service

Infrastructure implementation of IVideoMetadataExtractor on top of the
yt-dlp executable. Builds the command line from the platform policy,
runs it through the ProcessInvoker and hands stdout to the domain
normalizers.
"""

import logging
from typing import List, Optional

from ytdlp_service.config.extractor_config import ExtractorConfig
from ytdlp_service.domain.errors import ExtractionError, OutputParseError
from ytdlp_service.domain.video_processing.entities import FormatCatalog, VideoMetadata
from ytdlp_service.domain.video_processing.platform_policy import (
    PlatformPolicy,
    default_policy_from_timeouts,
    resolve_policy,
)
from ytdlp_service.domain.video_processing.repositories import IVideoMetadataExtractor
from ytdlp_service.domain.video_processing.services import FormatNormalizer, MetadataNormalizer
from ytdlp_service.domain.video_processing.value_objects import ToolStatus, VideoUrl

from .process_invoker import ProcessInvoker


class YtDlpExtractor(IVideoMetadataExtractor):
    """
    yt-dlp based implementation of video metadata extraction.

    Stateless between calls: every request gets its own child process,
    so one instance is shared by all request threads.
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        invoker: Optional[ProcessInvoker] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config or ExtractorConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.invoker = invoker or ProcessInvoker(self.logger)
        self.default_policy = default_policy_from_timeouts(
            self.config.metadata_timeout_ms, self.config.formats_timeout_ms
        )
        self.metadata_normalizer = MetadataNormalizer()
        self.format_normalizer = FormatNormalizer(self.logger)

    def policy_for(self, url: VideoUrl) -> PlatformPolicy:
        return resolve_policy(str(url), default=self.default_policy)

    def build_metadata_command(self, url: VideoUrl, policy: PlatformPolicy) -> List[str]:
        return [
            self.config.binary,
            "--dump-json",
            "--no-warnings",
            *policy.metadata_flags,
            str(url),
        ]

    def build_formats_command(self, url: VideoUrl, policy: PlatformPolicy) -> List[str]:
        return [
            self.config.binary,
            "--list-formats",
            "--dump-json",
            "--no-warnings",
            *policy.formats_flags,
            str(url),
        ]

    def extract_metadata(self, url: VideoUrl) -> VideoMetadata:
        """
        Extract video metadata using ``yt-dlp --dump-json``.

        Args:
            url: Validated VideoUrl value object

        Returns:
            VideoMetadata entity

        Raises:
            ExtractionError: If the tool fails or its output cannot be parsed
        """
        policy = self.policy_for(url)
        self.logger.info(f"Extracting video info (platform={url.platform}, policy={policy.name})")

        output = self.invoker.execute(
            self.build_metadata_command(url, policy),
            timeout_ms=policy.metadata_timeout_ms,
            max_buffer=self.config.max_buffer_bytes,
        )

        try:
            metadata = self.metadata_normalizer.parse(output, str(url))
        except OutputParseError as e:
            self.logger.error(f"Failed to parse yt-dlp metadata output: sample={e.diagnostic!r}")
            raise

        self.logger.info(
            f"Video info extracted: title={metadata.title!r} formats={metadata.format_count}"
        )
        return metadata

    def extract_formats(self, url: VideoUrl) -> FormatCatalog:
        """
        Extract the categorized format catalog using ``yt-dlp --list-formats --dump-json``.

        Args:
            url: Validated VideoUrl value object

        Returns:
            FormatCatalog entity

        Raises:
            ExtractionError: If the tool fails, lists no formats, or its
                output cannot be parsed
        """
        policy = self.policy_for(url)
        self.logger.info(f"Extracting download formats (platform={url.platform}, policy={policy.name})")

        output = self.invoker.execute(
            self.build_formats_command(url, policy),
            timeout_ms=policy.formats_timeout_ms,
            max_buffer=self.config.max_buffer_bytes,
        )

        try:
            catalog = self.format_normalizer.parse(output, str(url), policy)
        except OutputParseError as e:
            self.logger.error(f"Failed to parse yt-dlp formats output: sample={e.diagnostic!r}")
            raise

        self.logger.info(
            f"Download formats extracted: total={catalog.total_formats} "
            f"categories={catalog.category_counts()}"
        )
        return catalog

    def check_availability(self) -> ToolStatus:
        """Probe ``yt-dlp --version``; reports unavailability instead of raising."""
        try:
            output = self.invoker.execute(
                [self.config.binary, "--version"],
                timeout_ms=self.config.probe_timeout_ms,
                max_buffer=self.config.max_buffer_bytes,
            )
        except ExtractionError as e:
            self.logger.warning(f"yt-dlp availability check failed: {e.code}")
            return ToolStatus(available=False)

        return ToolStatus(available=True, version=output.strip() or None)
