"""
Video Processing Services

Domain services that turn yt-dlp JSON output into domain entities.

yt-dlp's JSON schema differs per extractor and changes between releases,
so nothing here trusts it: output is decoded into plain dicts first and
then projected field by field, with a documented default for every field.
"""

import json
import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from ytdlp_service.domain.errors import (
    FORMATS_PARSE_MESSAGE,
    METADATA_PARSE_MESSAGE,
    ExtractionError,
    ExtractionErrorKind,
    OutputParseError,
)

from .entities import FormatCatalog, FormatEntry, VideoMetadata
from .platform_policy import DEFAULT_POLICY, PlatformPolicy
from .value_objects import FormatType

# Category caps
MAX_VIDEO_AUDIO_FORMATS = 10
MAX_AUDIO_ONLY_FORMATS = 5
MAX_VIDEO_ONLY_FORMATS = 10

# Recommendation thresholds
RECOMMENDED_MAX_HEIGHT = 720
RECOMMENDED_MIN_AUDIO_BITRATE = 128

PARSE_SAMPLE_LENGTH = 200


# =============================================================================
# Field projection helpers
# =============================================================================

def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _text(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _count(value: Any) -> int:
    return int(value) if _is_number(value) and value > 0 else 0


def _positive_number(value: Any):
    return value if _is_number(value) and value > 0 else None


def _positive_int(value: Any) -> Optional[int]:
    return int(value) if _is_number(value) and value > 0 else None


def _label(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    if _is_number(value) and value > 0:
        return str(value)
    return None


def _string_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _first_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def _sample(output: str) -> str:
    return (output or "")[:PARSE_SAMPLE_LENGTH]


# =============================================================================
# Metadata
# =============================================================================

class MetadataNormalizer:
    """Parses the single-object output of ``yt-dlp --dump-json``."""

    def parse(self, output: str, source_url: str) -> VideoMetadata:
        """
        Parse tool output into VideoMetadata.

        Args:
            output: Raw stdout of the tool
            source_url: URL that was extracted, used when the tool omits webpage_url

        Returns:
            VideoMetadata with defaults applied to every absent field

        Raises:
            OutputParseError: If the output is not a JSON object
        """
        try:
            info = json.loads(output.strip())
        except (json.JSONDecodeError, AttributeError) as e:
            raise OutputParseError(
                METADATA_PARSE_MESSAGE, sample=_sample(output), original_error=e
            )

        if not isinstance(info, dict):
            raise OutputParseError(METADATA_PARSE_MESSAGE, sample=_sample(output))

        return self.project(info, source_url)

    def project(self, info: Mapping[str, Any], source_url: str) -> VideoMetadata:
        formats = info.get("formats")
        uploader = _optional_text(info.get("uploader")) or _text(info.get("channel"), "Unknown")

        return VideoMetadata(
            webpage_url=_text(info.get("webpage_url"), source_url),
            title=_text(info.get("title"), "Unknown Title"),
            description=_text(info.get("description"), ""),
            duration=_count(info.get("duration")),
            thumbnail=_optional_text(info.get("thumbnail")),
            uploader=uploader,
            upload_date=_optional_text(info.get("upload_date")),
            view_count=_count(info.get("view_count")),
            like_count=_count(info.get("like_count")),
            extractor=_text(info.get("extractor"), "unknown"),
            format_count=len(formats) if isinstance(formats, list) else 0,
            age_limit=_count(info.get("age_limit")),
            categories=_string_tuple(info.get("categories")),
            tags=_string_tuple(info.get("tags")),
        )


# =============================================================================
# Formats
# =============================================================================

def project_format(raw: Any) -> Optional[FormatEntry]:
    """
    Project one raw yt-dlp format dict into a FormatEntry.

    Returns None for entries without a usable URL and for entries whose
    video and audio codecs are both ``"none"``.
    """
    if not isinstance(raw, dict):
        return None

    url = _optional_text(raw.get("url"))
    if url is None:
        return None

    vcodec = _text(raw.get("vcodec"), "none")
    acodec = _text(raw.get("acodec"), "none")
    if vcodec == "none" and acodec == "none":
        return None

    format_id = raw.get("format_id")
    quality = raw.get("format_note") or raw.get("quality") or "unknown"

    return FormatEntry(
        format_id=str(format_id) if format_id is not None else "",
        url=url,
        ext=_text(raw.get("ext"), "unknown"),
        quality=str(quality),
        filesize=_positive_int(raw.get("filesize")),
        filesize_approx=_positive_int(raw.get("filesize_approx")),
        vcodec=vcodec,
        acodec=acodec,
        width=_positive_number(raw.get("width")),
        height=_positive_number(raw.get("height")),
        fps=_positive_number(raw.get("fps")),
        tbr=_positive_number(raw.get("tbr")),
        abr=_positive_number(raw.get("abr")),
        vbr=_positive_number(raw.get("vbr")),
        resolution=_label(raw.get("resolution")),
        aspect_ratio=_label(raw.get("aspect_ratio")),
    )


def _height_key(entry: FormatEntry):
    return entry.height or 0


def _audio_bitrate_key(entry: FormatEntry):
    return entry.abr or 0


def _first_or_none(entries: Sequence[FormatEntry]) -> Optional[FormatEntry]:
    return entries[0] if entries else None


def build_catalog(
    entries: Iterable[FormatEntry],
    title: str,
    webpage_url: str,
    duration: int = 0,
    thumbnail: Optional[str] = None,
) -> FormatCatalog:
    """
    Categorize, sort, cap and pick best/recommended entries.

    Combined and video-only entries sort by height, audio-only entries by
    audio bitrate, all descending with missing values counted as 0. Sorting
    is stable, so ties keep the tool's order. Recommendations are picked
    from the full sorted lists, before the caps apply.
    """
    video_audio: List[FormatEntry] = []
    audio_only: List[FormatEntry] = []
    video_only: List[FormatEntry] = []

    for entry in entries:
        format_type = entry.format_type
        if format_type is FormatType.VIDEO_AUDIO:
            video_audio.append(entry)
        elif format_type is FormatType.AUDIO_ONLY:
            audio_only.append(entry)
        elif format_type is FormatType.VIDEO_ONLY:
            video_only.append(entry)

    video_audio.sort(key=_height_key, reverse=True)
    video_only.sort(key=_height_key, reverse=True)
    audio_only.sort(key=_audio_bitrate_key, reverse=True)

    best_video = _first_or_none(video_audio)
    best_audio = _first_or_none(audio_only)

    recommended_video = next(
        (f for f in video_audio if f.height and f.height <= RECOMMENDED_MAX_HEIGHT),
        best_video,
    )
    recommended_audio = next(
        (f for f in audio_only if f.abr and f.abr >= RECOMMENDED_MIN_AUDIO_BITRATE),
        best_audio,
    )

    return FormatCatalog(
        title=title,
        webpage_url=webpage_url,
        duration=duration,
        thumbnail=thumbnail,
        video_audio=tuple(video_audio[:MAX_VIDEO_AUDIO_FORMATS]),
        audio_only=tuple(audio_only[:MAX_AUDIO_ONLY_FORMATS]),
        video_only=tuple(video_only[:MAX_VIDEO_ONLY_FORMATS]),
        total_formats=len(video_audio) + len(audio_only) + len(video_only),
        best_video=best_video,
        best_audio=best_audio,
        best_video_only=_first_or_none(video_only),
        recommended_video=recommended_video,
        recommended_audio=recommended_audio,
    )


class FormatNormalizer:
    """
    Parses the output of ``yt-dlp --list-formats --dump-json``.

    The tool prints listing noise first and the canonical JSON object on
    the final non-blank line.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def parse(
        self,
        output: str,
        source_url: str,
        policy: PlatformPolicy = DEFAULT_POLICY,
    ) -> FormatCatalog:
        """
        Parse tool output into a FormatCatalog.

        Args:
            output: Raw stdout of the tool
            source_url: URL that was extracted
            policy: Platform policy selected for the URL

        Returns:
            FormatCatalog; may be empty when no format survives filtering

        Raises:
            OutputParseError: If no line of the output is a JSON object
            ExtractionError: NO_FORMATS if the object has no format list
        """
        info = self.decode_canonical_object(output)

        if policy.synthetic_single_format:
            return self._synthesize(info, source_url, policy)

        raw_formats = info.get("formats")
        if not isinstance(raw_formats, list) or not raw_formats:
            raise ExtractionError(ExtractionErrorKind.NO_FORMATS)

        entries = [entry for entry in map(project_format, raw_formats) if entry is not None]

        return build_catalog(
            entries,
            title=_text(info.get("title"), policy.fallback_title),
            webpage_url=_text(info.get("webpage_url"), source_url),
            duration=_count(info.get("duration")),
            thumbnail=_optional_text(info.get("thumbnail")),
        )

    def decode_canonical_object(self, output: str) -> Mapping[str, Any]:
        """
        Decode the canonical JSON object from multi-line tool output.

        The last non-blank line is tried first. If it does not decode to an
        object, earlier lines are scanned from the end and the first object
        found wins.
        """
        lines = [line.strip() for line in (output or "").splitlines() if line.strip()]

        for position, line in enumerate(reversed(lines)):
            try:
                info = json.loads(line)
            except json.JSONDecodeError:
                continue
            if not isinstance(info, dict):
                continue
            if position > 0:
                self.logger.warning(
                    f"Canonical JSON object found {position} line(s) above the end of yt-dlp output"
                )
            return info

        raise OutputParseError(FORMATS_PARSE_MESSAGE, sample=_sample(output))

    def _synthesize(
        self,
        info: Mapping[str, Any],
        source_url: str,
        policy: PlatformPolicy,
    ) -> FormatCatalog:
        """Fabricate a single combined entry from top-level fields."""
        first_format = _first_mapping(info.get("formats"))
        video_url = _optional_text(info.get("url")) or _optional_text(first_format.get("url"))
        thumbnail = _optional_text(info.get("thumbnail")) or _optional_text(
            _first_mapping(info.get("thumbnails")).get("url")
        )

        entries: Tuple[FormatEntry, ...] = ()
        if video_url:
            entries = (
                FormatEntry(
                    format_id=f"{policy.name}-video",
                    url=video_url,
                    ext="mp4",
                    quality="default",
                    vcodec="h264",
                    acodec="aac",
                    width=_positive_number(info.get("width")),
                    height=_positive_number(info.get("height")),
                    fps=_positive_number(info.get("fps")),
                    tbr=_positive_number(info.get("tbr")),
                    resolution=_label(info.get("resolution")),
                    aspect_ratio=_label(info.get("aspect_ratio")),
                ),
            )

        best = _first_or_none(entries)
        return FormatCatalog(
            title=_text(info.get("title"), policy.fallback_title),
            webpage_url=_text(info.get("webpage_url"), source_url),
            duration=_count(info.get("duration")),
            thumbnail=thumbnail,
            video_audio=entries,
            total_formats=len(entries),
            best_video=best,
            recommended_video=best,
        )
