"""
Video Processing Entities

Domain entities for video metadata and format information.
All entities are created per request from tool output and never mutated.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple, Union

from .value_objects import FormatType

Number = Union[int, float]

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_file_size(size: Optional[Number]) -> str:
    """Return a human-readable file size such as ``1.5 MB``."""
    if not size:
        return "Unknown"

    index = 0
    value = float(size)
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1

    value = round(value, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {_SIZE_UNITS[index]}"


def format_duration(seconds: Optional[Number]) -> str:
    """Return ``H:MM:SS`` or ``M:SS``."""
    if not seconds:
        return "Unknown"

    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


@dataclass(frozen=True)
class VideoMetadata:
    """
    Entity representing video metadata.

    Every field carries a concrete default so that absent tool fields
    never surface as null in API responses.
    """

    webpage_url: str
    title: str = "Unknown Title"
    description: str = ""
    duration: int = 0  # in seconds
    thumbnail: Optional[str] = None
    uploader: str = "Unknown"
    upload_date: Optional[str] = None
    view_count: int = 0
    like_count: int = 0
    extractor: str = "unknown"
    format_count: int = 0
    age_limit: int = 0
    categories: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        for name in ("duration", "view_count", "like_count", "format_count", "age_limit"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    def get_duration_formatted(self) -> str:
        return format_duration(self.duration)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["categories"] = list(self.categories)
        data["tags"] = list(self.tags)
        data["duration_string"] = self.get_duration_formatted()
        return data

    def to_quick_dict(self) -> Dict[str, Any]:
        """Reduced view used by the quick-info endpoints."""
        return {
            "title": self.title,
            "thumbnail": self.thumbnail,
            "duration": self.duration,
            "uploader": self.uploader,
            "webpage_url": self.webpage_url,
            "extractor": self.extractor,
        }


@dataclass(frozen=True)
class FormatEntry:
    """
    Entity representing one downloadable encoding.

    Codec fields use the ``"none"`` sentinel when a stream is absent,
    matching yt-dlp's own convention.
    """

    format_id: str
    url: str
    ext: str
    quality: str
    filesize: Optional[int] = None
    filesize_approx: Optional[int] = None
    vcodec: str = "none"
    acodec: str = "none"
    width: Optional[Number] = None
    height: Optional[Number] = None
    fps: Optional[Number] = None
    tbr: Optional[Number] = None
    abr: Optional[Number] = None
    vbr: Optional[Number] = None
    resolution: Optional[str] = None
    aspect_ratio: Optional[str] = None

    @property
    def has_video(self) -> bool:
        return self.vcodec != "none"

    @property
    def has_audio(self) -> bool:
        return self.acodec != "none"

    @property
    def format_type(self) -> Optional[FormatType]:
        """Category of this entry, or None when it carries no stream at all."""
        if self.has_video and self.has_audio:
            return FormatType.VIDEO_AUDIO
        if self.has_audio:
            return FormatType.AUDIO_ONLY
        if self.has_video:
            return FormatType.VIDEO_ONLY
        return None

    def get_filesize_formatted(self) -> str:
        return format_file_size(self.filesize or self.filesize_approx)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["filesize_human"] = self.get_filesize_formatted()
        return data


def _entry_dict(entry: Optional[FormatEntry]) -> Optional[Dict[str, Any]]:
    return entry.to_dict() if entry is not None else None


@dataclass(frozen=True)
class FormatCatalog:
    """
    Category-sorted catalog of the formats available for one video.

    ``total_formats`` counts entries that survived filtering, before the
    per-category caps were applied.
    """

    title: str
    webpage_url: str
    duration: int = 0
    thumbnail: Optional[str] = None
    video_audio: Tuple[FormatEntry, ...] = ()
    audio_only: Tuple[FormatEntry, ...] = ()
    video_only: Tuple[FormatEntry, ...] = ()
    total_formats: int = 0
    best_video: Optional[FormatEntry] = None
    best_audio: Optional[FormatEntry] = None
    best_video_only: Optional[FormatEntry] = None
    recommended_video: Optional[FormatEntry] = None
    recommended_audio: Optional[FormatEntry] = None

    def category_counts(self) -> Dict[str, int]:
        return {
            FormatType.VIDEO_AUDIO.value: len(self.video_audio),
            FormatType.AUDIO_ONLY.value: len(self.audio_only),
            FormatType.VIDEO_ONLY.value: len(self.video_only),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "webpage_url": self.webpage_url,
            "duration": self.duration,
            "thumbnail": self.thumbnail,
            "formats": {
                FormatType.VIDEO_AUDIO.value: [f.to_dict() for f in self.video_audio],
                FormatType.AUDIO_ONLY.value: [f.to_dict() for f in self.audio_only],
                FormatType.VIDEO_ONLY.value: [f.to_dict() for f in self.video_only],
            },
            "total_formats": self.total_formats,
            "best_video": _entry_dict(self.best_video),
            "best_audio": _entry_dict(self.best_audio),
            "best_video_only": _entry_dict(self.best_video_only),
            "recommended": {
                "video": _entry_dict(self.recommended_video),
                "audio": _entry_dict(self.recommended_audio),
            },
        }
