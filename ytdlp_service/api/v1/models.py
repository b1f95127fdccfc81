"""
API Models for request/response documentation
"""

from flask_restx import fields

from ytdlp_service.api.v1 import api

# =============================================================================
# Request Models
# =============================================================================

url_request = api.model(
    "UrlRequest",
    {
        "url": fields.String(
            required=True,
            description="Video URL from a supported platform",
            example="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        )
    },
)

# =============================================================================
# Response Models
# =============================================================================

response_meta = api.model(
    "ResponseMeta",
    {
        "request_id": fields.String(description="Request identifier, echoed in X-Request-ID"),
        "platform": fields.String(description="Platform of the requested URL"),
        "api_version": fields.String(description="API version"),
    },
)

video_info = api.model(
    "VideoInfo",
    {
        "title": fields.String(description="Video title"),
        "description": fields.String(description="Video description"),
        "duration": fields.Integer(description="Duration in seconds"),
        "duration_string": fields.String(description="Duration as H:MM:SS or M:SS"),
        "thumbnail": fields.String(description="Thumbnail URL", allow_null=True),
        "uploader": fields.String(description="Uploader or channel name"),
        "upload_date": fields.String(description="Upload date (YYYYMMDD)", allow_null=True),
        "view_count": fields.Integer(description="View count"),
        "like_count": fields.Integer(description="Like count"),
        "webpage_url": fields.String(description="Canonical page URL"),
        "extractor": fields.String(description="yt-dlp extractor name"),
        "format_count": fields.Integer(description="Number of formats yt-dlp reported"),
        "age_limit": fields.Integer(description="Age limit"),
        "categories": fields.List(fields.String, description="Categories"),
        "tags": fields.List(fields.String, description="Tags"),
        "extracted_at": fields.String(description="Extraction time (ISO-8601)"),
        "processing_time": fields.String(description="Server processing time", example="1234ms"),
    },
)

quick_info = api.model(
    "QuickInfo",
    {
        "title": fields.String(description="Video title"),
        "thumbnail": fields.String(description="Thumbnail URL", allow_null=True),
        "duration": fields.Integer(description="Duration in seconds"),
        "uploader": fields.String(description="Uploader or channel name"),
        "webpage_url": fields.String(description="Canonical page URL"),
        "extractor": fields.String(description="yt-dlp extractor name"),
        "processing_time": fields.String(description="Server processing time"),
    },
)

format_model = api.model(
    "Format",
    {
        "format_id": fields.String(description="Unique format identifier"),
        "url": fields.String(description="Direct media URL (time-limited)"),
        "ext": fields.String(description="File extension"),
        "quality": fields.String(description="Quality label"),
        "filesize": fields.Integer(description="File size in bytes", allow_null=True),
        "filesize_approx": fields.Integer(description="Approximate file size in bytes", allow_null=True),
        "filesize_human": fields.String(description="Human-readable file size"),
        "vcodec": fields.String(description="Video codec, 'none' when absent"),
        "acodec": fields.String(description="Audio codec, 'none' when absent"),
        "width": fields.Float(allow_null=True),
        "height": fields.Float(allow_null=True),
        "fps": fields.Float(allow_null=True),
        "tbr": fields.Float(description="Total bitrate", allow_null=True),
        "abr": fields.Float(description="Audio bitrate", allow_null=True),
        "vbr": fields.Float(description="Video bitrate", allow_null=True),
        "resolution": fields.String(allow_null=True),
        "aspect_ratio": fields.String(allow_null=True),
    },
)

format_groups = api.model(
    "FormatGroups",
    {
        "video_audio": fields.List(fields.Nested(format_model), description="Combined formats (max 10)"),
        "audio_only": fields.List(fields.Nested(format_model), description="Audio-only formats (max 5)"),
        "video_only": fields.List(fields.Nested(format_model), description="Video-only formats (max 10)"),
    },
)

recommended_formats = api.model(
    "RecommendedFormats",
    {
        "video": fields.Nested(format_model, allow_null=True),
        "audio": fields.Nested(format_model, allow_null=True),
    },
)

download_links = api.model(
    "DownloadLinks",
    {
        "title": fields.String(description="Video title"),
        "webpage_url": fields.String(description="Canonical page URL"),
        "duration": fields.Integer(description="Duration in seconds"),
        "thumbnail": fields.String(allow_null=True),
        "formats": fields.Nested(format_groups),
        "total_formats": fields.Integer(description="Formats that passed filtering, before caps"),
        "best_video": fields.Nested(format_model, allow_null=True),
        "best_audio": fields.Nested(format_model, allow_null=True),
        "best_video_only": fields.Nested(format_model, allow_null=True),
        "recommended": fields.Nested(recommended_formats),
        "extracted_at": fields.String(description="Extraction time (ISO-8601)"),
        "expires_at": fields.String(description="When the media URLs are expected to expire"),
        "usage_notes": fields.Raw(description="Usage notes"),
        "thumbnail_url": fields.String(allow_null=True),
        "processing_time": fields.String(description="Server processing time"),
    },
)

video_info_response = api.model(
    "VideoInfoResponse",
    {
        "success": fields.Boolean(),
        "data": fields.Nested(video_info),
        "meta": fields.Nested(response_meta),
    },
)

quick_info_response = api.model(
    "QuickInfoResponse",
    {
        "success": fields.Boolean(),
        "data": fields.Nested(quick_info),
        "meta": fields.Nested(response_meta),
    },
)

download_links_response = api.model(
    "DownloadLinksResponse",
    {
        "success": fields.Boolean(),
        "data": fields.Nested(download_links),
        "meta": fields.Nested(response_meta),
    },
)

validation_detail = api.model(
    "ValidationDetail",
    {
        "field": fields.String(),
        "message": fields.String(),
        "value": fields.Raw(allow_null=True),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "success": fields.Boolean(default=False),
        "error": fields.String(description="Error message"),
        "code": fields.String(description="Error code"),
        "details": fields.List(fields.Nested(validation_detail), description="Validation details"),
        "meta": fields.Raw(description="Request metadata"),
    },
)
