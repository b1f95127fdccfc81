"""
API Namespaces - Organized endpoint groups
"""

import os
import platform
import time
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app, g, request
from flask_restx import Namespace, Resource

from ytdlp_service.api.auth import optional_api_key, require_api_key
from ytdlp_service.api.responses import (
    API_VERSION,
    ResponseTuple,
    elapsed,
    error_response,
    extraction_error_response,
    success_response,
    timestamp,
    validation_error_response,
)
from ytdlp_service.api.v1.models import (
    download_links_response,
    error_response as error_model,
    quick_info_response,
    url_request,
    video_info_response,
)
from ytdlp_service.application.video_service import VideoService
from ytdlp_service.domain.errors import ExtractionError, InvalidUrlError, NoFormatsAvailableError
from ytdlp_service.domain.video_processing import SUPPORTED_PLATFORMS, VideoUrl

EXAMPLE_URLS: Dict[str, List[str]] = {
    "youtube": ["https://www.youtube.com/watch?v=dQw4w9WgXcQ", "https://youtu.be/dQw4w9WgXcQ"],
    "tiktok": ["https://www.tiktok.com/@username/video/1234567890"],
    "instagram": ["https://www.instagram.com/p/ABC123/"],
    "twitter": ["https://twitter.com/username/status/1234567890"],
    "facebook": ["https://www.facebook.com/watch/?v=1234567890"],
}


def _video_service() -> VideoService:
    return current_app.container.resolve(VideoService)


def _request_started() -> float:
    return getattr(g, "request_started", None) or time.monotonic()


def _body_url() -> Tuple[Optional[Any], Optional[str]]:
    """Return (value, problem) for the ``url`` field of the JSON body."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or payload.get("url") is None:
        return None, "URL is required"
    value = payload["url"]
    if not isinstance(value, str):
        return value, "URL must be a string"
    return value, None


def _validate(raw_url: Any, started: float) -> Tuple[Optional[VideoUrl], Optional[ResponseTuple]]:
    try:
        return VideoUrl.parse(raw_url), None
    except InvalidUrlError as e:
        current_app.logger.warning(f"URL validation failed: path={request.path} reason={e}")
        return None, validation_error_response(
            [{"field": "url", "message": str(e), "value": raw_url}], started
        )


def _missing_url_response(started: float) -> ResponseTuple:
    return error_response("URL parameter is required", "MISSING_URL", 400, started=started)


def _unexpected_error(operation: str, error: Exception, started: float, platform_name: str) -> ResponseTuple:
    current_app.logger.exception(f"Unexpected error in {operation}: {error}")
    return error_response(
        "Internal server error",
        "INTERNAL_ERROR",
        500,
        platform=platform_name,
        started=started,
    )


def _log_extraction_failure(operation: str, url: VideoUrl, error: ExtractionError, started: float) -> None:
    current_app.logger.error(
        f"{operation} failed: code={error.code} platform={url.platform} "
        f"duration={elapsed(started)} diagnostic={error.diagnostic!r}"
    )


def video_info(raw_url: Any, **meta: Any) -> ResponseTuple:
    """Full metadata for one URL, wrapped in the response envelope."""
    started = _request_started()
    url, failure = _validate(raw_url, started)
    if failure:
        return failure

    try:
        data = _video_service().get_video_info(url)
    except ExtractionError as e:
        _log_extraction_failure("video-info", url, e, started)
        return extraction_error_response(e, url.platform, started)
    except Exception as e:
        return _unexpected_error("video-info", e, started, url.platform)

    data["processing_time"] = elapsed(started)
    current_app.logger.info(
        f"Video info extracted: title={data['title']!r} platform={url.platform} duration={data['processing_time']}"
    )
    return success_response(data, url.platform, **meta)


def quick_info(raw_url: Any, **meta: Any) -> ResponseTuple:
    """Reduced metadata for one URL."""
    started = _request_started()
    url, failure = _validate(raw_url, started)
    if failure:
        return failure

    try:
        data = _video_service().get_quick_info(url)
    except ExtractionError as e:
        _log_extraction_failure("quick-info", url, e, started)
        return extraction_error_response(e, url.platform, started)
    except Exception as e:
        return _unexpected_error("quick-info", e, started, url.platform)

    data["processing_time"] = elapsed(started)
    return success_response(data, url.platform, response_type="quick_info", **meta)


def download_links(raw_url: Any, **meta: Any) -> ResponseTuple:
    """Categorized download catalog for one URL."""
    started = _request_started()
    url, failure = _validate(raw_url, started)
    if failure:
        return failure

    try:
        data = _video_service().get_download_links(url)
    except NoFormatsAvailableError as e:
        return error_response(
            "No downloadable formats found",
            "NO_FORMATS_AVAILABLE",
            404,
            platform=url.platform,
            started=started,
            message=str(e),
            data={"title": e.title, "webpage_url": e.webpage_url, "platform": url.platform},
        )
    except ExtractionError as e:
        _log_extraction_failure("download-links", url, e, started)
        return extraction_error_response(e, url.platform, started)
    except Exception as e:
        return _unexpected_error("download-links", e, started, url.platform)

    format_categories = data.pop("format_categories")
    data["processing_time"] = elapsed(started)
    current_app.logger.info(
        f"Download links extracted: title={data['title']!r} platform={url.platform} "
        f"formats={data['total_formats']} duration={data['processing_time']}"
    )
    return success_response(data, url.platform, format_categories=format_categories, **meta)


# =============================================================================
# Video Namespace - Extraction endpoints
# =============================================================================

video_ns = Namespace("video", path="/", description="Video extraction operations")


@video_ns.route("/video-info")
class VideoInfo(Resource):
    """Full video metadata"""

    method_decorators = [require_api_key]

    @video_ns.doc("get_video_info", security="apikey")
    @video_ns.expect(url_request)
    @video_ns.response(200, "Success", video_info_response)
    @video_ns.response(400, "Validation Error", error_model)
    @video_ns.response(404, "Video Unavailable", error_model)
    @video_ns.response(408, "Timed Out", error_model)
    def post(self):
        """
        Extract video metadata

        Runs yt-dlp against the URL and returns normalized metadata.
        """
        raw_url, problem = _body_url()
        if problem:
            return validation_error_response(
                [{"field": "url", "message": problem, "value": raw_url}], _request_started()
            )
        return video_info(raw_url)


@video_ns.route("/download-links")
class DownloadLinks(Resource):
    """Direct download links"""

    method_decorators = [require_api_key]

    @video_ns.doc("get_download_links", security="apikey")
    @video_ns.expect(url_request)
    @video_ns.response(200, "Success", download_links_response)
    @video_ns.response(400, "Validation Error", error_model)
    @video_ns.response(404, "No Formats", error_model)
    def post(self):
        """
        Get direct download URLs

        Returns formats grouped into combined, audio-only and video-only
        lists with best and recommended picks. URLs expire after about 6 hours.
        """
        raw_url, problem = _body_url()
        if problem:
            return validation_error_response(
                [{"field": "url", "message": problem, "value": raw_url}], _request_started()
            )
        return download_links(raw_url)


@video_ns.route("/quick-info")
class QuickInfo(Resource):
    """Reduced video metadata"""

    method_decorators = [require_api_key]

    @video_ns.doc("get_quick_info", security="apikey")
    @video_ns.expect(url_request)
    @video_ns.response(200, "Success", quick_info_response)
    @video_ns.response(400, "Validation Error", error_model)
    def post(self):
        """Get title, thumbnail, duration, uploader, page URL and extractor only"""
        raw_url, problem = _body_url()
        if problem:
            return validation_error_response(
                [{"field": "url", "message": problem, "value": raw_url}], _request_started()
            )
        return quick_info(raw_url)


@video_ns.route("/video-info-get")
@video_ns.param("url", "Video URL", _in="query")
class VideoInfoGet(Resource):
    """GET variant of /video-info"""

    method_decorators = [require_api_key]

    @video_ns.doc("get_video_info_query", security="apikey")
    @video_ns.response(200, "Success", video_info_response)
    @video_ns.response(400, "Missing URL", error_model)
    def get(self):
        """Extract video metadata (URL in query string)"""
        raw_url = request.args.get("url")
        if not raw_url:
            return _missing_url_response(_request_started())
        return video_info(raw_url, method="GET")


@video_ns.route("/download-links-get")
@video_ns.param("url", "Video URL", _in="query")
class DownloadLinksGet(Resource):
    """GET variant of /download-links"""

    method_decorators = [require_api_key]

    @video_ns.doc("get_download_links_query", security="apikey")
    @video_ns.response(200, "Success", download_links_response)
    @video_ns.response(400, "Missing URL", error_model)
    def get(self):
        """Get direct download URLs (URL in query string)"""
        raw_url = request.args.get("url")
        if not raw_url:
            return _missing_url_response(_request_started())
        return download_links(raw_url, method="GET")


@video_ns.route("/quick-info-get")
@video_ns.param("url", "Video URL", _in="query")
class QuickInfoGet(Resource):
    """GET variant of /quick-info"""

    method_decorators = [require_api_key]

    @video_ns.doc("get_quick_info_query", security="apikey")
    @video_ns.response(200, "Success", quick_info_response)
    @video_ns.response(400, "Missing URL", error_model)
    def get(self):
        """Get reduced video metadata (URL in query string)"""
        raw_url = request.args.get("url")
        if not raw_url:
            return _missing_url_response(_request_started())
        return quick_info(raw_url, method="GET")


# =============================================================================
# System Namespace - Service status
# =============================================================================

system_ns = Namespace("system", path="/", description="Service status operations")


def format_uptime(seconds: float) -> str:
    """Render an uptime such as ``1d 2h 3m 4s``; ``0s`` when under a second."""
    seconds = int(seconds)
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    parts = [
        f"{value}{unit}"
        for value, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (seconds, "s"))
        if value > 0
    ]
    return " ".join(parts) or "0s"


@system_ns.route("/status")
class Status(Resource):
    """Service status"""

    method_decorators = [optional_api_key]

    @system_ns.doc("get_status")
    def get(self):
        """
        Detailed service status

        Public; callers presenting a valid API key also get process details.
        """
        started_at = current_app.config["STARTED_AT"]
        uptime = max(time.time() - started_at, 0.0)
        tool_status = _video_service().get_tool_status()

        status = {
            "service": {
                "name": "ytdlp-service",
                "version": API_VERSION,
                "environment": current_app.config["ENVIRONMENT"],
                "uptime": {"seconds": round(uptime, 3), "human": format_uptime(uptime)},
            },
            "system": {
                "python_version": platform.python_version(),
                "platform": platform.system().lower(),
                "architecture": platform.machine(),
            },
            "dependencies": {
                "ytdlp": {**tool_status.to_dict(), "last_checked": timestamp()},
            },
            "features": {
                "supported_platforms": len(SUPPORTED_PLATFORMS),
                "authentication": True,
            },
        }

        if g.authenticated:
            status["enhanced"] = {
                "process_id": os.getpid(),
                "working_directory": os.getcwd(),
            }

        current_app.logger.info(f"System status accessed: authenticated={g.authenticated}")
        return {"success": True, "data": status, "timestamp": timestamp()}, 200


@system_ns.route("/platforms")
class Platforms(Resource):
    """Supported platforms"""

    @system_ns.doc("list_platforms")
    def get(self):
        """List supported platforms, their domains and example URLs"""
        platforms = [
            {
                "name": name,
                "domains": list(domains),
                "example_urls": EXAMPLE_URLS.get(name, [f"https://{domains[0]}/example"]),
            }
            for name, domains in SUPPORTED_PLATFORMS.items()
        ]
        return {
            "success": True,
            "data": {
                "platforms": platforms,
                "total_platforms": len(platforms),
                "total_domains": sum(len(domains) for domains in SUPPORTED_PLATFORMS.values()),
            },
            "meta": {
                "note": "This list includes the most common domains. "
                "yt-dlp may support additional domains for each platform.",
            },
        }, 200
