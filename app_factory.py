"""
Application Factory

Creates and configures the Flask application with all dependencies.
The factory pattern allows tests to inject configuration and to
override services through the dependency container.
"""

import logging
import os
import platform
import time
from typing import Optional

from flask import Flask, jsonify, redirect
from flask_cors import CORS

from ytdlp_service import __version__
from ytdlp_service.api.request_hooks import register_request_hooks
from ytdlp_service.api.responses import timestamp
from ytdlp_service.application.dependency_container import DependencyContainer
from ytdlp_service.application.video_service import VideoService
from ytdlp_service.config.extractor_config import ExtractorConfig
from ytdlp_service.config.logging_config import configure_logging
from ytdlp_service.domain.video_processing import IVideoMetadataExtractor
from ytdlp_service.infrastructure.video_metadata_extractor import YtDlpExtractor

logger = logging.getLogger(__name__)

DEFAULT_API_KEY = "your-secret-api-key"


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"

        self.api_key = os.getenv("API_KEY", DEFAULT_API_KEY)
        self.cors_origins = os.getenv("CORS_ORIGINS", "*")

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "info")
        self.log_dir = os.getenv("LOG_DIR") or None
        self.configure_logging = True

        self.extractor = ExtractorConfig.from_env()


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    if config.configure_logging:
        configure_logging(config.log_level, config.log_dir)

    app = Flask(__name__)
    app.config["API_KEY"] = config.api_key
    app.config["ENVIRONMENT"] = config.flask_env
    app.config["STARTED_AT"] = time.time()
    app.config["ERROR_404_HELP"] = False

    if config.api_key == DEFAULT_API_KEY:
        logger.warning("API_KEY is not set; using the default key. Set API_KEY before deploying.")

    CORS(
        app,
        resources={
            r"/*": {
                "origins": _parse_origins(config.cors_origins),
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization", "X-API-Key"],
                "expose_headers": ["Content-Type", "X-Request-ID"],
                "max_age": 3600,
            }
        },
    )

    register_request_hooks(app)

    _initialize_services(app, config)

    _register_blueprints(app)

    _register_health_endpoint(app)

    _register_error_handlers(app)

    return app


def _parse_origins(value: str):
    if value.strip() == "*":
        return "*"
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def _initialize_services(app: Flask, config: AppConfig) -> None:
    """
    Build services and attach them to the app through a DependencyContainer.

    Args:
        app: Flask application
        config: Application configuration
    """
    container = DependencyContainer()

    extractor = YtDlpExtractor(config.extractor, logger=logging.getLogger("ytdlp_service.extractor"))
    container.register_singleton(IVideoMetadataExtractor, extractor)

    container.register_factory(
        VideoService, lambda c: VideoService(c.resolve(IVideoMetadataExtractor))
    )

    app.container = container

    logger.info(
        f"Services initialized (yt-dlp binary={config.extractor.binary}, "
        f"metadata timeout={config.extractor.metadata_timeout_ms}ms, "
        f"formats timeout={config.extractor.formats_timeout_ms}ms)"
    )


def _register_blueprints(app: Flask) -> None:
    from ytdlp_service.api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)

    @app.route("/", methods=["GET"])
    def index():
        return redirect("/api/docs")

    logger.info("API registered at /api with Swagger UI at /api/docs")


def _get_health_status(app: Flask) -> tuple:
    """
    Get health status of the service and the yt-dlp executable.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    video_service = app.container.resolve(VideoService)
    tool_status = video_service.get_tool_status()

    health_status = {
        "status": "healthy" if tool_status.available else "degraded",
        "timestamp": timestamp(),
        "uptime": round(time.time() - app.config["STARTED_AT"], 3),
        "version": __version__,
        "environment": app.config["ENVIRONMENT"],
        "python_version": platform.python_version(),
        "dependencies": {"ytdlp": tool_status.to_dict()},
    }

    status_code = 200 if tool_status.available else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Reports degraded (503) when yt-dlp cannot be run.
        """
        health_status, status_code = _get_health_status(app)
        logger.info(
            f"Health check completed: status={health_status['status']} "
            f"ytdlp={health_status['dependencies']['ytdlp']['status']}"
        )
        return jsonify({"success": True, "data": health_status}), status_code


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            "success": False,
            "error": "Endpoint not found. Check /api/docs for available endpoints.",
            "code": "NOT_FOUND",
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            "success": False,
            "error": "Method not allowed for this endpoint.",
            "code": "METHOD_NOT_ALLOWED",
        }), 405
