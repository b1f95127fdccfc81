"""
API v1 - yt-dlp extraction REST API

Versioned endpoints with OpenAPI/Swagger documentation.
"""

from flask import Blueprint
from flask_restx import Api

api_v1_bp = Blueprint("api_v1", __name__, url_prefix="/api")

# Swagger UI is served at /api/docs
api = Api(
    api_v1_bp,
    version="1.0.0",
    title="yt-dlp Extraction API",
    description="Extracts video metadata and direct download links from supported platforms using yt-dlp",
    doc="/docs",
    authorizations={
        "apikey": {"type": "apiKey", "in": "header", "name": "X-API-Key"},
    },
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import system_ns, video_ns  # noqa: E402

api.add_namespace(video_ns)
api.add_namespace(system_ns)
