"""
Shared pytest fixtures and configuration for the ytdlp_service test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Shared fixtures for URLs and tool output
- A Flask application wired with a mock extractor
"""

import json
from unittest.mock import Mock

import pytest
from hypothesis import HealthCheck, Phase, settings

from ytdlp_service.domain.video_processing import IVideoMetadataExtractor, ToolStatus, VideoUrl

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("default")

TEST_API_KEY = "test-api-key"


# =============================================================================
# URL Fixtures
# =============================================================================

@pytest.fixture
def sample_youtube_url() -> str:
    """Provide a sample valid YouTube URL."""
    return "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.fixture
def sample_capcut_url() -> str:
    """Provide a sample CapCut template URL."""
    return "https://www.capcut.com/template-detail/7299286607478181121"


@pytest.fixture
def youtube_video_url(sample_youtube_url) -> VideoUrl:
    return VideoUrl.parse(sample_youtube_url)


# =============================================================================
# Tool Output Fixtures
# =============================================================================

@pytest.fixture
def metadata_output() -> str:
    """yt-dlp --dump-json output for a typical video."""
    return json.dumps({
        "title": "Test Video",
        "description": "A test video",
        "duration": 212,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hq720.jpg",
        "uploader": "Test Channel",
        "upload_date": "20091025",
        "view_count": 1500000,
        "like_count": 18000,
        "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "extractor": "youtube",
        "age_limit": 0,
        "categories": ["Music"],
        "tags": ["test", "video"],
        "formats": [{"format_id": "18"}, {"format_id": "140"}],
    })


@pytest.fixture
def formats_output() -> str:
    """yt-dlp --list-formats --dump-json output: listing noise, then the canonical object."""
    canonical = {
        "title": "Test Video",
        "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "duration": 212,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hq720.jpg",
        "formats": [
            {"format_id": "18", "url": "https://media.example/18", "ext": "mp4",
             "vcodec": "avc1.42001E", "acodec": "mp4a.40.2", "height": 360, "width": 640,
             "format_note": "360p", "filesize": 10485760},
            {"format_id": "22", "url": "https://media.example/22", "ext": "mp4",
             "vcodec": "avc1.64001F", "acodec": "mp4a.40.2", "height": 720, "width": 1280,
             "format_note": "720p"},
            {"format_id": "140", "url": "https://media.example/140", "ext": "m4a",
             "vcodec": "none", "acodec": "mp4a.40.2", "abr": 129.5, "format_note": "medium"},
            {"format_id": "137", "url": "https://media.example/137", "ext": "mp4",
             "vcodec": "avc1.640028", "acodec": "none", "height": 1080, "width": 1920,
             "format_note": "1080p"},
            {"format_id": "sb0", "url": "https://media.example/sb0", "ext": "mhtml",
             "vcodec": "none", "acodec": "none", "format_note": "storyboard"},
        ],
    }
    noise = "[youtube] dQw4w9WgXcQ: Downloading webpage\nID  EXT  RESOLUTION\n"
    return noise + json.dumps(canonical) + "\n"


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_metadata_extractor():
    """
    Provide a mock metadata extractor for unit testing.

    Returns a Mock constrained to the IVideoMetadataExtractor interface.
    """
    mock = Mock(spec=IVideoMetadataExtractor)
    mock.check_availability.return_value = ToolStatus(available=True, version="2024.08.06")
    return mock


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app_config(monkeypatch):
    """AppConfig built from a controlled environment."""
    from app_factory import AppConfig

    monkeypatch.setenv("API_KEY", TEST_API_KEY)
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.delenv("LOG_DIR", raising=False)
    config = AppConfig()
    config.configure_logging = False
    return config


@pytest.fixture
def flask_app(app_config):
    """Create the Flask app for testing."""
    from app_factory import create_app

    app = create_app(app_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(flask_app):
    """Create test client."""
    return flask_app.test_client()


@pytest.fixture
def auth_headers():
    return {"X-API-Key": TEST_API_KEY}


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "contract: Contract tests (verify interface compliance)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that need the real yt-dlp executable and network access"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/contracts/* -> @pytest.mark.contract
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/contracts/" in test_path or "\\contracts\\" in test_path:
            item.add_marker(pytest.mark.contract)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
