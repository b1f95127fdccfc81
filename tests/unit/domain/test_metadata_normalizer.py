"""
Unit tests for MetadataNormalizer.

Tests verify that every VideoMetadata field is either taken from the
tool output or set to its documented default.
"""

import json

import pytest

from ytdlp_service.domain.errors import ExtractionErrorKind, OutputParseError
from ytdlp_service.domain.video_processing.services import MetadataNormalizer

SOURCE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.fixture
def normalizer():
    return MetadataNormalizer()


class TestMetadataNormalizer:
    """Test metadata parsing and projection."""

    def test_minimal_object_gets_defaults(self, normalizer):
        """Scenario: {"title":"X","duration":212}."""
        metadata = normalizer.parse('{"title":"X","duration":212}', SOURCE_URL)

        assert metadata.title == "X"
        assert metadata.duration == 212
        assert metadata.description == ""
        assert metadata.uploader == "Unknown"
        assert metadata.view_count == 0
        assert metadata.like_count == 0
        assert metadata.extractor == "unknown"
        assert metadata.age_limit == 0
        assert metadata.thumbnail is None
        assert metadata.upload_date is None
        assert metadata.categories == ()
        assert metadata.tags == ()
        assert metadata.format_count == 0
        assert metadata.webpage_url == SOURCE_URL

    def test_full_object(self, normalizer, metadata_output):
        metadata = normalizer.parse(metadata_output, SOURCE_URL)

        assert metadata.title == "Test Video"
        assert metadata.uploader == "Test Channel"
        assert metadata.view_count == 1500000
        assert metadata.extractor == "youtube"
        assert metadata.format_count == 2
        assert metadata.categories == ("Music",)
        assert metadata.tags == ("test", "video")

    def test_empty_object_gets_unknown_title(self, normalizer):
        assert normalizer.parse("{}", SOURCE_URL).title == "Unknown Title"

    def test_uploader_falls_back_to_channel(self, normalizer):
        metadata = normalizer.parse(json.dumps({"channel": "Some Channel"}), SOURCE_URL)

        assert metadata.uploader == "Some Channel"

    def test_null_fields_become_defaults(self, normalizer):
        output = json.dumps({
            "title": None,
            "description": None,
            "duration": None,
            "view_count": None,
            "tags": None,
        })

        metadata = normalizer.parse(output, SOURCE_URL)

        assert metadata.title == "Unknown Title"
        assert metadata.description == ""
        assert metadata.duration == 0
        assert metadata.view_count == 0
        assert metadata.tags == ()

    def test_fractional_duration_is_truncated(self, normalizer):
        assert normalizer.parse('{"duration": 212.7}', SOURCE_URL).duration == 212

    def test_wrong_types_are_ignored(self, normalizer):
        output = json.dumps({"duration": "212", "view_count": True, "tags": ["a", 1, None]})

        metadata = normalizer.parse(output, SOURCE_URL)

        assert metadata.duration == 0
        assert metadata.view_count == 0
        assert metadata.tags == ("a",)

    def test_surrounding_whitespace_is_ignored(self, normalizer):
        assert normalizer.parse('\n  {"title": "X"}  \n', SOURCE_URL).title == "X"

    def test_invalid_json_raises_parse_error(self, normalizer):
        with pytest.raises(OutputParseError) as exc_info:
            normalizer.parse("ERROR: something went wrong", SOURCE_URL)

        assert exc_info.value.kind is ExtractionErrorKind.PARSE_ERROR
        assert exc_info.value.message == "Failed to parse video information from yt-dlp output."
        assert exc_info.value.diagnostic == "ERROR: something went wrong"

    def test_non_object_json_raises_parse_error(self, normalizer):
        with pytest.raises(OutputParseError):
            normalizer.parse("[1, 2, 3]", SOURCE_URL)

    def test_parse_error_sample_is_bounded(self, normalizer):
        with pytest.raises(OutputParseError) as exc_info:
            normalizer.parse("x" * 5000, SOURCE_URL)

        assert len(exc_info.value.diagnostic) == 200

    def test_to_dict_has_duration_string(self, normalizer):
        data = normalizer.parse('{"title":"X","duration":212}', SOURCE_URL).to_dict()

        assert data["duration_string"] == "3:32"
        assert data["tags"] == []

    def test_to_quick_dict_fields(self, normalizer, metadata_output):
        data = normalizer.parse(metadata_output, SOURCE_URL).to_quick_dict()

        assert set(data) == {"title", "thumbnail", "duration", "uploader", "webpage_url", "extractor"}
