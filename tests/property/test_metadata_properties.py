"""
Property-based tests for metadata projection and URL validation.
"""

import json

from hypothesis import given

from ytdlp_service.domain.video_processing import MetadataNormalizer, VideoUrl
from ytdlp_service.domain.video_processing.value_objects import SUPPORTED_PLATFORMS, host_matches

from tests.property.strategies import raw_metadata, supported_urls

SOURCE_URL = "https://www.youtube.com/watch?v=source"


@given(info=raw_metadata())
def test_defaulted_fields_are_never_none(info):
    metadata = MetadataNormalizer().parse(json.dumps(info), SOURCE_URL)

    assert isinstance(metadata.title, str) and metadata.title
    assert isinstance(metadata.description, str)
    assert isinstance(metadata.uploader, str) and metadata.uploader
    assert isinstance(metadata.extractor, str) and metadata.extractor
    assert metadata.webpage_url
    for count in (metadata.duration, metadata.view_count, metadata.like_count, metadata.age_limit):
        assert isinstance(count, int) and count >= 0
    assert all(isinstance(tag, str) for tag in metadata.tags)


@given(info=raw_metadata())
def test_format_count_matches_format_list(info):
    metadata = MetadataNormalizer().parse(json.dumps(info), SOURCE_URL)

    formats = info.get("formats")
    assert metadata.format_count == (len(formats) if isinstance(formats, list) else 0)


@given(url=supported_urls())
def test_supported_domains_resolve_to_their_platform(url):
    video_url = VideoUrl.parse(url)

    assert video_url.platform in SUPPORTED_PLATFORMS
    assert any(host_matches(video_url.hostname, domain) for domain in SUPPORTED_PLATFORMS[video_url.platform])
