"""
Video Processing Value Objects

Immutable value objects for type safety and validation.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from ytdlp_service.domain.errors import InvalidUrlError


# Supported video platforms and their domain patterns
SUPPORTED_PLATFORMS: Dict[str, List[str]] = {
    "youtube": ["youtube.com", "youtu.be", "m.youtube.com"],
    "tiktok": ["tiktok.com", "m.tiktok.com", "vm.tiktok.com"],
    "instagram": ["instagram.com", "m.instagram.com"],
    "capcut": ["capcut.com", "capcut.net"],
    "twitter": ["twitter.com", "x.com", "m.twitter.com", "mobile.twitter.com"],
    "facebook": ["facebook.com", "m.facebook.com", "fb.watch"],
    "reddit": ["reddit.com", "m.reddit.com", "v.redd.it"],
    "twitch": ["twitch.tv", "m.twitch.tv", "clips.twitch.tv"],
    "dailymotion": ["dailymotion.com", "dai.ly"],
    "vimeo": ["vimeo.com", "player.vimeo.com"],
}

MIN_URL_LENGTH = 10
MAX_URL_LENGTH = 2000

_SCRIPT_BLOCK = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_DANGEROUS_SCHEMES = re.compile(r"javascript:|data:|vbscript:", re.IGNORECASE)


class FormatType(Enum):
    """Format categories based on codec availability."""

    VIDEO_AUDIO = "video_audio"
    AUDIO_ONLY = "audio_only"
    VIDEO_ONLY = "video_only"


def normalize_hostname(url: str) -> str:
    """Lower-cased hostname of ``url`` without a leading ``www.``; empty if unparseable."""
    try:
        hostname = urlsplit(url).hostname or ""
    except ValueError:
        return ""
    hostname = hostname.lower()
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def host_matches(hostname: str, domain: str) -> bool:
    """True when ``hostname`` is ``domain`` or one of its subdomains."""
    return hostname == domain or hostname.endswith("." + domain)


def platform_for_host(hostname: str) -> Optional[str]:
    """Return the supported platform name for a hostname, if any."""
    for platform, domains in SUPPORTED_PLATFORMS.items():
        if any(host_matches(hostname, domain) for domain in domains):
            return platform
    return None


def _check_length(value: str) -> None:
    if not MIN_URL_LENGTH <= len(value) <= MAX_URL_LENGTH:
        raise InvalidUrlError(
            f"URL must be between {MIN_URL_LENGTH} and {MAX_URL_LENGTH} characters",
            value=value,
        )


def sanitize_url(value: str) -> str:
    """Strip script blocks and script-capable scheme fragments from a URL."""
    if not isinstance(value, str):
        raise InvalidUrlError("URL must be a string", value=value)
    sanitized = _SCRIPT_BLOCK.sub("", value)
    sanitized = _DANGEROUS_SCHEMES.sub("", sanitized)
    return sanitized.strip()


@dataclass(frozen=True)
class VideoUrl:
    """
    Value object representing a sanitized URL on a supported platform.

    Construct through ``VideoUrl.parse`` to sanitize raw input first;
    the constructor itself only validates.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise InvalidUrlError("URL must be a string", value=self.value)
        _check_length(self.value)

        try:
            parts = urlsplit(self.value)
        except ValueError:
            raise InvalidUrlError("Please provide a valid HTTP/HTTPS URL", value=self.value)

        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise InvalidUrlError("Please provide a valid HTTP/HTTPS URL", value=self.value)

        if platform_for_host(normalize_hostname(self.value)) is None:
            supported = ", ".join(
                [domain for domains in SUPPORTED_PLATFORMS.values() for domain in domains][:10]
            )
            raise InvalidUrlError(
                "URL must be from a supported platform. "
                f"Supported domains include: {supported}, and more.",
                value=self.value,
            )

    @classmethod
    def parse(cls, raw: str) -> "VideoUrl":
        """
        Sanitize then validate raw user input.

        Length limits apply to the raw input and to the sanitized value.
        """
        if isinstance(raw, str):
            _check_length(raw)
        return cls(sanitize_url(raw))

    @property
    def hostname(self) -> str:
        return normalize_hostname(self.value)

    @property
    def platform(self) -> str:
        return platform_for_host(self.hostname) or "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ToolStatus:
    """Result of probing the extraction tool."""

    available: bool
    version: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "status": "available" if self.available else "unavailable",
            "version": self.version if self.available else "unknown",
        }
