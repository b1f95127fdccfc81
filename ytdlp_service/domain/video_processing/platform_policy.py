"""
Platform Policy

Per-platform invocation parameters, selected by hostname before the
extraction tool runs. Keeps platform conditionals out of the invoker.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from .value_objects import host_matches, normalize_hostname


@dataclass(frozen=True)
class PlatformPolicy:
    """Invocation parameters for one class of hosts."""

    name: str
    metadata_timeout_ms: int = 30000
    formats_timeout_ms: int = 45000
    metadata_flags: Tuple[str, ...] = ()
    formats_flags: Tuple[str, ...] = ()
    synthetic_single_format: bool = False
    fallback_title: str = "Unknown Title"

    def __post_init__(self):
        if self.metadata_timeout_ms <= 0 or self.formats_timeout_ms <= 0:
            raise ValueError("Policy timeouts must be positive")


DEFAULT_POLICY = PlatformPolicy(name="default")

# CapCut template pages carry no format list; a single entry is synthesized.
PLATFORM_POLICIES: Dict[str, PlatformPolicy] = {
    "capcut": PlatformPolicy(
        name="capcut",
        metadata_timeout_ms=10000,
        formats_timeout_ms=15000,
        metadata_flags=("--socket-timeout", "8", "--retries", "1"),
        formats_flags=("--socket-timeout", "10", "--retries", "1"),
        synthetic_single_format=True,
        fallback_title="CapCut Content",
    ),
}

# Host suffix -> key into PLATFORM_POLICIES
POLICY_HOST_SUFFIXES: Dict[str, str] = {
    "capcut.com": "capcut",
    "capcut.net": "capcut",
}


def classify_host(url: str) -> Optional[str]:
    """Return the policy key whose host suffix matches ``url``, if any."""
    hostname = normalize_hostname(url)
    if not hostname:
        return None
    for suffix, key in POLICY_HOST_SUFFIXES.items():
        if host_matches(hostname, suffix):
            return key
    return None


def resolve_policy(url: str, default: PlatformPolicy = DEFAULT_POLICY) -> PlatformPolicy:
    """
    Select invocation parameters for a URL.

    Args:
        url: Validated video URL
        default: Policy used for every host without an override

    Returns:
        PlatformPolicy for the URL's host
    """
    key = classify_host(url)
    if key is None:
        return default
    return PLATFORM_POLICIES[key]


def default_policy_from_timeouts(metadata_timeout_ms: int, formats_timeout_ms: int) -> PlatformPolicy:
    """Build the default policy with configured deadlines."""
    return replace(
        DEFAULT_POLICY,
        metadata_timeout_ms=metadata_timeout_ms,
        formats_timeout_ms=formats_timeout_ms,
    )
