"""
Application Layer

Use-case services and dependency wiring.
"""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .video_service import VideoService

__all__ = ["DependencyContainer", "DependencyNotFoundError", "VideoService"]
