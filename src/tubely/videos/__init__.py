"""Video metadata records."""

from .videos_models import Video
from .videos_repository import VideoRepository

__all__ = ["Video", "VideoRepository"]
