"""Abstract interfaces for the media pipeline collaborators."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from .media_models import MediaGeometry


class MediaProber(ABC):
    """Reads stream geometry from a media file on disk."""

    @abstractmethod
    def probe(self, path: Path) -> MediaGeometry:
        """Return geometry of the first stream reported for ``path``."""


class MediaRewriter(ABC):
    """Produces a playback-optimised copy of a media file."""

    @abstractmethod
    def output_path_for(self, path: Path) -> Path:
        """Return where :meth:`rewrite` will write its output for ``path``."""

    @abstractmethod
    def rewrite(self, path: Path) -> Path:
        """Rewrite ``path`` and return the location of the new file."""


class ObjectStore(ABC):
    """Durable storage for processed videos."""

    @abstractmethod
    def put(self, key: str, content_type: str, body: BinaryIO) -> None:
        """Store ``body`` under ``key``."""

    @abstractmethod
    def url_for(self, key: str) -> str:
        """Return the public URL of ``key``."""
