"""Data structures for ingest pipeline."""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from uuid import UUID, uuid4

from ..media.media_models import MediaGeometry, OrientationCategory


class IngestStage(StrEnum):
    """Progress of a single ingest request."""

    RECEIVING = "receiving"
    BUFFERED = "buffered"
    PROBED = "probed"
    CLASSIFIED = "classified"
    REWRITTEN = "rewritten"
    PUBLISHED = "published"
    CLEANED = "cleaned"
    FAILED = "failed"


@dataclass(slots=True)
class IngestContext:
    """Per-request state threaded through the pipeline."""

    content_type: str
    request_id: UUID = field(default_factory=uuid4)
    stage: IngestStage = IngestStage.RECEIVING
    failed_at: IngestStage | None = None
    upload_path: Path | None = None
    processed_path: Path | None = None
    size_bytes: int = 0
    geometry: MediaGeometry | None = None
    aspect_ratio: str | None = None
    orientation: OrientationCategory | None = None
    key: str | None = None

    def advance(self, stage: IngestStage) -> None:
        self.stage = stage

    def fail(self) -> None:
        self.failed_at = self.stage
        self.stage = IngestStage.FAILED


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Outcome of a successful ingest."""

    key: str
    url: str
    aspect_ratio: str
    orientation: OrientationCategory
    geometry: MediaGeometry
    size_bytes: int
