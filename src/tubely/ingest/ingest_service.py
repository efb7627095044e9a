"""Domain service for video ingest operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import BinaryIO
from uuid import UUID

from ..exceptions import RepositoryError
from ..media.aspect_ratio import classify, orientation_for
from ..media.asset_keys import build_video_key
from ..media.media_base import MediaProber, MediaRewriter, ObjectStore
from ..media.temp_media_store import TempMediaStore, TempScope
from ..videos.videos_models import Video
from ..videos.videos_repository import VideoRepository
from .ingest_errors import AuthorizationError, PersistenceError
from .ingest_models import IngestContext, IngestResult, IngestStage
from .validation import UploadValidator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestService:
    """Coordinates the upload → probe → classify → rewrite → publish workflow.

    Every step runs synchronously on the calling thread. Temp files created for
    a request are removed when :meth:`ingest` returns or raises.
    """

    video_repo: VideoRepository
    validator: UploadValidator
    temp_store: TempMediaStore
    prober: MediaProber
    rewriter: MediaRewriter
    object_store: ObjectStore
    max_upload_bytes: int
    log: logging.Logger = field(default_factory=lambda: logger)

    def upload_video(
        self,
        video_id: UUID,
        user_id: UUID,
        source: BinaryIO,
        content_type: str | None,
    ) -> Video:
        """Ingest ``source`` for an owned video record and store its URL."""
        video = self.video_repo.get_video(video_id)
        if video.user_id != user_id:
            self.log.warning(
                "ingest.video.not_owner",
                extra={"video_id": str(video_id), "user_id": str(user_id)},
            )
            raise AuthorizationError("user is not authorized to update this video")

        media_type = self.validator.validate_content_type(content_type)
        self.log.info(
            "ingest.video.upload.start",
            extra={"video_id": str(video_id), "user_id": str(user_id)},
        )
        result = self.ingest(source, media_type)

        try:
            updated = self.video_repo.update_video(replace(video, video_url=result.url))
        except RepositoryError as exc:
            self.log.error(
                "ingest.video.persist_failed",
                extra={"video_id": str(video_id), "key": result.key, "error": str(exc)},
            )
            raise PersistenceError("unable to update video metadata") from exc

        self.log.info(
            "ingest.video.upload.done",
            extra={
                "video_id": str(video_id),
                "key": result.key,
                "aspect_ratio": result.aspect_ratio,
            },
        )
        return updated

    def ingest(self, source: BinaryIO, content_type: str) -> IngestResult:
        """Buffer, inspect, rewrite and publish a single upload."""
        ctx = IngestContext(content_type=content_type)
        try:
            with self.temp_store.scope() as scope:
                result = self._run(ctx, scope, source)
        except Exception as exc:
            ctx.fail()
            self.log.warning(
                "ingest.job.failed",
                extra={
                    "request_id": str(ctx.request_id),
                    "stage": str(ctx.failed_at),
                    "reason": str(getattr(exc, "failure_reason", "internal_error")),
                    "error": str(exc),
                },
            )
            raise
        ctx.advance(IngestStage.CLEANED)
        self.log.info(
            "ingest.job.completed",
            extra={"request_id": str(ctx.request_id), "key": result.key},
        )
        return result

    def _run(self, ctx: IngestContext, scope: TempScope, source: BinaryIO) -> IngestResult:
        buffered = self.temp_store.buffer_upload(scope, source, max_bytes=self.max_upload_bytes)
        ctx.upload_path = buffered.path
        ctx.size_bytes = buffered.size_bytes
        ctx.advance(IngestStage.BUFFERED)

        ctx.geometry = self.prober.probe(buffered.path)
        ctx.advance(IngestStage.PROBED)

        ctx.aspect_ratio = classify(ctx.geometry.width, ctx.geometry.height)
        ctx.orientation = orientation_for(ctx.aspect_ratio)
        ctx.key = build_video_key(ctx.orientation, ctx.content_type)
        ctx.advance(IngestStage.CLASSIFIED)
        self.log.info(
            "ingest.job.classified",
            extra={
                "request_id": str(ctx.request_id),
                "width": ctx.geometry.width,
                "height": ctx.geometry.height,
                "aspect_ratio": ctx.aspect_ratio,
                "orientation": ctx.orientation.value,
            },
        )

        scope.track(self.rewriter.output_path_for(buffered.path))
        ctx.processed_path = self.rewriter.rewrite(buffered.path)
        scope.track(ctx.processed_path)
        ctx.advance(IngestStage.REWRITTEN)

        with ctx.processed_path.open("rb") as body:
            self.object_store.put(ctx.key, ctx.content_type, body)
        ctx.advance(IngestStage.PUBLISHED)

        return IngestResult(
            key=ctx.key,
            url=self.object_store.url_for(ctx.key),
            aspect_ratio=ctx.aspect_ratio,
            orientation=ctx.orientation,
            geometry=ctx.geometry,
            size_bytes=ctx.size_bytes,
        )
