"""Persistence layer for video records."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from ..db.db_models import VideoModel
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from .videos_models import Video


class VideoRepository:
    """Store and load video metadata rows."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create_video(self, *, user_id: UUID, title: str, description: str = "") -> Video:
        now = datetime.utcnow()
        model = VideoModel(
            id=str(uuid.uuid4()),
            user_id=str(user_id),
            title=title,
            description=description,
            created_at=now,
            updated_at=now,
        )
        with handle_sqlalchemy_errors(entity="video"), self._session_factory() as session:
            session.add(model)
            session.commit()
            return self._to_domain(model)

    def get_video(self, video_id: UUID) -> Video:
        with handle_sqlalchemy_errors(entity="video"), self._session_factory() as session:
            model = session.get(VideoModel, str(video_id))
            ensure_found(model, entity="video", identifier=str(video_id))
            return self._to_domain(model)

    def list_videos(self, user_id: UUID) -> Sequence[Video]:
        with handle_sqlalchemy_errors(entity="video"), self._session_factory() as session:
            rows = (
                session.query(VideoModel)
                .filter(VideoModel.user_id == str(user_id))
                .order_by(VideoModel.created_at.desc(), VideoModel.id)
                .all()
            )
            return [self._to_domain(row) for row in rows]

    def update_video(self, video: Video) -> Video:
        """Persist mutable fields of ``video`` and bump ``updated_at``."""
        with handle_sqlalchemy_errors(entity="video"), self._session_factory() as session:
            model = session.get(VideoModel, str(video.id))
            ensure_found(model, entity="video", identifier=str(video.id))
            model.title = video.title
            model.description = video.description
            model.video_url = video.video_url
            model.thumbnail_url = video.thumbnail_url
            model.updated_at = datetime.utcnow()
            session.commit()
            return self._to_domain(model)

    @staticmethod
    def _to_domain(model: VideoModel) -> Video:
        return Video(
            id=UUID(model.id),
            user_id=UUID(model.user_id),
            title=model.title,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
            video_url=model.video_url,
            thumbnail_url=model.thumbnail_url,
        )
