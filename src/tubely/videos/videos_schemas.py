"""Pydantic schemas for video endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .videos_models import Video


class VideoCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""


class VideoResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: str
    video_url: str | None = None
    thumbnail_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, video: Video) -> "VideoResponse":
        return cls(
            id=video.id,
            user_id=video.user_id,
            title=video.title,
            description=video.description,
            video_url=video.video_url,
            thumbnail_url=video.thumbnail_url,
            created_at=video.created_at,
            updated_at=video.updated_at,
        )
