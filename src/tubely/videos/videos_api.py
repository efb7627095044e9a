"""HTTP routes for video records."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..auth.auth_dependencies import require_user
from ..exceptions import NotFoundError
from .videos_repository import VideoRepository
from .videos_schemas import VideoCreateRequest, VideoResponse

router = APIRouter(prefix="/api/videos", tags=["videos"])


def get_video_repo(request: Request) -> VideoRepository:
    try:
        return request.app.state.video_repo  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover
        raise RuntimeError("VideoRepository is not configured") from exc


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
def create_video(
    payload: VideoCreateRequest,
    user_id: UUID = Depends(require_user),
    repo: VideoRepository = Depends(get_video_repo),
) -> VideoResponse:
    video = repo.create_video(
        user_id=user_id, title=payload.title, description=payload.description
    )
    return VideoResponse.from_domain(video)


@router.get("", response_model=list[VideoResponse])
def list_videos(
    user_id: UUID = Depends(require_user),
    repo: VideoRepository = Depends(get_video_repo),
) -> list[VideoResponse]:
    return [VideoResponse.from_domain(video) for video in repo.list_videos(user_id)]


@router.get("/{video_id}", response_model=VideoResponse)
def get_video(
    video_id: UUID,
    user_id: UUID = Depends(require_user),
    repo: VideoRepository = Depends(get_video_repo),
) -> VideoResponse:
    try:
        video = repo.get_video(video_id)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"status": "error", "failure_reason": "not_found"},
        ) from exc
    if video.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "unauthorized"},
        )
    return VideoResponse.from_domain(video)
