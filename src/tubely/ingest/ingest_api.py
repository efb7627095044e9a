"""HTTP routes for video uploads."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from starlette.concurrency import run_in_threadpool

from ..auth.auth_dependencies import require_user
from ..exceptions import AppError, FailureReason, NotFoundError
from ..videos.videos_schemas import VideoResponse
from .ingest_errors import AuthorizationError, InputValidationError, PayloadTooLargeError
from .ingest_service import IngestService

router = APIRouter(prefix="/api", tags=["ingest"])
logger = logging.getLogger(__name__)


def get_ingest_service(request: Request) -> IngestService:
    """Fetch ingest service from application state."""
    try:
        return request.app.state.ingest_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover
        raise RuntimeError("IngestService is not configured") from exc


def _error(status_code: int, reason: FailureReason | str, details: str | None = None) -> HTTPException:
    detail: dict[str, str] = {"status": "error", "failure_reason": str(reason)}
    if details:
        detail["details"] = details
    return HTTPException(status_code=status_code, detail=detail)


def parse_video_id(video_id: str) -> UUID:
    """Reject malformed ids before the caller is authenticated."""
    try:
        return UUID(video_id)
    except ValueError:
        raise _error(status.HTTP_400_BAD_REQUEST, "invalid_id") from None


@router.post("/video_upload/{video_id}", response_model=VideoResponse)
async def upload_video(
    video_uuid: UUID = Depends(parse_video_id),
    video: UploadFile | None = File(None),
    user_id: UUID = Depends(require_user),
    service: IngestService = Depends(get_ingest_service),
) -> VideoResponse:
    """Store an uploaded MP4 for ``video_id`` and return the updated record."""
    if video is None:
        raise _error(
            status.HTTP_400_BAD_REQUEST,
            FailureReason.INVALID_REQUEST,
            "form file 'video' is required",
        )

    try:
        record = await run_in_threadpool(
            service.upload_video,
            video_uuid,
            user_id,
            video.file,
            video.content_type,
        )
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, exc.failure_reason) from exc
    except AuthorizationError as exc:
        raise _error(status.HTTP_401_UNAUTHORIZED, exc.failure_reason) from exc
    except PayloadTooLargeError as exc:
        raise _error(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, exc.failure_reason) from exc
    except InputValidationError as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, exc.failure_reason, str(exc)) from exc
    except AppError as exc:
        logger.error(
            "ingest.upload.failed",
            extra={"video_id": str(video_uuid), "reason": str(exc.failure_reason), "error": str(exc)},
        )
        raise _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.failure_reason) from exc
    except Exception as exc:
        logger.exception("ingest.unexpected_error", extra={"video_id": str(video_uuid)})
        raise _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, FailureReason.INTERNAL_ERROR
        ) from exc
    finally:
        await video.close()

    return VideoResponse.from_domain(record)
