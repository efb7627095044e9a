"""Request body cap for upload routes, applied before multipart parsing."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..exceptions import FailureReason

logger = logging.getLogger(__name__)

# Room for multipart boundaries and part headers on top of the file itself.
FORM_OVERHEAD_BYTES = 64 * 1024
UPLOAD_PATH_PREFIX = "/api/video_upload/"


def _too_large_detail() -> dict[str, str]:
    return {"status": "error", "failure_reason": str(FailureReason.PAYLOAD_TOO_LARGE)}


def _declared_length(scope: Scope) -> int | None:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None


class UploadSizeLimitMiddleware:
    """Reject upload request bodies larger than ``max_body_bytes``.

    A declared ``Content-Length`` over the limit is answered with 413 without
    reading the body. Otherwise the body is counted as it is received and the
    request fails with 413 as soon as the count passes the limit, so the
    multipart parser never spools more than ``max_body_bytes`` to disk.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        max_body_bytes: int,
        path_prefix: str = UPLOAD_PATH_PREFIX,
    ) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes
        self.path_prefix = path_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.path_prefix):
            await self.app(scope, receive, send)
            return

        declared = _declared_length(scope)
        if declared is not None and declared > self.max_body_bytes:
            logger.warning(
                "ingest.upload.body_too_large",
                extra={"declared_bytes": declared, "limit_bytes": self.max_body_bytes},
            )
            response = JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"detail": _too_large_detail()},
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning(
                        "ingest.upload.body_too_large",
                        extra={"received_bytes": received, "limit_bytes": self.max_body_bytes},
                    )
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=_too_large_detail(),
                    )
            return message

        await self.app(scope, limited_receive, send)
