"""Upload validation utilities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .ingest_errors import InputValidationError, UnsupportedMediaError

logger = logging.getLogger(__name__)


def parse_media_type(content_type: str | None) -> str:
    """Return the bare ``type/subtype`` of a Content-Type header value."""
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    type_, sep, subtype = media_type.partition("/")
    if not sep or not type_ or not subtype or "/" in subtype:
        raise InputValidationError(f"invalid Content-Type header: {content_type!r}")
    return media_type


@dataclass(slots=True)
class UploadValidator:
    """Validate upload content types against the allowed set."""

    allowed_content_types: Sequence[str] = ("video/mp4",)

    def validate_content_type(self, content_type: str | None) -> str:
        media_type = parse_media_type(content_type)
        if media_type not in self.allowed_content_types:
            logger.warning(
                "ingest.upload.unsupported_media",
                extra={"content_type": content_type},
            )
            raise UnsupportedMediaError(f"unsupported media type: {media_type}")
        return media_type
