"""Domain level exceptions and helpers for repository layers."""

from __future__ import annotations

from contextlib import contextmanager
from enum import StrEnum
from typing import Iterator

from sqlalchemy import exc as sa_exc

__all__ = [
    "FailureReason",
    "AppError",
    "RepositoryError",
    "NotFoundError",
    "DatabaseOperationError",
    "ensure_found",
    "handle_sqlalchemy_errors",
]


class FailureReason(StrEnum):
    """Failure reasons reported in error response bodies."""

    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    TOOL_FAILURE = "tool_failure"
    PROBE_OUTPUT_INVALID = "probe_output_invalid"
    NO_STREAMS = "no_streams"
    PROCESSING_FAILED = "processing_failed"
    STORAGE_FAILED = "storage_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    INTERNAL_ERROR = "internal_error"


class AppError(Exception):
    """Base class for application specific errors."""

    failure_reason: FailureReason = FailureReason.INTERNAL_ERROR


class RepositoryError(AppError):
    """Base class for persistence layer failures."""


class NotFoundError(RepositoryError):
    """Raised when a record could not be located."""

    failure_reason = FailureReason.NOT_FOUND


class DatabaseOperationError(RepositoryError):
    """Raised for unexpected database errors."""


def ensure_found(record: object | None, *, entity: str, identifier: str) -> object:
    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as :class:`DatabaseOperationError`.

    ``NotFoundError`` raised inside the block passes through untouched.
    """
    prefix = f"{entity}: " if entity else ""
    try:
        yield
    except sa_exc.IntegrityError as exc:
        raise DatabaseOperationError(f"{prefix}integrity constraint violated") from exc
    except sa_exc.SQLAlchemyError as exc:
        raise DatabaseOperationError(f"{prefix}database operation failed ({type(exc).__name__})") from exc
