"""Domain-specific exceptions for ingest pipeline."""

from ..exceptions import AppError, FailureReason


class IngestError(AppError):
    """Base class for ingest-related errors."""


class InputValidationError(IngestError):
    """Raised when the request carries an unusable identifier or payload."""

    failure_reason = FailureReason.INVALID_REQUEST


class UnsupportedMediaError(InputValidationError):
    """Raised when Content-Type is not allowed."""

    failure_reason = FailureReason.UNSUPPORTED_MEDIA_TYPE


class PayloadTooLargeError(InputValidationError):
    """Raised when uploaded file exceeds configured limits."""

    failure_reason = FailureReason.PAYLOAD_TOO_LARGE


class UploadReadError(InputValidationError):
    """Raised when streaming the upload fails."""


class AuthorizationError(IngestError):
    """Raised when the caller does not own the target video."""

    failure_reason = FailureReason.UNAUTHORIZED


class PersistenceError(IngestError):
    """Raised when the video record cannot be updated after publishing."""

    failure_reason = FailureReason.PERSISTENCE_FAILED
