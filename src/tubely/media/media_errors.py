"""Errors raised while inspecting, rewriting and publishing media."""

from __future__ import annotations

from ..exceptions import AppError, FailureReason


class MediaError(AppError):
    """Base class for media pipeline failures."""


class ToolInvocationError(MediaError):
    """Raised when an external tool cannot run or exits non-zero."""

    failure_reason = FailureReason.TOOL_FAILURE

    def __init__(
        self,
        tool: str,
        message: str,
        *,
        returncode: int | None = None,
        diagnostics: str = "",
    ) -> None:
        super().__init__(f"{tool}: {message}")
        self.tool = tool
        self.returncode = returncode
        self.diagnostics = diagnostics


class OutputParseError(MediaError):
    """Raised when probe output does not have the expected shape."""

    failure_reason = FailureReason.PROBE_OUTPUT_INVALID


class NoStreamsError(MediaError):
    """Raised when the probed file reports no streams."""

    failure_reason = FailureReason.NO_STREAMS


class ProcessingVerificationError(MediaError):
    """Raised when the rewritten file is missing or empty."""

    failure_reason = FailureReason.PROCESSING_FAILED


class StorageError(MediaError):
    """Raised when a processed file cannot be published."""

    failure_reason = FailureReason.STORAGE_FAILED
