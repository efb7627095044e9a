"""Blocking execution of external media tools."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from .media_errors import ToolInvocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolOutput:
    stdout: bytes
    stderr: str


@dataclass(slots=True)
class ToolRunner:
    """Run ffprobe/ffmpeg style tools as child processes.

    The calling thread blocks until the child exits. ``max_concurrent`` caps
    how many children run at once across every request sharing the runner.
    """

    max_concurrent: int = 4
    _slots: threading.BoundedSemaphore = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._slots = threading.BoundedSemaphore(self.max_concurrent)

    def run(self, command: Sequence[str], *, timeout: float | None = None) -> ToolOutput:
        tool = command[0]
        with self._slots:
            logger.debug("media.tool.start", extra={"tool": tool, "argv": list(command[1:])})
            try:
                completed = subprocess.run(
                    list(command),
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    timeout=timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired as exc:
                stderr = _decode(exc.stderr)
                logger.error(
                    "media.tool.failed",
                    extra={"tool": tool, "timeout_seconds": timeout, "stderr": stderr},
                )
                raise ToolInvocationError(
                    tool,
                    f"timed out after {timeout}s",
                    diagnostics=stderr,
                ) from exc
            except OSError as exc:
                logger.error("media.tool.failed", extra={"tool": tool, "error": str(exc)})
                raise ToolInvocationError(tool, f"could not be started: {exc}") from exc

        stderr = _decode(completed.stderr)
        if completed.returncode != 0:
            logger.error(
                "media.tool.failed",
                extra={"tool": tool, "returncode": completed.returncode, "stderr": stderr},
            )
            raise ToolInvocationError(
                tool,
                f"exited with status {completed.returncode}: {stderr.strip()}",
                returncode=completed.returncode,
                diagnostics=stderr,
            )
        return ToolOutput(stdout=completed.stdout, stderr=stderr)


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")
