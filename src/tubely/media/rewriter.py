"""Fast start container rewriting with ffmpeg."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .media_base import MediaRewriter
from .media_errors import ProcessingVerificationError
from .tool_runner import ToolRunner

logger = logging.getLogger(__name__)

PROCESSING_SUFFIX = ".processing"


@dataclass(slots=True)
class FastStartRewriter(MediaRewriter):
    """Move the ``moov`` atom to the front of an MP4 without re-encoding."""

    runner: ToolRunner
    binary: str = "ffmpeg"
    timeout_seconds: float | None = 600.0
    container_format: str = "mp4"

    def output_path_for(self, path: Path) -> Path:
        return path.with_name(path.name + PROCESSING_SUFFIX)

    def command(self, source: Path, target: Path) -> list[str]:
        return [
            self.binary,
            "-hide_banner",
            "-loglevel",
            "error",
            "-y",
            "-i",
            str(source),
            "-c",
            "copy",
            "-movflags",
            "faststart",
            "-fflags",
            "+bitexact",
            "-f",
            self.container_format,
            str(target),
        ]

    def rewrite(self, path: Path) -> Path:
        target = self.output_path_for(path)
        self.runner.run(self.command(path, target), timeout=self.timeout_seconds)

        try:
            size = target.stat().st_size
        except FileNotFoundError as exc:
            raise ProcessingVerificationError(f"processed file is missing: {target}") from exc
        if size == 0:
            raise ProcessingVerificationError(f"processed file is empty: {target}")

        logger.debug(
            "media.rewrite.done",
            extra={"source": str(path), "target": str(target), "size_bytes": size},
        )
        return target
