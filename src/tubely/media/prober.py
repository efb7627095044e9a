"""Stream geometry extraction with ffprobe."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .media_base import MediaProber
from .media_errors import NoStreamsError, OutputParseError
from .media_models import MediaGeometry
from .tool_runner import ToolRunner

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FFprobeProber(MediaProber):
    """Probe files with ``ffprobe -show_streams`` JSON output.

    Only the first reported stream is inspected, whatever its type. Files whose
    first stream is audio therefore fail with :class:`OutputParseError` rather
    than falling through to a later video stream.
    """

    runner: ToolRunner
    binary: str = "ffprobe"
    timeout_seconds: float | None = 30.0

    def command(self, path: Path) -> list[str]:
        return [
            self.binary,
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_streams",
            str(path),
        ]

    def probe(self, path: Path) -> MediaGeometry:
        output = self.runner.run(self.command(path), timeout=self.timeout_seconds)
        geometry = parse_geometry(output.stdout)
        logger.debug(
            "media.probe.done",
            extra={"path": str(path), "width": geometry.width, "height": geometry.height},
        )
        return geometry


def parse_geometry(raw: bytes | str) -> MediaGeometry:
    """Extract the first stream's geometry from ffprobe JSON output."""
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise OutputParseError(f"unable to parse ffprobe output: {exc}") from exc
    if not isinstance(document, dict):
        raise OutputParseError("ffprobe output is not a JSON object")

    streams = document.get("streams", [])
    if not isinstance(streams, list):
        raise OutputParseError("ffprobe 'streams' is not a list")
    if not streams:
        raise NoStreamsError("no streams found")

    first = streams[0]
    if not isinstance(first, dict):
        raise OutputParseError("ffprobe stream entry is not an object")
    width = _dimension(first, "width")
    height = _dimension(first, "height")
    return MediaGeometry(width=width, height=height)


def _dimension(stream: dict[str, Any], name: str) -> int:
    value = stream.get(name)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        codec_type = stream.get("codec_type", "unknown")
        raise OutputParseError(
            f"first stream ({codec_type}) has no usable {name}: {value!r}"
        )
    return value
