"""Temporary media storage for ingest uploads."""

from __future__ import annotations

import logging
import tempfile
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from ..ingest.ingest_errors import PayloadTooLargeError, UploadReadError

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB
UPLOAD_PREFIX = "tubely-upload-"


@dataclass(slots=True)
class BufferedUpload:
    """Upload body fully written to a temp file."""

    path: Path
    size_bytes: int


@dataclass(slots=True)
class TempScope:
    """Paths owned by a single ingest request."""

    artifacts: list[Path] = field(default_factory=list)

    def track(self, path: Path) -> Path:
        if path not in self.artifacts:
            self.artifacts.append(path)
        return path


@dataclass(slots=True)
class TempMediaStore:
    """Manages lifecycle of temporary ingest files."""

    directory: Path | None = None
    chunk_size: int = CHUNK_SIZE
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def ensure_structure(self) -> Path:
        if self.directory is None:
            return Path(tempfile.gettempdir())
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    @contextmanager
    def scope(self) -> Iterator[TempScope]:
        """Yield a scope whose tracked files are removed on exit, whatever happens."""
        scope = TempScope()
        try:
            yield scope
        finally:
            self.release(scope.artifacts)

    def buffer_upload(
        self,
        scope: TempScope,
        source: BinaryIO,
        *,
        max_bytes: int,
        suffix: str = ".mp4",
    ) -> BufferedUpload:
        """Copy ``source`` into a new temp file registered in ``scope``."""
        directory = self.ensure_structure()
        size = 0
        with tempfile.NamedTemporaryFile(
            prefix=UPLOAD_PREFIX, suffix=suffix, dir=directory, delete=False
        ) as sink:
            path = scope.track(Path(sink.name))
            while True:
                try:
                    chunk = source.read(self.chunk_size)
                except OSError as exc:
                    self.log.error("media.temp.read_failed", exc_info=exc)
                    raise UploadReadError(str(exc)) from exc
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    self.log.warning(
                        "media.temp.payload_too_large",
                        extra={"size_bytes": size, "limit_bytes": max_bytes},
                    )
                    raise PayloadTooLargeError(f"upload exceeds {max_bytes} bytes")
                sink.write(chunk)
            sink.flush()

        self.log.info(
            "media.temp.persisted",
            extra={"path": str(path), "size_bytes": size},
        )
        return BufferedUpload(path=path, size_bytes=size)

    def release(self, paths: Iterable[Path]) -> None:
        """Remove temp files; a failed removal is logged, never raised."""
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                self.log.warning(
                    "media.temp.remove_failed",
                    extra={"path": str(path), "error": str(exc)},
                )
            else:
                self.log.debug("media.temp.removed", extra={"path": str(path)})

    def list_expired(self, max_age_seconds: float, reference_time: float | None = None) -> list[Path]:
        """Return upload artifacts older than ``max_age_seconds``."""
        now = time.time() if reference_time is None else reference_time
        directory = self.ensure_structure()
        expired: list[Path] = []
        for path in sorted(directory.glob(f"{UPLOAD_PREFIX}*")):
            try:
                modified = path.stat().st_mtime
            except FileNotFoundError:
                continue
            if path.is_file() and now - modified > max_age_seconds:
                expired.append(path)
        return expired

    def cleanup_expired(self, max_age_seconds: float, reference_time: float | None = None) -> int:
        """Purge artifacts left behind by requests that never reached cleanup."""
        expired = self.list_expired(max_age_seconds, reference_time)
        self.release(expired)
        for path in expired:
            self.log.info("media.temp.cleanup.removed", extra={"path": str(path)})
        return len(expired)
