"""Publishing processed videos to S3 or to a local assets directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .media_base import ObjectStore
from .media_errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class S3ObjectStore(ObjectStore):
    """Store objects in a single S3 bucket."""

    client: Any
    bucket: str
    region: str
    log: logging.Logger = field(default_factory=lambda: logger)

    @classmethod
    def from_settings(
        cls, *, bucket: str, region: str, endpoint_url: str | None = None
    ) -> "S3ObjectStore":
        client = boto3.client("s3", region_name=region, endpoint_url=endpoint_url)
        return cls(client=client, bucket=bucket, region=region)

    def put(self, key: str, content_type: str, body: BinaryIO) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            self.log.error(
                "storage.s3.put_failed",
                extra={"bucket": self.bucket, "key": key, "error": str(exc)},
            )
            raise StorageError(f"unable to upload '{key}' to bucket '{self.bucket}'") from exc
        self.log.info("storage.s3.put", extra={"bucket": self.bucket, "key": key})

    def url_for(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


@dataclass(slots=True)
class LocalObjectStore(ObjectStore):
    """Keep objects under ``root`` and serve them from ``/assets``."""

    root: Path
    base_url: str

    def path_for(self, key: str) -> Path:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"invalid object key '{key}'")
        return self.root.joinpath(*relative.parts)

    def put(self, key: str, content_type: str, body: BinaryIO) -> None:
        target = self.path_for(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as sink:
                shutil.copyfileobj(body, sink)
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise StorageError(f"unable to write '{key}': {exc}") from exc
        logger.info(
            "storage.local.put",
            extra={"key": key, "path": str(target), "content_type": content_type},
        )

    def url_for(self, key: str) -> str:
        return f"{self.base_url.rstrip('/')}/assets/{key}"
