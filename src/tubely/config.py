"""Application configuration builder.

Settings are read once from ``TUBELY_*`` environment variables (or ``.env``)
and frozen into :class:`AppConfig`, which is handed explicitly to the wiring
code in :mod:`tubely.dependencies`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db


class TubelySettings(BaseSettings):
    """Runtime settings for the Tubely service."""

    model_config = SettingsConfigDict(env_prefix="TUBELY_", env_file=".env", extra="ignore")

    database_url: str = Field(
        default="sqlite:///tubely.db",
        description="SQLAlchemy URL of the video metadata database.",
    )
    assets_root: Path = Field(
        default=Path("assets"),
        description="Directory served under /assets when the local storage backend is used.",
    )
    temp_dir: Path | None = Field(
        default=None,
        description="Directory for buffered uploads; the system temp dir when unset.",
    )
    storage_backend: Literal["s3", "local"] = Field(
        default="s3",
        description="Where processed videos are published.",
    )
    s3_bucket: str = Field(default="tubely-videos", min_length=1)
    s3_region: str = Field(default="us-east-1", min_length=1)
    s3_endpoint_url: str | None = Field(
        default=None,
        description="Custom S3 endpoint (MinIO, localstack).",
    )
    public_base_url: str = Field(
        default="http://localhost:8091",
        description="Base URL used to build links for locally stored assets.",
    )
    port: int = Field(default=8091, ge=1, le=65535)
    jwt_secret: str = Field(
        default="change-me",
        min_length=1,
        description="HS256 secret used to validate access tokens.",
    )
    max_upload_bytes: int = Field(default=1 << 30, ge=1)
    chunk_size_bytes: int = Field(default=1024 * 1024, ge=1)
    allowed_content_types: tuple[str, ...] = Field(default=("video/mp4",))
    ffprobe_binary: str = Field(default="ffprobe", min_length=1)
    ffmpeg_binary: str = Field(default="ffmpeg", min_length=1)
    probe_timeout_seconds: float = Field(default=30.0, gt=0)
    rewrite_timeout_seconds: float = Field(default=600.0, gt=0)
    max_concurrent_tools: int = Field(
        default=4,
        ge=1,
        description="Upper bound on simultaneously running ffprobe/ffmpeg processes.",
    )
    temp_ttl_seconds: int = Field(
        default=6 * 60 * 60,
        ge=60,
        description="Age after which orphaned temp uploads are swept by scripts/cleanup_temp.py.",
    )


@dataclass(frozen=True, slots=True)
class AppConfig:
    settings: TubelySettings
    assets_root: Path
    engine: Engine
    session_factory: sessionmaker[Session]


def _ensure_assets_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_config(settings: TubelySettings | None = None) -> AppConfig:
    """Build the process-wide configuration and initialise the database."""
    settings = settings or TubelySettings()
    assets_root = _ensure_assets_dir(settings.assets_root)

    engine = create_engine(settings.database_url, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)

    return AppConfig(
        settings=settings,
        assets_root=assets_root,
        engine=engine,
        session_factory=session_factory,
    )
