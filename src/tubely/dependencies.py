"""Dependency wiring helpers."""

from __future__ import annotations

from datetime import timedelta

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .auth.auth_service import TokenService
from .config import AppConfig
from .ingest.ingest_api import router as ingest_router
from .ingest.ingest_service import IngestService
from .ingest.upload_limits import FORM_OVERHEAD_BYTES, UploadSizeLimitMiddleware
from .ingest.validation import UploadValidator
from .media.media_base import ObjectStore
from .media.object_store import LocalObjectStore, S3ObjectStore
from .media.prober import FFprobeProber
from .media.rewriter import FastStartRewriter
from .media.temp_media_store import TempMediaStore
from .media.tool_runner import ToolRunner
from .videos.videos_api import router as videos_router
from .videos.videos_repository import VideoRepository


def build_object_store(config: AppConfig) -> ObjectStore:
    settings = config.settings
    if settings.storage_backend == "local":
        return LocalObjectStore(root=config.assets_root, base_url=settings.public_base_url)
    return S3ObjectStore.from_settings(
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
    )


def build_ingest_service(
    config: AppConfig,
    *,
    video_repo: VideoRepository,
    object_store: ObjectStore,
) -> IngestService:
    settings = config.settings
    runner = ToolRunner(max_concurrent=settings.max_concurrent_tools)
    return IngestService(
        video_repo=video_repo,
        validator=UploadValidator(settings.allowed_content_types),
        temp_store=TempMediaStore(
            directory=settings.temp_dir,
            chunk_size=settings.chunk_size_bytes,
        ),
        prober=FFprobeProber(
            runner=runner,
            binary=settings.ffprobe_binary,
            timeout_seconds=settings.probe_timeout_seconds,
        ),
        rewriter=FastStartRewriter(
            runner=runner,
            binary=settings.ffmpeg_binary,
            timeout_seconds=settings.rewrite_timeout_seconds,
        ),
        object_store=object_store,
        max_upload_bytes=settings.max_upload_bytes,
    )


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    video_repo = VideoRepository(config.session_factory)
    object_store = build_object_store(config)
    ingest_service = build_ingest_service(
        config, video_repo=video_repo, object_store=object_store
    )
    token_service = TokenService(
        signing_key=config.settings.jwt_secret,
        token_ttl=timedelta(hours=1),
    )

    app.state.config = config
    app.state.video_repo = video_repo
    app.state.object_store = object_store
    app.state.ingest_service = ingest_service
    app.state.token_service = token_service

    app.add_middleware(
        UploadSizeLimitMiddleware,
        max_body_bytes=config.settings.max_upload_bytes + FORM_OVERHEAD_BYTES,
    )
    app.include_router(ingest_router)
    app.include_router(videos_router)

    if config.settings.storage_backend == "local":
        app.mount(
            "/assets",
            StaticFiles(directory=config.assets_root),
            name="assets",
        )
