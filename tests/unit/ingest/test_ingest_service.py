import io
import uuid
from pathlib import Path

import pytest

from tests.helpers.media_tools import ffmpeg_stub, ffprobe_stub, geometry_document
from tubely.exceptions import DatabaseOperationError, NotFoundError
from tubely.ingest.ingest_errors import (
    AuthorizationError,
    InputValidationError,
    PayloadTooLargeError,
    PersistenceError,
    UnsupportedMediaError,
)
from tubely.ingest.ingest_service import IngestService
from tubely.ingest.validation import UploadValidator
from tubely.media.media_errors import (
    NoStreamsError,
    ProcessingVerificationError,
    StorageError,
    ToolInvocationError,
)
from tubely.media.media_models import MediaGeometry, OrientationCategory
from tubely.media.object_store import LocalObjectStore
from tubely.media.prober import FFprobeProber
from tubely.media.rewriter import FastStartRewriter
from tubely.media.temp_media_store import TempMediaStore
from tubely.media.tool_runner import ToolRunner

UPLOAD = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 256
PROCESSED = b"\x00\x00\x00\x20ftypisom-moov-first"


class FailingStore(LocalObjectStore):
    def put(self, key, content_type, body):  # type: ignore[override]
        raise StorageError(f"unable to upload '{key}'")


class FailingUpdateRepo:
    def __init__(self, inner) -> None:
        self.inner = inner

    def get_video(self, video_id):
        return self.inner.get_video(video_id)

    def update_video(self, video):
        raise DatabaseOperationError("video: database operation failed")


@pytest.fixture()
def tools_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "temp"
    path.mkdir()
    return path


@pytest.fixture()
def assets_dir(tmp_path: Path) -> Path:
    path = tmp_path / "assets"
    path.mkdir()
    return path


@pytest.fixture()
def build_service(video_repo, tools_dir: Path, temp_dir: Path, assets_dir: Path):
    def _build(
        *,
        geometry: tuple[int, int] = (1280, 720),
        ffprobe: Path | None = None,
        ffmpeg: Path | None = None,
        object_store=None,
        repo=None,
        max_upload_bytes: int = 1 << 20,
    ) -> IngestService:
        runner = ToolRunner(max_concurrent=2)
        probe_binary = ffprobe or ffprobe_stub(tools_dir, geometry_document(geometry))
        rewrite_binary = ffmpeg or ffmpeg_stub(tools_dir, payload=PROCESSED)
        return IngestService(
            video_repo=repo or video_repo,
            validator=UploadValidator(),
            temp_store=TempMediaStore(directory=temp_dir),
            prober=FFprobeProber(runner=runner, binary=str(probe_binary), timeout_seconds=5),
            rewriter=FastStartRewriter(runner=runner, binary=str(rewrite_binary), timeout_seconds=5),
            object_store=object_store
            or LocalObjectStore(root=assets_dir, base_url="http://localhost:8091"),
            max_upload_bytes=max_upload_bytes,
        )

    return _build


def published_files(assets_dir: Path) -> list[Path]:
    return [path for path in assets_dir.rglob("*") if path.is_file()]


@pytest.mark.parametrize(
    ("geometry", "aspect_ratio", "orientation"),
    [
        ((1280, 720), "16:9", OrientationCategory.LANDSCAPE),
        ((608, 1080), "9:16", OrientationCategory.PORTRAIT),
        ((1024, 768), "4:3", OrientationCategory.OTHER),
    ],
)
def test_ingest_publishes_under_orientation_prefix(
    build_service, temp_dir: Path, assets_dir: Path, geometry, aspect_ratio, orientation
) -> None:
    service = build_service(geometry=geometry)

    result = service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert result.aspect_ratio == aspect_ratio
    assert result.orientation is orientation
    assert result.geometry == MediaGeometry(*geometry)
    assert result.size_bytes == len(UPLOAD)
    assert result.key.startswith(f"{orientation.value}/")
    assert result.key.endswith(".mp4")
    assert result.url == f"http://localhost:8091/assets/{result.key}"
    assert (assets_dir / result.key).read_bytes() == PROCESSED
    assert list(temp_dir.iterdir()) == []


def test_ingest_keys_are_unique_per_upload(build_service) -> None:
    service = build_service()

    first = service.ingest(io.BytesIO(UPLOAD), "video/mp4")
    second = service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert first.key != second.key


def test_missing_probe_tool_stops_before_rewrite(
    build_service, tools_dir: Path, temp_dir: Path, assets_dir: Path
) -> None:
    marker = tools_dir / "ffmpeg-ran"
    service = build_service(
        ffprobe=tools_dir / "missing-ffprobe",
        ffmpeg=ffmpeg_stub(tools_dir, marker=marker),
    )

    with pytest.raises(ToolInvocationError):
        service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert not marker.exists()
    assert published_files(assets_dir) == []
    assert list(temp_dir.iterdir()) == []


def test_probe_without_streams_fails(
    build_service, tools_dir: Path, temp_dir: Path, assets_dir: Path
) -> None:
    service = build_service(ffprobe=ffprobe_stub(tools_dir, {"streams": []}))

    with pytest.raises(NoStreamsError):
        service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert published_files(assets_dir) == []
    assert list(temp_dir.iterdir()) == []


def test_empty_rewrite_output_is_not_published(
    build_service, tools_dir: Path, temp_dir: Path, assets_dir: Path
) -> None:
    service = build_service(ffmpeg=ffmpeg_stub(tools_dir, payload=b""))

    with pytest.raises(ProcessingVerificationError):
        service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert published_files(assets_dir) == []
    assert list(temp_dir.iterdir()) == []


def test_failed_rewrite_removes_partial_output(
    build_service, tools_dir: Path, temp_dir: Path
) -> None:
    service = build_service(
        ffmpeg=ffmpeg_stub(tools_dir, payload=b"partial", exit_code=1, stderr="disk full")
    )

    with pytest.raises(ToolInvocationError):
        service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert list(temp_dir.iterdir()) == []


def test_storage_failure_cleans_temp_files(
    build_service, temp_dir: Path, assets_dir: Path
) -> None:
    service = build_service(
        object_store=FailingStore(root=assets_dir, base_url="http://localhost:8091")
    )

    with pytest.raises(StorageError):
        service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert list(temp_dir.iterdir()) == []


def test_oversized_upload_is_rejected(build_service, temp_dir: Path) -> None:
    service = build_service(max_upload_bytes=16)

    with pytest.raises(PayloadTooLargeError):
        service.ingest(io.BytesIO(UPLOAD), "video/mp4")

    assert list(temp_dir.iterdir()) == []


def test_upload_video_sets_video_url(build_service, video_repo, assets_dir: Path) -> None:
    owner = uuid.uuid4()
    video = video_repo.create_video(user_id=owner, title="Boots", description="demo")
    service = build_service(geometry=(608, 1080))

    updated = service.upload_video(video.id, owner, io.BytesIO(UPLOAD), "video/mp4")

    assert updated.video_url is not None
    assert updated.video_url.startswith("http://localhost:8091/assets/portrait/")
    assert video_repo.get_video(video.id).video_url == updated.video_url
    assert len(published_files(assets_dir)) == 1


def test_upload_video_accepts_content_type_parameters(build_service, video_repo) -> None:
    owner = uuid.uuid4()
    video = video_repo.create_video(user_id=owner, title="Boots")
    service = build_service()

    updated = service.upload_video(
        video.id, owner, io.BytesIO(UPLOAD), "Video/MP4; codecs=avc1"
    )

    assert updated.video_url.endswith(".mp4")


def test_upload_video_unknown_id(build_service) -> None:
    service = build_service()

    with pytest.raises(NotFoundError):
        service.upload_video(uuid.uuid4(), uuid.uuid4(), io.BytesIO(UPLOAD), "video/mp4")


def test_upload_video_rejects_non_owner_before_buffering(
    build_service, video_repo, temp_dir: Path, tools_dir: Path
) -> None:
    video = video_repo.create_video(user_id=uuid.uuid4(), title="Boots")
    marker = tools_dir / "ffmpeg-ran"
    service = build_service(ffmpeg=ffmpeg_stub(tools_dir, marker=marker))
    source = io.BytesIO(UPLOAD)

    with pytest.raises(AuthorizationError):
        service.upload_video(video.id, uuid.uuid4(), source, "video/mp4")

    assert source.tell() == 0
    assert not marker.exists()
    assert list(temp_dir.iterdir()) == []


@pytest.mark.parametrize(
    ("content_type", "error"),
    [
        ("image/png", UnsupportedMediaError),
        ("video/quicktime", UnsupportedMediaError),
        (None, InputValidationError),
        ("garbage", InputValidationError),
    ],
)
def test_upload_video_rejects_bad_content_type(
    build_service, video_repo, content_type, error
) -> None:
    owner = uuid.uuid4()
    video = video_repo.create_video(user_id=owner, title="Boots")
    service = build_service()

    with pytest.raises(error):
        service.upload_video(video.id, owner, io.BytesIO(UPLOAD), content_type)

    assert video_repo.get_video(video.id).video_url is None


def test_upload_video_persist_failure_is_reported(
    build_service, video_repo, temp_dir: Path
) -> None:
    owner = uuid.uuid4()
    video = video_repo.create_video(user_id=owner, title="Boots")
    service = build_service(repo=FailingUpdateRepo(video_repo))

    with pytest.raises(PersistenceError):
        service.upload_video(video.id, owner, io.BytesIO(UPLOAD), "video/mp4")

    assert video_repo.get_video(video.id).video_url is None
    assert list(temp_dir.iterdir()) == []


def test_failed_upload_keeps_previous_video_url(
    build_service, video_repo, tools_dir: Path
) -> None:
    owner = uuid.uuid4()
    video = video_repo.create_video(user_id=owner, title="Boots")
    first = build_service().upload_video(video.id, owner, io.BytesIO(UPLOAD), "video/mp4")
    failing = build_service(ffmpeg=ffmpeg_stub(tools_dir, name="ffmpeg-bad", payload=b""))

    with pytest.raises(ProcessingVerificationError):
        failing.upload_video(video.id, owner, io.BytesIO(UPLOAD), "video/mp4")

    assert video_repo.get_video(video.id).video_url == first.video_url
