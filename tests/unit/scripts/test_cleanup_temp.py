import importlib.util
import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[3]
MODULE_PATH = PROJECT_ROOT / "scripts" / "cleanup_temp.py"
SPEC = importlib.util.spec_from_file_location("cleanup_temp_module", MODULE_PATH)
cleanup_temp = importlib.util.module_from_spec(SPEC)
assert SPEC and SPEC.loader
sys.modules["cleanup_temp_module"] = cleanup_temp
SPEC.loader.exec_module(cleanup_temp)

NOW = 1_700_000_000.0


@pytest.fixture()
def temp_dir(tmp_path: Path, monkeypatch) -> Path:
    directory = tmp_path / "temp"
    directory.mkdir()
    monkeypatch.setenv("TUBELY_TEMP_DIR", str(directory))
    monkeypatch.setenv("TUBELY_TEMP_TTL_SECONDS", "3600")
    return directory


def _make(directory: Path, name: str, age_seconds: float) -> Path:
    path = directory / name
    path.write_bytes(b"data")
    os.utime(path, (NOW - age_seconds, NOW - age_seconds))
    return path


def test_perform_cleanup_dry_run(temp_dir: Path) -> None:
    stale = _make(temp_dir, "tubely-upload-old.mp4", 7200)
    _make(temp_dir, "tubely-upload-new.mp4", 60)

    summary = cleanup_temp.perform_cleanup(dry_run=True, reference_time=NOW)

    assert summary.dry_run is True
    assert summary.temp_removed == 1
    assert stale.exists()


def test_perform_cleanup_removes_expired(temp_dir: Path) -> None:
    stale = _make(temp_dir, "tubely-upload-old.mp4", 7200)
    stale_processing = _make(temp_dir, "tubely-upload-old.mp4.processing", 7200)
    fresh = _make(temp_dir, "tubely-upload-new.mp4", 60)

    summary = cleanup_temp.perform_cleanup(dry_run=False, reference_time=NOW)

    assert summary.temp_removed == 2
    assert not stale.exists()
    assert not stale_processing.exists()
    assert fresh.exists()


def test_older_than_overrides_ttl(temp_dir: Path) -> None:
    _make(temp_dir, "tubely-upload-a.mp4", 120)

    summary = cleanup_temp.perform_cleanup(
        dry_run=True, older_than_seconds=60, reference_time=NOW
    )

    assert summary.temp_removed == 1


def test_main_reports_counts(temp_dir: Path, capsys) -> None:
    exit_code = cleanup_temp.main(["--dry-run"])

    assert exit_code == 0
    assert "cleanup dry-run, temp_expired=0" in capsys.readouterr().out


def test_main_returns_error_code_on_failure(monkeypatch, capsys) -> None:
    def _boom(**_kwargs):
        raise RuntimeError("disk unavailable")

    monkeypatch.setattr(cleanup_temp, "perform_cleanup", _boom)

    assert cleanup_temp.main([]) == 2
    assert "disk unavailable" in capsys.readouterr().err
