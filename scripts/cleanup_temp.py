"""Cron entry point for removing orphaned temp uploads."""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass

from tubely.config import TubelySettings
from tubely.media.temp_media_store import TempMediaStore


@dataclass(slots=True)
class CleanupSummary:
    temp_removed: int
    dry_run: bool


def perform_cleanup(
    *,
    dry_run: bool,
    older_than_seconds: float | None = None,
    reference_time: float | None = None,
) -> CleanupSummary:
    """Execute cleanup logic and return summary counters."""
    settings = TubelySettings()
    temp_store = TempMediaStore(directory=settings.temp_dir)
    max_age = settings.temp_ttl_seconds if older_than_seconds is None else older_than_seconds
    now = reference_time or time.time()

    if dry_run:
        expired = temp_store.list_expired(max_age, now)
        return CleanupSummary(temp_removed=len(expired), dry_run=True)

    removed = temp_store.cleanup_expired(max_age, now)
    return CleanupSummary(temp_removed=removed, dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove temp uploads left by interrupted requests.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting files.")
    parser.add_argument(
        "--older-than",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Age threshold; defaults to TUBELY_TEMP_TTL_SECONDS.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    try:
        summary = perform_cleanup(dry_run=args.dry_run, older_than_seconds=args.older_than)
    except Exception as exc:
        print(f"cleanup failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"cleanup dry-run, temp_expired={summary.temp_removed}", file=sys.stdout)
    else:
        print(f"cleanup done, temp_removed={summary.temp_removed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
