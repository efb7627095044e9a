"""Object keys for published assets."""

from __future__ import annotations

import base64
import secrets

from .media_models import OrientationCategory


def media_type_to_ext(media_type: str) -> str:
    """Map ``video/mp4`` to ``.mp4``; anything not shaped ``type/subtype`` is ``.bin``."""
    parts = media_type.split("/")
    if len(parts) != 2 or not all(parts):
        return ".bin"
    return "." + parts[1]


def new_asset_id() -> str:
    return base64.urlsafe_b64encode(secrets.token_bytes(32)).rstrip(b"=").decode("ascii")


def build_video_key(orientation: OrientationCategory, media_type: str) -> str:
    return f"{orientation.value}/{new_asset_id()}{media_type_to_ext(media_type)}"
