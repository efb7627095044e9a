"""Media data models."""

from dataclasses import dataclass
from enum import StrEnum


class OrientationCategory(StrEnum):
    """Storage key prefix derived from an aspect ratio label."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class MediaGeometry:
    width: int
    height: int
