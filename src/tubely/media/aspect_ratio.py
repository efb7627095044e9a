"""Aspect ratio labels and the orientation categories derived from them."""

from __future__ import annotations

from .media_models import OrientationCategory

TOLERANCE = 0.01

# Evaluated in this order; on equal distance the earlier entry wins.
ASPECT_RATIOS: tuple[tuple[float, str], ...] = (
    (16 / 9, "16:9"),
    (9 / 16, "9:16"),
    (4 / 3, "4:3"),
    (3 / 4, "3:4"),
    (1.0, "1:1"),
)

_CATEGORIES = {
    "16:9": OrientationCategory.LANDSCAPE,
    "9:16": OrientationCategory.PORTRAIT,
}


def classify(width: int, height: int) -> str:
    """Return the canonical label closest to ``width / height``.

    A label matches when its ratio is strictly within :data:`TOLERANCE`. When
    nothing matches the literal ``"{width}:{height}"`` is returned.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"geometry must be positive, got {width}x{height}")

    ratio = width / height
    best_label: str | None = None
    best_distance = TOLERANCE
    for target, label in ASPECT_RATIOS:
        distance = abs(ratio - target)
        if distance < best_distance:
            best_label = label
            best_distance = distance

    if best_label is None:
        return f"{width}:{height}"
    return best_label


def orientation_for(label: str) -> OrientationCategory:
    return _CATEGORIES.get(label, OrientationCategory.OTHER)
