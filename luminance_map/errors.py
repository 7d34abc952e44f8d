# luminance_map/errors.py
from __future__ import annotations

"""
Error types raised by the library. The CLI turns them into exit codes.
"""

from typing import Sequence


class ConfigError(ValueError):
    """Invalid tier configuration or run setting. Raised before any pixel is read."""


class LuminanceOutOfRangeError(RuntimeError):
    """A luminance value matched no tier of the table."""

    def __init__(self, luminance: float, thresholds: Sequence[float]) -> None:
        self.luminance = float(luminance)
        self.thresholds = tuple(float(t) for t in thresholds)
        super().__init__(
            f"luminance is over all thresholds, l={self.luminance!r}, "
            f"thresholds={list(self.thresholds)}"
        )


class ImageIOError(OSError):
    """Source image unreadable or destination not writable."""

    def __init__(self, message: str, path: object, cause: object = None) -> None:
        self.path = path
        text = f'{message} "{path}"'
        if cause is not None:
            text = f"{text}: {cause}"
        super().__init__(text)


__all__ = ["ConfigError", "LuminanceOutOfRangeError", "ImageIOError"]
