# luminance_map/core_types.py
from __future__ import annotations

"""
Core type aliases and small hex/RGB helpers.
"""

from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3)
F64Map = NDArray[np.float64]  # (H, W) luminance percentages
TierIndexMap = NDArray[np.intp]  # (H, W) tier index per pixel


# Small helpers


def rgb_to_hex(rgb: RGBTuple, prefix: str = "#") -> HexStr:
    """RGB tuple to uppercase hex string, '#RRGGBB' by default."""
    return f"{prefix}{rgb[0]:02X}{rgb[1]:02X}{rgb[2]:02X}"


def rgb_from_int(value: int) -> RGBTuple:
    """Split a 24-bit integer into (R, G, B): R is bits 16-23, B is bits 0-7."""
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """
    Coerce a 3-length sequence or array to an (int, int, int) RGB tuple.
    Helpful when extracting values from NumPy rows.
    """
    if isinstance(value, np.ndarray):
        if value.size < 3:
            raise ValueError("array too small for RGB")
        flat = value.reshape(-1)
        return (int(flat[0]), int(flat[1]), int(flat[2]))
    if len(value) < 3:
        raise ValueError("sequence too small for RGB")
    return (int(value[0]), int(value[1]), int(value[2]))


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3 or 4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] < 3:
        raise TypeError("expected uint8 (H,W,3/4) image")
    return image  # type: ignore[return-value]


__all__ = [
    "RGBTuple",
    "HexStr",
    "U8Image",
    "F64Map",
    "TierIndexMap",
    "rgb_to_hex",
    "rgb_from_int",
    "coerce_to_rgb_tuple",
    "assert_u8_image_rgb",
]
