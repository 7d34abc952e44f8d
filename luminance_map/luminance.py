# luminance_map/luminance.py
from __future__ import annotations

import numpy as np

from .constants import CHANNEL_SCALE, CHANNEL_WIDEN, LUMINANCE_WEIGHTS
from .core_types import F64Map, RGBTuple, U8Image

"""
Relative luminance on a 0..100 scale.

Exports:
- channel_percent(v)       # one 8-bit sample -> percent of full 16-bit intensity
- pixel_luminance(rgb)     # one pixel
- luminance_grid(rgb)      # (H, W, 3) uint8 -> (H, W) float64

Both paths widen each 8-bit sample to 16 bits (v * 257), divide by 65536 and
scale to percent, then apply the Rec. 709 weights. The arithmetic order is
the same in both so they return identical floats. Alpha, if present, is
ignored.
"""


def channel_percent(v: int) -> float:
    """8-bit channel sample -> percent of full intensity (white is just under 100)."""
    return float(v) * CHANNEL_WIDEN / CHANNEL_SCALE * 100.0


def pixel_luminance(rgb: RGBTuple) -> float:
    """Luminance of one (R, G, B[, A]) pixel."""
    wr, wg, wb = LUMINANCE_WEIGHTS
    rf = channel_percent(rgb[0])
    gf = channel_percent(rgb[1])
    bf = channel_percent(rgb[2])
    return rf * wr + gf * wg + bf * wb


def luminance_grid(rgb: U8Image) -> F64Map:
    """
    Vectorised luminance for a uint8 [H,W,3] (or [...,4]) image.
    Returns float64 [H,W].
    """
    arr = np.asarray(rgb)
    if arr.ndim != 3 or arr.shape[-1] not in (3, 4):
        raise TypeError("expected (H,W,3) or (H,W,4) RGB samples")
    chans = arr[..., :3].astype(np.float64) * CHANNEL_WIDEN / CHANNEL_SCALE * 100.0
    wr, wg, wb = LUMINANCE_WEIGHTS
    return chans[..., 0] * wr + chans[..., 1] * wg + chans[..., 2] * wb


__all__ = ["channel_percent", "pixel_luminance", "luminance_grid"]
