# luminance_map/mapper.py
from __future__ import annotations

"""
Pixel mapper: luminance -> tier -> replacement colour.

Functions:
  map_pixel(rgb, table) -> RGBTuple
  tier_indices(lum, table) -> TierIndexMap
  map_image(rgb, table, workers=1) -> (U8Image, TierIndexMap)
  convert_image(rgb, table, workers=1) -> U8Image
  tier_usage(indices, table) -> list of (tier, colour, count)

Every output pixel depends only on its own input pixel and the shared
TierTable, so row bands can be mapped on separate threads. The threaded
result is identical to the single-threaded one, including which luminance
is reported when no tier matches (the first in row-major order).
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from .constants import MIN_ROWS_PER_WORKER
from .core_types import (
    F64Map,
    RGBTuple,
    TierIndexMap,
    U8Image,
    assert_u8_image_rgb,
    coerce_to_rgb_tuple,
)
from .errors import LuminanceOutOfRangeError
from .luminance import luminance_grid, pixel_luminance
from .tier_table import TierTable
from .utils import split_rows_into_parts


def map_pixel(rgb: RGBTuple, table: TierTable) -> RGBTuple:
    """Replacement colour for a single pixel."""
    return table.colour_for_luminance(pixel_luminance(coerce_to_rgb_tuple(rgb)))


def tier_indices(lum: F64Map, table: TierTable) -> TierIndexMap:
    """
    Tier index for every luminance value.

    Same rule as TierTable.tier_index, evaluated tier by tier over the whole
    array: the first tier with thresholds[i] < l <= thresholds[i+1] wins, and
    l == 0 always lands in tier 0. Threshold order is not assumed.
    """
    lum = np.asarray(lum, dtype=np.float64)
    t = table.threshold_array()
    idx = np.full(lum.shape, -1, dtype=np.intp)
    idx[lum == 0] = 0
    for i in range(table.tier_count):
        hit = (idx < 0) & (lum > t[i]) & (lum <= t[i + 1])
        idx[hit] = i

    missing = idx < 0
    if np.any(missing):
        raise LuminanceOutOfRangeError(float(lum[missing][0]), table.thresholds)
    return idx


def _map_rows(rows: U8Image, table: TierTable) -> Tuple[U8Image, TierIndexMap]:
    idx = tier_indices(luminance_grid(rows), table)
    return table.colour_array()[idx], idx


def map_image(
    rgb: U8Image, table: TierTable, workers: int = 1
) -> Tuple[U8Image, TierIndexMap]:
    """
    Map a uint8 [H,W,3|4] image through the tier table.

    Returns:
      out: uint8 [H,W,3] recoloured image (opaque, alpha dropped)
      idx: intp [H,W] tier index per pixel
    """
    rgb = assert_u8_image_rgb(rgb)
    height, width = int(rgb.shape[0]), int(rgb.shape[1])

    parts_wanted = min(int(workers), height // MIN_ROWS_PER_WORKER)
    if parts_wanted <= 1:
        out, idx = _map_rows(rgb, table)
        return np.ascontiguousarray(out, dtype=np.uint8), idx

    spans = split_rows_into_parts(height, parts_wanted)
    out = np.empty((height, width, 3), dtype=np.uint8)
    idx = np.empty((height, width), dtype=np.intp)
    with ThreadPoolExecutor(max_workers=len(spans)) as ex:
        futs = [(s, e, ex.submit(_map_rows, rgb[s:e], table)) for s, e in spans]
        # collected in row order so the first failing band is the one reported
        for s, e, fut in futs:
            out[s:e], idx[s:e] = fut.result()
    return out, idx


def convert_image(rgb: U8Image, table: TierTable, workers: int = 1) -> U8Image:
    """Recoloured copy of rgb with identical height and width."""
    out, _idx = map_image(rgb, table, workers=workers)
    return out


def tier_usage(
    indices: TierIndexMap, table: TierTable
) -> List[Tuple[int, RGBTuple, int]]:
    """(tier index, colour, pixel count) for tiers with at least one pixel."""
    flat = np.asarray(indices, dtype=np.intp).reshape(-1)
    if flat.size == 0:
        return []
    counts = np.bincount(flat, minlength=table.tier_count)
    return [
        (i, table.colours[i], int(n)) for i, n in enumerate(counts.tolist()) if n > 0
    ]


__all__ = ["map_pixel", "tier_indices", "map_image", "convert_image", "tier_usage"]
