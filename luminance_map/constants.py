"""
Defaults and tunables used across the project.

- Tier configuration defaults (DEFAULT_THRESHOLDS, DEFAULT_COLOURS)
- Luminance weights and channel scaling
- Output encoding defaults
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Tier configuration
# =========================
DEFAULT_THRESHOLDS: str = "0,50"
DEFAULT_COLOURS: str = "000000,FFFFFF"

LUMINANCE_MIN: float = 0.0
LUMINANCE_MAX: float = 100.0

# Upper bound appended after the configured thresholds.
SENTINEL_THRESHOLD: float = LUMINANCE_MAX

MAX_COLOUR_VALUE: int = 0xFFFFFF

# =========================
# Luminance
# =========================
# Rec. 709 relative luminance weights (R, G, B).
LUMINANCE_WEIGHTS: Tuple[float, float, float] = (0.2126, 0.7152, 0.0722)

# 8-bit samples widen to 16-bit by v * 0x101, then divide by 2**16.
CHANNEL_WIDEN: float = 257.0
CHANNEL_SCALE: float = 65536.0

# =========================
# Output
# =========================
DEFAULT_JPEG_QUALITY: int = 100
OUTPUT_SUFFIX: str = "_luminance"
DEFAULT_OUTPUT_EXT: str = ".jpg"
JPEG_EXTS = frozenset({".jpg", ".jpeg"})
INPUT_EXTS = frozenset({".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif", ".tif", ".tiff"})

# Below this many rows a single thread is used regardless of --workers.
MIN_ROWS_PER_WORKER: int = 64

# Files converted in parallel in folder mode.
DEFAULT_JOBS: int = 2
