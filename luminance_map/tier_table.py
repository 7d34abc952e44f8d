# luminance_map/tier_table.py
from __future__ import annotations

"""
Tier table: luminance thresholds and the colour each interval maps to.

Exports:
  parse_thresholds(text) -> tuple[float, ...]
  parse_colours(text)    -> tuple[RGBTuple, ...]
  decode_hex_colour(token) -> RGBTuple
  TierTable.from_strings(thresholds, colours) -> TierTable

Tier i covers (thresholds[i], thresholds[i+1]]. A luminance of exactly 0
always lands in tier 0. The parsed thresholds get a trailing 100.0 and the
last colour is repeated for it, so a table with sorted thresholds starting
at 0 covers all of [0, 100].
"""

import math
import re
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .constants import (
    DEFAULT_COLOURS,
    DEFAULT_THRESHOLDS,
    LUMINANCE_MAX,
    LUMINANCE_MIN,
    MAX_COLOUR_VALUE,
    SENTINEL_THRESHOLD,
)
from .core_types import RGBTuple, rgb_from_int, rgb_to_hex
from .errors import ConfigError, LuminanceOutOfRangeError

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")


def _split_tokens(text: str) -> List[str]:
    return [tok.strip() for tok in text.split(",")]


def parse_threshold(token: str) -> float:
    """Parse one threshold token; must be a finite decimal in [0, 100]."""
    tok = token.strip()
    if not _DECIMAL_RE.match(tok):
        raise ConfigError(f'invalid luminance threshold "{token}"')
    value = float(tok)
    if not math.isfinite(value) or value < LUMINANCE_MIN or value > LUMINANCE_MAX:
        raise ConfigError(f'invalid luminance threshold "{token}"')
    return value


def parse_thresholds(text: str) -> Tuple[float, ...]:
    """Parse a comma-separated threshold list. No sentinel is appended here."""
    return tuple(parse_threshold(tok) for tok in _split_tokens(text))


def decode_hex_colour(token: str) -> RGBTuple:
    """
    Parse 'RRGGBB' (optionally '#RRGGBB') into an RGB tuple.

    Shorter tokens are read as the low bits of a 24-bit value, so '80' is
    (0, 0, 128). Anything above 0xFFFFFF is rejected.
    """
    tok = token.strip()
    digits = tok[1:] if tok.startswith("#") else tok
    if not _HEX_RE.match(digits):
        raise ConfigError(f'invalid converted colour "{token}"')
    value = int(digits, 16)
    if value > MAX_COLOUR_VALUE:
        raise ConfigError(f'invalid converted colour "{token}"')
    return rgb_from_int(value)


def parse_colours(text: str) -> Tuple[RGBTuple, ...]:
    """Parse a comma-separated list of hex colours."""
    return tuple(decode_hex_colour(tok) for tok in _split_tokens(text))


@dataclass(frozen=True)
class TierTable:
    """Immutable thresholds/colours pairing, sentinel included."""

    thresholds: Tuple[float, ...]
    colours: Tuple[RGBTuple, ...]

    def __post_init__(self) -> None:
        # frozen: store tuples so list arguments cannot be mutated afterwards
        try:
            thresholds = tuple(float(t) for t in self.thresholds)
            colours = tuple(tuple(c) for c in self.colours)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"malformed tier table: {e}") from e
        object.__setattr__(self, "thresholds", thresholds)
        object.__setattr__(self, "colours", colours)

        if len(self.thresholds) != len(self.colours):
            raise ConfigError(
                f"tier table needs one colour per threshold "
                f"(got {len(self.thresholds)} thresholds, {len(self.colours)} colours)"
            )
        if len(self.thresholds) < 2:
            raise ConfigError("tier table needs at least one tier")
        for t in self.thresholds:
            if not math.isfinite(t) or t < LUMINANCE_MIN or t > LUMINANCE_MAX:
                raise ConfigError(f"invalid luminance threshold {t!r}")
        if self.thresholds[-1] != SENTINEL_THRESHOLD:
            raise ConfigError(
                f"last threshold must be {SENTINEL_THRESHOLD:g}, got {self.thresholds[-1]:g}"
            )
        for rgb in self.colours:
            if len(rgb) != 3 or any(
                not isinstance(v, (int, np.integer)) or not 0 <= v <= 255 for v in rgb
            ):
                raise ConfigError(f"invalid converted colour {rgb!r}")
        object.__setattr__(
            self, "colours", tuple(tuple(int(v) for v in rgb) for rgb in self.colours)
        )

    @classmethod
    def from_strings(cls, thresholds: str, colours: str) -> "TierTable":
        """
        Build a table from the two comma-separated configuration strings.

        Raises ConfigError on the first bad token or when the two lists
        differ in length.
        """
        parsed_t = parse_thresholds(thresholds)
        parsed_c = parse_colours(colours)
        if len(parsed_t) != len(parsed_c):
            raise ConfigError(
                f"got {len(parsed_t)} thresholds but {len(parsed_c)} colours; "
                f"each threshold needs exactly one colour"
            )
        return cls(
            thresholds=parsed_t + (SENTINEL_THRESHOLD,),
            colours=parsed_c + (parsed_c[-1],),
        )

    @classmethod
    def default(cls) -> "TierTable":
        return cls.from_strings(DEFAULT_THRESHOLDS, DEFAULT_COLOURS)

    @property
    def tier_count(self) -> int:
        """Number of tiers a luminance can land in (sentinel excluded)."""
        return len(self.thresholds) - 1

    def tier_index(self, luminance: float) -> int:
        """Index of the first tier containing luminance."""
        lum = float(luminance)
        t = self.thresholds
        for i in range(len(t) - 1):
            if (t[i] < lum <= t[i + 1]) or lum == 0:
                return i
        raise LuminanceOutOfRangeError(lum, t)

    def colour_for_luminance(self, luminance: float) -> RGBTuple:
        """Replacement colour for a luminance in [0, 100]."""
        return self.colours[self.tier_index(luminance)]

    def threshold_array(self) -> np.ndarray:
        return np.asarray(self.thresholds, dtype=np.float64)

    def colour_array(self) -> np.ndarray:
        """uint8 [n,3] colour rows, indexable by tier index."""
        return np.asarray(self.colours, dtype=np.uint8).reshape(-1, 3)

    def tiers(self) -> List[Tuple[float, float, RGBTuple]]:
        """(lower, upper, colour) for each live tier."""
        t = self.thresholds
        return [(t[i], t[i + 1], self.colours[i]) for i in range(len(t) - 1)]

    def coverage_gaps(self) -> List[Tuple[float, float]]:
        """
        Sub-ranges of (0, 100] that no tier covers, as (after, up_to) pairs.

        Luminance 0 is always covered. A luminance inside a gap raises
        LuminanceOutOfRangeError when mapped.
        """
        spans = sorted((lo, hi) for lo, hi, _c in self.tiers() if lo < hi)
        gaps: List[Tuple[float, float]] = []
        covered_to = LUMINANCE_MIN
        for lo, hi in spans:
            if lo > covered_to:
                gaps.append((covered_to, lo))
            covered_to = max(covered_to, hi)
        if covered_to < LUMINANCE_MAX:
            gaps.append((covered_to, LUMINANCE_MAX))
        return gaps

    def describe(self) -> List[str]:
        """One readable line per live tier, e.g. '(0, 50] -> #000000'."""
        lines = []
        for i, (lo, hi, rgb) in enumerate(self.tiers()):
            lower = "[" if i == 0 and lo == 0 else "("
            lines.append(f"{lower}{lo:g}, {hi:g}] -> {rgb_to_hex(rgb)}")
        return lines


__all__ = [
    "parse_threshold",
    "parse_thresholds",
    "decode_hex_colour",
    "parse_colours",
    "TierTable",
]
