"""Run settings: tier configuration and output defaults, overridable from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .constants import DEFAULT_COLOURS, DEFAULT_JPEG_QUALITY, DEFAULT_THRESHOLDS
from .errors import ConfigError
from .tier_table import TierTable


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f'invalid {name} "{raw}"') from e


def _default_workers() -> int:
    """Leave a core free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    return max(1, n - 1)


@dataclass(frozen=True)
class ConverterSettings:
    thresholds: str
    colours: str
    jpeg_quality: int
    workers: int

    def __post_init__(self) -> None:
        if not 1 <= self.jpeg_quality <= 100:
            raise ConfigError(f"invalid JPEG quality {self.jpeg_quality} (expected 1..100)")
        if self.workers < 1:
            raise ConfigError(f"invalid worker count {self.workers} (expected >= 1)")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ConverterSettings":
        env = os.environ if env is None else env
        return cls(
            thresholds=env.get("LUMINANCE_THRESHOLDS", DEFAULT_THRESHOLDS),
            colours=env.get("LUMINANCE_COLOURS", DEFAULT_COLOURS),
            jpeg_quality=_int_setting(env, "LUMINANCE_JPEG_QUALITY", DEFAULT_JPEG_QUALITY),
            workers=_int_setting(env, "LUMINANCE_WORKERS", _default_workers()),
        )

    def with_overrides(self, **changes: object) -> "ConverterSettings":
        """Copy with the non-None values of changes applied."""
        applied = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **applied)

    def build_tier_table(self) -> TierTable:
        return TierTable.from_strings(self.thresholds, self.colours)
