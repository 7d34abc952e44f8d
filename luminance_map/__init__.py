"""
luminance_map package.

Purpose:
  Recolour images by luminance tier. See luminance_convert.py for the CLI.

Public API:
  TierTable      : parsed thresholds/colours with the tier lookup.
  map_pixel      : one pixel -> replacement colour.
  convert_image  : uint8 [H,W,3] image -> recoloured image of the same shape.
  map_image      : as convert_image, also returning the tier index per pixel.
  luminance      : pixel_luminance / luminance_grid on a 0..100 scale.
  image_io       : Pillow load/save helpers.
  errors         : ConfigError, LuminanceOutOfRangeError, ImageIOError.

Quick start:
  from luminance_map import TierTable, convert_image
  table = TierTable.from_strings("0,50", "000000,FFFFFF")
  out = convert_image(rgb, table)
"""

__version__ = "0.1.0"

from . import core_types
from . import errors
from . import image_io
from . import luminance
from . import utils

from .config import ConverterSettings
from .errors import ConfigError, ImageIOError, LuminanceOutOfRangeError
from .luminance import luminance_grid, pixel_luminance
from .mapper import convert_image, map_image, map_pixel, tier_indices, tier_usage
from .tier_table import TierTable

__all__ = [
    "__version__",
    "core_types",
    "errors",
    "image_io",
    "luminance",
    "utils",
    "ConverterSettings",
    "ConfigError",
    "ImageIOError",
    "LuminanceOutOfRangeError",
    "TierTable",
    "pixel_luminance",
    "luminance_grid",
    "map_pixel",
    "map_image",
    "convert_image",
    "tier_indices",
    "tier_usage",
]
