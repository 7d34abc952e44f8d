# luminance_map/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageCms, ImageOps, UnidentifiedImageError

from .constants import DEFAULT_JPEG_QUALITY, DEFAULT_OUTPUT_EXT, JPEG_EXTS, OUTPUT_SUFFIX
from .core_types import U8Image
from .errors import ImageIOError

"""
Image I/O: decode any Pillow-readable file to a uint8 (H, W, 3) sRGB grid and
encode a grid back to disk. Alpha is dropped on load; output is opaque RGB.
"""


def _convert_to_srgb_rgb(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGB"),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGB",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            # unusable embedded profile: treat samples as sRGB
            pass

    return im.convert("RGB")


def image_to_array(im: Image.Image) -> U8Image:
    """Pillow image (any mode) -> uint8 [H,W,3] sRGB array."""
    return np.array(_convert_to_srgb_rgb(im), dtype=np.uint8)


def load_image_rgb(path: Path) -> U8Image:
    """Load an image with Pillow and return its uint8 [H,W,3] pixels."""
    try:
        with Image.open(path) as im0:
            im0.load()
            return image_to_array(im0)
    except UnidentifiedImageError as e:
        raise ImageIOError("error converting file to image", path, e) from e
    except OSError as e:
        raise ImageIOError("error reading file", path, e) from e


def save_image_rgb(
    path: Path, rgb: U8Image, quality: int = DEFAULT_JPEG_QUALITY
) -> Path:
    """
    Write a uint8 [H,W,3] array. Format follows the suffix of path;
    .jpg/.jpeg are written as JPEG at the given quality.
    """
    im = Image.fromarray(np.ascontiguousarray(rgb[..., :3], dtype=np.uint8))
    try:
        if path.suffix.lower() in JPEG_EXTS:
            im.save(path, format="JPEG", quality=int(quality))
        else:
            im.save(path)
    except ValueError as e:
        # Pillow raises ValueError for an unknown extension
        raise ImageIOError("error creating file", path, e) from e
    except OSError as e:
        raise ImageIOError("error creating file", path, e) from e
    return path


def default_output_path(src: Path, outdir: Optional[Path] = None) -> Path:
    """<stem>_luminance.jpg next to src, or inside outdir when given."""
    name = f"{src.stem}{OUTPUT_SUFFIX}{DEFAULT_OUTPUT_EXT}"
    return (outdir / name) if outdir is not None else src.with_name(name)


__all__ = [
    "image_to_array",
    "load_image_rgb",
    "save_image_rgb",
    "default_output_path",
]
