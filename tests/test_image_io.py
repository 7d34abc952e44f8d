import numpy as np
import pytest
from PIL import Image, ImageCms

from luminance_map.errors import ImageIOError
from luminance_map.image_io import (
    default_output_path,
    image_to_array,
    load_image_rgb,
    save_image_rgb,
)


def test_load_drops_alpha(tmp_path):
    path = tmp_path / "rgba.png"
    Image.new("RGBA", (5, 3), color=(10, 20, 30, 40)).save(path)

    rgb = load_image_rgb(path)

    assert rgb.shape == (3, 5, 3)
    assert rgb.dtype == np.uint8
    assert rgb[0, 0].tolist() == [10, 20, 30]


def test_palette_and_greyscale_images_become_rgb():
    assert image_to_array(Image.new("L", (2, 2), color=128)).shape == (2, 2, 3)
    assert image_to_array(Image.new("P", (4, 1))).shape == (1, 4, 3)


def test_missing_file_raises_with_path(tmp_path):
    path = tmp_path / "missing.png"

    with pytest.raises(ImageIOError) as excinfo:
        load_image_rgb(path)
    assert str(path) in str(excinfo.value)
    assert excinfo.value.path == path


def test_non_image_raises(tmp_path):
    path = tmp_path / "notes.png"
    path.write_text("not an image")

    with pytest.raises(ImageIOError, match="error converting file to image"):
        load_image_rgb(path)


def test_png_round_trip_is_exact(tmp_path):
    rgb = np.array([[[0, 0, 0], [255, 128, 0]]], dtype=np.uint8)

    out = save_image_rgb(tmp_path / "out.png", rgb)

    assert np.array_equal(load_image_rgb(out), rgb)


def test_jpeg_written_for_jpg_suffix(tmp_path):
    rgb = np.full((8, 8, 3), 255, dtype=np.uint8)

    out = save_image_rgb(tmp_path / "out.jpg", rgb, quality=100)

    with Image.open(out) as im:
        assert im.format == "JPEG"
        assert im.size == (8, 8)


def test_unknown_extension_raises(tmp_path):
    with pytest.raises(ImageIOError, match="error creating file"):
        save_image_rgb(tmp_path / "out.nope", np.zeros((2, 2, 3), dtype=np.uint8))


def test_unwritable_destination_raises(tmp_path):
    with pytest.raises(ImageIOError):
        save_image_rgb(tmp_path / "no" / "such" / "dir.png", np.zeros((2, 2, 3), dtype=np.uint8))


def test_default_output_path(tmp_path):
    src = tmp_path / "photo.png"

    assert default_output_path(src) == tmp_path / "photo_luminance.jpg"
    assert default_output_path(src, tmp_path / "out") == tmp_path / "out" / "photo_luminance.jpg"


def test_exif_orientation_is_applied(tmp_path):
    path = tmp_path / "rotated.jpg"
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 CW on display
    Image.new("RGB", (4, 2), color=(90, 90, 90)).save(path, exif=exif)

    rgb = load_image_rgb(path)

    assert rgb.shape == (4, 2, 3)


def test_srgb_icc_profile_keeps_pixels(tmp_path):
    path = tmp_path / "tagged.png"
    pixels = np.array([[[0, 0, 0], [255, 255, 255], [200, 100, 50]]], dtype=np.uint8)
    profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
    Image.fromarray(pixels).save(path, icc_profile=profile)

    rgb = load_image_rgb(path)

    assert rgb.shape == pixels.shape
    assert np.abs(rgb.astype(int) - pixels.astype(int)).max() <= 1


def test_unusable_icc_profile_falls_back_to_plain_rgb(tmp_path):
    path = tmp_path / "garbage_icc.png"
    pixels = np.array([[[10, 20, 30], [40, 50, 60]]], dtype=np.uint8)
    Image.fromarray(pixels).save(path, icc_profile=b"definitely not a profile")

    rgb = load_image_rgb(path)

    assert np.array_equal(rgb, pixels)
