import numpy as np
import pytest

from luminance_map.luminance import channel_percent, luminance_grid, pixel_luminance


def test_black_is_exactly_zero():
    assert pixel_luminance((0, 0, 0)) == 0.0


def test_white_is_just_under_one_hundred():
    lum = pixel_luminance((255, 255, 255))

    assert lum == pytest.approx(100.0 * 65535 / 65536)
    assert lum < 100.0


def test_channel_widening_matches_16_bit_samples():
    assert channel_percent(128) == pytest.approx(128 * 257 / 65536 * 100)


def test_weights_follow_rec709():
    red = pixel_luminance((255, 0, 0))
    green = pixel_luminance((0, 255, 0))
    blue = pixel_luminance((0, 0, 255))

    full = 100.0 * 65535 / 65536
    assert red == pytest.approx(0.2126 * full)
    assert green == pytest.approx(0.7152 * full)
    assert blue == pytest.approx(0.0722 * full)


def test_alpha_is_ignored():
    assert pixel_luminance((10, 200, 30, 0)) == pixel_luminance((10, 200, 30))


def test_grid_matches_scalar_path_exactly():
    rng = np.random.default_rng(7)
    rgb = rng.integers(0, 256, size=(9, 11, 3), dtype=np.uint8)

    grid = luminance_grid(rgb)

    assert grid.shape == (9, 11)
    assert grid.dtype == np.float64
    for y in range(9):
        for x in range(11):
            assert grid[y, x] == pixel_luminance(tuple(int(v) for v in rgb[y, x]))


def test_grid_accepts_rgba():
    rgba = np.zeros((2, 2, 4), dtype=np.uint8)
    rgba[..., 3] = 255

    assert np.array_equal(luminance_grid(rgba), np.zeros((2, 2)))


@pytest.mark.parametrize("shape", [(4, 4), (4, 4, 2), (4, 4, 5), (2, 2, 2, 3), (3,)])
def test_grid_rejects_non_rgb_shapes(shape):
    with pytest.raises(TypeError):
        luminance_grid(np.zeros(shape, dtype=np.uint8))
