import numpy as np
import pytest

from luminance_map.errors import LuminanceOutOfRangeError
from luminance_map.luminance import luminance_grid, pixel_luminance
from luminance_map.mapper import (
    convert_image,
    map_image,
    map_pixel,
    tier_indices,
    tier_usage,
)
from luminance_map.tier_table import TierTable

BLACK = [0, 0, 0]
WHITE = [255, 255, 255]


def _grey(v):
    return [v, v, v]


def test_two_by_two_default_scenario():
    # luminance ~0, ~30, ~60, ~100
    src = np.array(
        [[_grey(0), _grey(77)], [_grey(153), _grey(255)]], dtype=np.uint8
    )
    assert pixel_luminance(tuple(src[0, 1])) == pytest.approx(30.2, abs=0.1)
    assert pixel_luminance(tuple(src[1, 0])) == pytest.approx(60.0, abs=0.1)

    out = convert_image(src, TierTable.default())

    assert out.shape == src.shape
    assert out.dtype == np.uint8
    assert out.tolist() == [[BLACK, BLACK], [WHITE, WHITE]]


def test_source_is_left_untouched():
    src = np.full((3, 3, 3), 200, dtype=np.uint8)
    before = src.copy()

    convert_image(src, TierTable.default())

    assert np.array_equal(src, before)


def test_map_pixel_uses_table_colours():
    table = TierTable.from_strings("0,25,75", "FF0000,00FF00,0000FF")

    assert map_pixel((0, 0, 0), table) == (255, 0, 0)
    assert map_pixel((100, 100, 100), table) == (0, 255, 0)
    assert map_pixel((250, 250, 250), table) == (0, 0, 255)
    assert map_pixel(np.array([250, 250, 250], dtype=np.uint8), table) == (0, 0, 255)


def test_vectorised_indices_match_scalar_scan():
    table = TierTable.from_strings("0,30,10,80,55", "000000,111111,222222,333333,444444")
    lum = np.linspace(0.0, 100.0, 2001)

    idx = tier_indices(lum, table)

    assert idx.tolist() == [table.tier_index(v) for v in lum.tolist()]


def test_image_matches_per_pixel_mapping():
    rng = np.random.default_rng(3)
    src = rng.integers(0, 256, size=(16, 12, 3), dtype=np.uint8)
    table = TierTable.from_strings("0,20,40,60,80", "000000,333333,666666,999999,CCCCCC")

    out = convert_image(src, table)

    for y in range(16):
        for x in range(12):
            assert tuple(out[y, x]) == map_pixel(tuple(int(v) for v in src[y, x]), table)


def test_threaded_conversion_equals_single_threaded():
    rng = np.random.default_rng(11)
    src = rng.integers(0, 256, size=(300, 40, 3), dtype=np.uint8)
    table = TierTable.from_strings("0,15,35,65", "101010,404040,909090,F0F0F0")

    single, single_idx = map_image(src, table, workers=1)
    threaded, threaded_idx = map_image(src, table, workers=4)

    assert np.array_equal(single, threaded)
    assert np.array_equal(single_idx, threaded_idx)


def test_rgba_input_produces_opaque_rgb():
    src = np.zeros((2, 3, 4), dtype=np.uint8)
    src[..., :3] = 255
    src[..., 3] = 0

    out = convert_image(src, TierTable.default())

    assert out.shape == (2, 3, 3)
    assert (out == 255).all()


def test_uncovered_pixel_fails_with_first_offender():
    table = TierTable.from_strings("10,50", "000000,FFFFFF")
    src = np.full((256, 8, 3), 200, dtype=np.uint8)
    src[200, 3] = _grey(13)
    src[250, 1] = _grey(20)

    for workers in (1, 4):
        with pytest.raises(LuminanceOutOfRangeError) as excinfo:
            convert_image(src, table, workers=workers)
        assert excinfo.value.luminance == pixel_luminance((13, 13, 13))


def test_tier_usage_counts_pixels_per_tier():
    src = np.array([[_grey(0), _grey(10), _grey(255)]], dtype=np.uint8)
    table = TierTable.default()

    _out, idx = map_image(src, table)

    assert tier_usage(idx, table) == [(0, (0, 0, 0), 2), (1, (255, 255, 255), 1)]


def test_non_uint8_image_rejected():
    with pytest.raises(TypeError):
        convert_image(np.zeros((2, 2, 3), dtype=np.float32), TierTable.default())


def test_luminance_grid_drives_indices():
    src = np.array([[_grey(128)]], dtype=np.uint8)
    table = TierTable.default()

    assert tier_indices(luminance_grid(src), table).tolist() == [[1]]
