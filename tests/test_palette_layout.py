from __future__ import annotations

import numpy as np
import pytest

from recolour.palette_layout import layout_palette, next_power_of_two, palette_dimensions


@pytest.mark.parametrize(
    "v, expected",
    [(1, 1), (2, 2), (3, 4), (5, 8), (128, 128), (256, 256), (257, 512), (70000, 131072)],
)
def test_next_power_of_two(v, expected):
    assert next_power_of_two(v) == expected


def test_next_power_of_two_rejects_zero():
    with pytest.raises(ValueError):
        next_power_of_two(0)


@pytest.mark.parametrize(
    "n, dims",
    [
        (1, (1, 1)),
        (3, (4, 1)),
        (128, (128, 1)),
        (129, (256, 1)),
        (256, (256, 1)),
        (257, (256, 2)),
        (513, (256, 4)),
        (1024, (256, 4)),
        (1025, (256, 8)),
        (65536, (256, 256)),
    ],
)
def test_palette_dimensions(n, dims):
    assert palette_dimensions(n) == dims


def test_palette_dimensions_rejects_empty():
    with pytest.raises(ValueError):
        palette_dimensions(0)


def test_layout_is_row_major_and_opaque():
    palette = [(i % 256, i // 256, 7, 255) for i in range(300)]
    img = layout_palette(palette)
    assert img.shape == (2, 256, 4)
    assert img[0, 0].tolist() == [0, 0, 7, 255]
    assert img[1, 0].tolist() == [0, 1, 7, 255]
    n = 299
    assert img[n // 256, n % 256].tolist() == [299 % 256, 1, 7, 255]
    # spare cells are left empty
    assert not img[1, 300 - 256 :].any()


def test_layout_forces_alpha():
    img = layout_palette([(1, 2, 3, 0), (4, 5, 6, 10), (7, 8, 9, 255)])
    assert img.shape == (1, 4, 4)
    assert img[0, :3, 3].tolist() == [255, 255, 255]
    assert img[0, 3].tolist() == [0, 0, 0, 0]


def test_layout_dtype():
    assert layout_palette([(0, 0, 0, 255)]).dtype == np.uint8
