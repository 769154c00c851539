# recolour/palette_layout.py
from __future__ import annotations

"""
Palette image sizing and layout.

Sizing keeps textures power-of-two friendly:
  n <= 128        -> (next_power_of_two(n), 1)
  128 < n <= 256  -> (256, 1)
  n > 256         -> (256, next_power_of_two(ceil(n / 256)))
"""

import math
from typing import Sequence, Tuple

import numpy as np

from .constants import PALETTE_OPAQUE_ALPHA, PALETTE_ROW_WIDTH, SMALL_PALETTE_MAX
from .core_types import U8Image


def next_power_of_two(v: int) -> int:
    """Smallest power of two >= v, for v >= 1."""
    v = int(v)
    if v < 1:
        raise ValueError("next_power_of_two needs v >= 1")
    v -= 1
    v |= v >> 1
    v |= v >> 2
    v |= v >> 4
    v |= v >> 8
    v |= v >> 16
    v |= v >> 32
    return v + 1


def palette_dimensions(num_colours: int) -> Tuple[int, int]:
    """(width, height) of the palette image for num_colours entries."""
    n = int(num_colours)
    if n < 1:
        raise ValueError("palette needs at least one colour")
    if n > PALETTE_ROW_WIDTH:
        return PALETTE_ROW_WIDTH, next_power_of_two(math.ceil(n / PALETTE_ROW_WIDTH))
    if n <= SMALL_PALETTE_MAX:
        return next_power_of_two(n), 1
    return PALETTE_ROW_WIDTH, 1


def layout_palette(palette: Sequence[Sequence[int]]) -> U8Image:
    """
    Place entries row-major in index order: entry n at (n % width, n // width).
    Returns uint8 (height, width, 4). Filled cells are opaque; spare cells stay zero.
    """
    pal = np.asarray(palette, dtype=np.uint8).reshape(-1, 4)
    n = int(pal.shape[0])
    width, height = palette_dimensions(n)
    flat = np.zeros((width * height, 4), dtype=np.uint8)
    flat[:n, :3] = pal[:, :3]
    flat[:n, 3] = PALETTE_OPAQUE_ALPHA
    return flat.reshape(height, width, 4)  # type: ignore[return-value]


__all__ = ["next_power_of_two", "palette_dimensions", "layout_palette"]
