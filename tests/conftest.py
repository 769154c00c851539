from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np
import pytest

from recolour.core_types import SourceImage


def rgba_image(rows: Sequence[Sequence[Tuple[int, int, int, int]]]) -> np.ndarray:
    """Nested rows of RGBA tuples -> uint8 (H,W,4)."""
    return np.array(rows, dtype=np.uint8).reshape(len(rows), -1, 4)


def distinct_colour_strip(count: int) -> np.ndarray:
    """(1, count, 4) opaque image where every pixel has a different RGB."""
    i = np.arange(count, dtype=np.uint32)
    out = np.empty((1, count, 4), dtype=np.uint8)
    out[0, :, 0] = i & 0xFF
    out[0, :, 1] = (i >> 8) & 0xFF
    out[0, :, 2] = (i >> 16) & 0xFF
    out[0, :, 3] = 255
    return out


# Ordered by (hue, saturation, value): greys first (hue 0, sat 0), then reds, ...
RAINBOW_SORTED: List[Tuple[int, int, int, int]] = [
    (0, 0, 0, 255),
    (128, 128, 128, 255),
    (255, 255, 255, 255),
    (128, 0, 0, 255),
    (255, 0, 0, 255),
    (255, 255, 0, 255),
    (0, 255, 0, 255),
    (0, 0, 255, 255),
    (255, 0, 255, 255),
]


@pytest.fixture
def sprite() -> SourceImage:
    """4x4 sprite: transparent background, a few colours, partial alpha."""
    t = (0, 0, 0, 0)
    r = (255, 0, 0, 255)
    g = (0, 255, 0, 255)
    b = (0, 0, 255, 128)
    w = (255, 255, 255, 255)
    rows = [
        [t, r, r, t],
        [r, g, g, r],
        [b, w, w, b],
        [t, b, b, t],
    ]
    return SourceImage.from_rgba8(rgba_image(rows))


@pytest.fixture
def rainbow() -> SourceImage:
    """Shuffled rainbow colours, one row."""
    shuffled = [RAINBOW_SORTED[i] for i in (5, 2, 8, 0, 7, 3, 1, 6, 4)]
    return SourceImage.from_rgba8(rgba_image([shuffled]))


@pytest.fixture
def noisy() -> SourceImage:
    """32x32 image drawn from 40 random colours with random alpha."""
    rng = np.random.default_rng(1234)
    colours = rng.integers(0, 256, size=(40, 4), dtype=np.uint8)
    picks = rng.integers(0, 40, size=(32, 32))
    return SourceImage.from_rgba8(colours[picks])
