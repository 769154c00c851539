# recolour/index_encode.py
from __future__ import annotations

"""
Index image encoder.

Each source pixel becomes:
  channel 0 : catalog index, low byte
  channel 1 : catalog index, high byte
  channel 2 : reserved (0)
  channel 3 : original alpha, 8-bit

Exports:
  pack_index(indices) -> (low, high)
  unpack_index(index_image) -> U16Grid
  encode_index_image(source, catalog) -> (U8Image, missing)
  apply_palette(index_image, palette) -> U8Image
"""

from typing import Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .colour_convert import normalise_to_rgba8, pack_rgba_keys
from .constants import (
    INDEX_ALPHA_CHANNEL,
    INDEX_HIGH_CHANNEL,
    INDEX_LOW_CHANNEL,
    INDEX_RESERVED_CHANNEL,
    INDEX_RESERVED_VALUE,
    MAX_PALETTE_COLOURS,
    PALETTE_OPAQUE_ALPHA,
)
from .core_types import Catalog, SourceImage, U16Grid, U8Image, assert_u8_image_rgba
from .utils import warn


def pack_index(indices: np.ndarray) -> Tuple[NDArray[np.uint8], NDArray[np.uint8]]:
    """16-bit indices -> (low byte, high byte). Values outside 0..65535 raise ValueError."""
    arr = np.asarray(indices)
    if arr.size and (int(arr.min()) < 0 or int(arr.max()) >= MAX_PALETTE_COLOURS):
        raise ValueError("index out of 16-bit range")
    u = arr.astype(np.uint16)
    low = (u & 0xFF).astype(np.uint8)
    high = (u >> 8).astype(np.uint8)
    return low, high


def unpack_index(index_image: U8Image) -> U16Grid:
    """Recover the uint16 index grid from an index image."""
    img = assert_u8_image_rgba(index_image)
    low = img[..., INDEX_LOW_CHANNEL].astype(np.uint16)
    high = img[..., INDEX_HIGH_CHANNEL].astype(np.uint16)
    return (low | (high << 8)).astype(np.uint16)  # type: ignore[return-value]


def encode_index_image(source: SourceImage, catalog: Catalog) -> Tuple[U8Image, int]:
    """
    Re-encode every pixel of source as its catalog index.

    Returns (index_image, missing). Pixels whose colour is not in the catalog
    stay all zero and are counted in missing; that only happens when the
    catalog was built from different pixels or a different normalisation.
    """
    straight = normalise_to_rgba8(
        source.pixels, source.max_value, source.premultiplied
    )
    keyed = straight.copy()
    keyed[..., 3] = PALETTE_OPAQUE_ALPHA
    indices, found = catalog.lookup(pack_rgba_keys(keyed))

    low, high = pack_index(indices)
    out = np.zeros(straight.shape, dtype=np.uint8)
    out[..., INDEX_LOW_CHANNEL] = low
    out[..., INDEX_HIGH_CHANNEL] = high
    out[..., INDEX_RESERVED_CHANNEL] = INDEX_RESERVED_VALUE
    out[..., INDEX_ALPHA_CHANNEL] = straight[..., 3]

    missing = int(found.size - np.count_nonzero(found))
    if missing:
        out[~found] = 0
        warn(f"{missing:,} pixel(s) had no catalog entry; left at zero")
    return out, missing  # type: ignore[return-value]


def apply_palette(index_image: U8Image, palette: Sequence[Sequence[int]]) -> U8Image:
    """
    Rebuild a straight RGBA image from an index image and its palette.
    RGB comes from the palette entry, alpha from the index image.
    """
    idx = unpack_index(index_image)
    pal = np.asarray(palette, dtype=np.uint8).reshape(-1, 4)
    if idx.size and int(idx.max()) >= pal.shape[0]:
        raise ValueError(
            f"index {int(idx.max())} out of range for palette of {pal.shape[0]}"
        )
    out = np.zeros(index_image.shape, dtype=np.uint8)
    if pal.shape[0]:
        out[..., :3] = pal[idx][..., :3]
    out[..., 3] = index_image[..., INDEX_ALPHA_CHANNEL]
    return out  # type: ignore[return-value]


__all__ = ["pack_index", "unpack_index", "encode_index_image", "apply_palette"]
