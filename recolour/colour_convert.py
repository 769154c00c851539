# recolour/colour_convert.py
from __future__ import annotations

"""
Colour normalisation and conversions. Vectorised NumPy implementations.

Exports:
  normalise_to_rgba8(pixels, max_value, premultiplied)
  normalise_to_palette_rgba8(pixels, max_value, premultiplied)
  unpremultiply(pixels, max_value)
  rgb_to_hsv(rgb)
  pack_rgba_keys(rgba)
  unpack_rgba_keys(keys)

Notes:
  Scaling to 8 bits truncates toward zero: (c / max_value) * 255.0, then
  the fractional part is dropped. Do not switch to rounding; output bytes
  depend on it.
"""

import numpy as np

from .constants import PALETTE_OPAQUE_ALPHA
from .core_types import HSV, U8Image, U32Keys


# Straight alpha


def unpremultiply(pixels: np.ndarray, max_value: int) -> np.ndarray:
    """
    Premultiplied samples -> straight samples in the same range. Returns float64.
    Colour of a fully transparent pixel is undefined and comes back as 0.
    """
    px = pixels.astype(np.float64, copy=False)
    alpha = px[..., 3:4]
    full = float(max_value)
    with np.errstate(divide="ignore", invalid="ignore"):
        straight = np.where(
            alpha > 0.0, np.minimum(px[..., :3] * full / alpha, full), 0.0
        )
    out = np.empty(px.shape, dtype=np.float64)
    out[..., :3] = straight
    out[..., 3] = px[..., 3]
    return out


# 8-bit canonical colour


def normalise_to_rgba8(
    pixels: np.ndarray, max_value: int = 255, premultiplied: bool = False
) -> U8Image:
    """
    Any-depth RGBA samples (...,4) -> straight 8-bit RGBA (...,4) uint8.
    Channels are scaled linearly from [0, max_value] and truncated.
    """
    if premultiplied:
        samples = unpremultiply(pixels, max_value)
    else:
        samples = pixels.astype(np.float64, copy=False)
    scaled = (samples / float(max_value)) * 255.0
    scaled = np.clip(np.trunc(scaled), 0.0, 255.0)
    return scaled.astype(np.uint8)  # type: ignore[return-value]


def normalise_to_palette_rgba8(
    pixels: np.ndarray, max_value: int = 255, premultiplied: bool = False
) -> U8Image:
    """As normalise_to_rgba8, with alpha forced opaque. Palette entries are always solid."""
    out = normalise_to_rgba8(pixels, max_value, premultiplied)
    out[..., 3] = PALETTE_OPAQUE_ALPHA
    return out


# RGB -> HSV


def rgb_to_hsv(rgb: np.ndarray) -> HSV:
    """
    RGB in [0,1] (...,3) -> HSV float64 (...,3).

    Hue is in degrees [0,360) and 0 for greys. When two channels share the
    maximum, blue takes precedence over green and green over red.
    """
    arr = rgb.astype(np.float64, copy=False)
    r = arr[..., 0]
    g = arr[..., 1]
    b = arr[..., 2]
    v = np.maximum(np.maximum(r, g), b)
    lo = np.minimum(np.minimum(r, g), b)
    chroma = v - lo

    with np.errstate(divide="ignore", invalid="ignore"):
        s = np.where(v != 0.0, chroma / v, 0.0)
        h_r = np.fmod((g - b) / chroma, 6.0)
        h_g = (b - r) / chroma + 2.0
        h_b = (r - g) / chroma + 4.0

    h = np.zeros_like(v)
    chromatic = lo != v
    h = np.where(chromatic & (v == r), h_r, h)
    h = np.where(chromatic & (v == g), h_g, h)
    h = np.where(chromatic & (v == b), h_b, h)
    h = h * 60.0
    h = np.where(h < 0.0, h + 360.0, h)

    out = np.empty(arr.shape, dtype=np.float64)
    out[..., 0] = h
    out[..., 1] = s
    out[..., 2] = v
    return out  # type: ignore[return-value]


# Packed keys


def pack_rgba_keys(rgba: np.ndarray) -> U32Keys:
    """uint8 (...,4) -> uint32 (...) with r in the low byte."""
    u = rgba.astype(np.uint32, copy=False)
    return (
        u[..., 0] | (u[..., 1] << 8) | (u[..., 2] << 16) | (u[..., 3] << 24)
    ).astype(np.uint32, copy=False)


def unpack_rgba_keys(keys: np.ndarray) -> U8Image:
    """uint32 (...) -> uint8 (...,4). Inverse of pack_rgba_keys."""
    k = np.asarray(keys, dtype=np.uint32)
    out = np.empty(k.shape + (4,), dtype=np.uint8)
    out[..., 0] = k & 0xFF
    out[..., 1] = (k >> 8) & 0xFF
    out[..., 2] = (k >> 16) & 0xFF
    out[..., 3] = (k >> 24) & 0xFF
    return out  # type: ignore[return-value]


__all__ = [
    "unpremultiply",
    "normalise_to_rgba8",
    "normalise_to_palette_rgba8",
    "rgb_to_hsv",
    "pack_rgba_keys",
    "unpack_rgba_keys",
]
