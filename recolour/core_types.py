# recolour/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBATuple = Tuple[int, int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 4)
U16Grid = NDArray[np.uint16]  # (H, W)
U32Keys = NDArray[np.uint32]  # (...,) packed RGBA keys
SampleImage = NDArray[np.unsignedinteger]  # (H, W, 4) any depth
HSV = NDArray[np.float64]  # (..., 3) hue degrees, saturation, value

# Value objects


@dataclass(frozen=True)
class SourceImage:
    """
    Decoded source pixels.

    pixels        : unsigned integer (H, W, 4) RGBA samples
    max_value     : full-scale sample value (255 for 8-bit, 65535 for 16-bit)
    premultiplied : True when colour channels are stored multiplied by alpha
    """

    pixels: SampleImage
    max_value: int = 255
    premultiplied: bool = False

    def __post_init__(self) -> None:
        assert_sample_image(self.pixels)
        if int(self.max_value) < 1:
            raise ValueError("max_value must be >= 1")

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @classmethod
    def from_rgba8(cls, rgba: np.ndarray) -> "SourceImage":
        """Wrap a straight-alpha uint8 (H,W,4) array."""
        return cls(np.asarray(rgba, dtype=np.uint8), 255, False)


@dataclass(frozen=True)
class UniqueColour:
    """One distinct canonical colour with its HSV sort keys and final index."""

    rgba: RGBATuple
    hue: float  # degrees [0, 360)
    saturation: float  # [0, 1]
    value: float  # [0, 1]
    index: int = 0


@dataclass(frozen=True, eq=False)
class Catalog:
    """
    Ordered unique colours. entries[i].index == i.

    keys / key_index give a sorted (packed key -> index) table for
    vectorised lookups.
    """

    entries: Tuple[UniqueColour, ...]
    keys: U32Keys = field(repr=False)
    key_index: NDArray[np.uint16] = field(repr=False)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def palette(self) -> List[RGBATuple]:
        return [e.rgba for e in self.entries]

    def index_of(self, rgba: Sequence[int]) -> Optional[int]:
        """Final index of a canonical colour, or None if absent."""
        r, g, b, a = (int(c) for c in rgba)
        key = np.uint32(r | (g << 8) | (b << 16) | (a << 24))
        pos = int(np.searchsorted(self.keys, key))
        if pos < self.keys.shape[0] and self.keys[pos] == key:
            return int(self.key_index[pos])
        return None

    def lookup(self, keys: U32Keys) -> Tuple[NDArray[np.uint16], NDArray[np.bool_]]:
        """
        Vectorised index lookup.

        Returns (indices, found). Indices for missing keys are 0.
        """
        flat = np.asarray(keys, dtype=np.uint32).reshape(-1)
        if self.keys.shape[0] == 0:
            return (
                np.zeros(flat.shape, dtype=np.uint16).reshape(np.shape(keys)),
                np.zeros(flat.shape, dtype=bool).reshape(np.shape(keys)),
            )
        pos = np.searchsorted(self.keys, flat)
        pos = np.minimum(pos, self.keys.shape[0] - 1)
        found = self.keys[pos] == flat
        indices = np.where(found, self.key_index[pos], 0).astype(np.uint16)
        return indices.reshape(np.shape(keys)), found.reshape(np.shape(keys))

    def as_dict(self) -> Dict[RGBATuple, int]:
        return {e.rgba: e.index for e in self.entries}


@dataclass(frozen=True, eq=False)
class RecolourResult:
    """Everything one run produces, before anything is written."""

    palette: List[RGBATuple]
    index_image: U8Image
    palette_image: Optional[U8Image]
    catalog: Catalog
    missing_pixels: int = 0


# Small helpers


def rgba_to_hex(rgba: Sequence[int]) -> HexStr:
    """RGBA tuple to lowercase hex string '#rrggbbaa'."""
    return f"#{int(rgba[0]):02x}{int(rgba[1]):02x}{int(rgba[2]):02x}{int(rgba[3]):02x}"


def rgb_to_hex(rgba: Sequence[int]) -> HexStr:
    """First three channels to '#rrggbb'."""
    return f"#{int(rgba[0]):02x}{int(rgba[1]):02x}{int(rgba[2]):02x}"


def assert_sample_image(image: np.ndarray) -> SampleImage:
    """Validate an unsigned integer (H,W,4) image and return it typed."""
    if (
        not isinstance(image, np.ndarray)
        or image.ndim != 3
        or image.shape[-1] != 4
        or image.dtype.kind != "u"
    ):
        raise TypeError("expected unsigned integer (H,W,4) image")
    return image  # type: ignore[return-value]


def assert_u8_image_rgba(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBATuple",
    "HexStr",
    "U8Image",
    "U16Grid",
    "U32Keys",
    "SampleImage",
    "HSV",
    # value objects
    "SourceImage",
    "UniqueColour",
    "Catalog",
    "RecolourResult",
    # helpers
    "rgba_to_hex",
    "rgb_to_hex",
    "assert_sample_image",
    "assert_u8_image_rgba",
]
