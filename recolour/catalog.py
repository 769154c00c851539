# recolour/catalog.py
from __future__ import annotations

"""
Colour catalog builder.

Scans the image once, keeps each distinct canonical colour, orders the
colours by (hue, saturation, value) so palettes are easy to edit by hand,
and gives every colour a 16-bit index equal to its sorted position.

Exports:
  float_equals(a, b)
  compare_unique_colours(a, b)
  sort_unique_colours(colours)
  unique_canonical_keys(source)
  build_catalog(source)
  build_catalog_from_keys(keys)
"""

from functools import cmp_to_key
from typing import Iterable, List

import numpy as np

from .colour_convert import (
    normalise_to_palette_rgba8,
    pack_rgba_keys,
    rgb_to_hsv,
    unpack_rgba_keys,
)
from .constants import EPSILON, MAX_PALETTE_COLOURS
from .core_types import Catalog, SourceImage, U32Keys, UniqueColour
from .errors import CapacityExceededError


def float_equals(a: float, b: float, eps: float = EPSILON) -> bool:
    """True when |a - b| < eps."""
    return (a - b) < eps and (b - a) < eps


def compare_unique_colours(a: UniqueColour, b: UniqueColour) -> int:
    """
    Three-level comparator: hue, then saturation, then value.

    Hue and saturation use float_equals before falling through. Value is
    compared with a plain '<', so near-equal values still order strictly.
    """
    if float_equals(a.hue, b.hue):
        if float_equals(a.saturation, b.saturation):
            if a.value < b.value:
                return -1
            if b.value < a.value:
                return 1
            return 0
        return -1 if a.saturation < b.saturation else 1
    return -1 if a.hue < b.hue else 1


def sort_unique_colours(colours: Iterable[UniqueColour]) -> List[UniqueColour]:
    """Sort with compare_unique_colours and stamp index = position."""
    ordered = sorted(colours, key=cmp_to_key(compare_unique_colours))
    return [
        UniqueColour(c.rgba, c.hue, c.saturation, c.value, i)
        for i, c in enumerate(ordered)
    ]


def unique_canonical_keys(source: SourceImage) -> U32Keys:
    """Sorted distinct packed palette keys present in the image."""
    canon = normalise_to_palette_rgba8(
        source.pixels, source.max_value, source.premultiplied
    )
    keys = pack_rgba_keys(canon).reshape(-1)
    return np.unique(keys).astype(np.uint32, copy=False)  # type: ignore[return-value]


def build_catalog_from_keys(keys: U32Keys) -> Catalog:
    """
    Build a catalog from distinct packed palette keys.

    Raises CapacityExceededError when there are more than 65536 keys.
    """
    keys = np.unique(np.asarray(keys, dtype=np.uint32).reshape(-1))
    count = int(keys.shape[0])
    if count > MAX_PALETTE_COLOURS:
        raise CapacityExceededError(count, MAX_PALETTE_COLOURS)

    rgba = unpack_rgba_keys(keys)
    hsv = rgb_to_hsv(rgba[:, :3].astype(np.float64) / 255.0)

    # Provisional order is np.unique's byte order, which is deterministic.
    provisional = [
        UniqueColour(
            rgba=(int(px[0]), int(px[1]), int(px[2]), int(px[3])),
            hue=float(hsv[i, 0]),
            saturation=float(hsv[i, 1]),
            value=float(hsv[i, 2]),
            index=i,
        )
        for i, px in enumerate(rgba.tolist())
    ]
    entries = sort_unique_colours(provisional)

    # Lookup table keyed by the packed colour; keys stay sorted for searchsorted.
    final_keys = pack_rgba_keys(
        np.array([e.rgba for e in entries], dtype=np.uint8).reshape(-1, 4)
    )
    order = np.argsort(final_keys, kind="stable")
    key_index = order.astype(np.uint16)
    return Catalog(
        entries=tuple(entries),
        keys=final_keys[order].astype(np.uint32, copy=False),
        key_index=key_index,
    )


def build_catalog(source: SourceImage) -> Catalog:
    """One pass over the image -> ordered catalog."""
    return build_catalog_from_keys(unique_canonical_keys(source))


__all__ = [
    "float_equals",
    "compare_unique_colours",
    "sort_unique_colours",
    "unique_canonical_keys",
    "build_catalog",
    "build_catalog_from_keys",
]
