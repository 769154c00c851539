"""
Global tunables used across the project.

- Catalog limits and sort tolerance
- Palette layout widths
- Index image channel layout
- Output naming / file types
"""
from __future__ import annotations

from typing import FrozenSet

# =========================
# Catalog
# =========================
# Hue and saturation closer than this compare as equal when sorting.
EPSILON: float = 1e-8

# Indices are stored in 16 bits.
MAX_PALETTE_COLOURS: int = 1 << 16

# =========================
# Palette layout
# =========================
PALETTE_ROW_WIDTH: int = 256
SMALL_PALETTE_MAX: int = 128
PALETTE_OPAQUE_ALPHA: int = 255

# =========================
# Index image channels
# =========================
INDEX_LOW_CHANNEL: int = 0
INDEX_HIGH_CHANNEL: int = 1
INDEX_RESERVED_CHANNEL: int = 2
INDEX_ALPHA_CHANNEL: int = 3
INDEX_RESERVED_VALUE: int = 0

# =========================
# Files
# =========================
INDEX_SUFFIX: str = "_index"
PALETTE_SUFFIX: str = "_palette"
OUTPUT_SUFFIXES: FrozenSet[str] = frozenset({INDEX_SUFFIX, PALETTE_SUFFIX})
IMAGE_EXTENSIONS: FrozenSet[str] = frozenset(
    {".png", ".gif", ".jpg", ".jpeg", ".bmp", ".tga", ".webp"}
)

__all__ = [
    "EPSILON",
    "MAX_PALETTE_COLOURS",
    "PALETTE_ROW_WIDTH",
    "SMALL_PALETTE_MAX",
    "PALETTE_OPAQUE_ALPHA",
    "INDEX_LOW_CHANNEL",
    "INDEX_HIGH_CHANNEL",
    "INDEX_RESERVED_CHANNEL",
    "INDEX_ALPHA_CHANNEL",
    "INDEX_RESERVED_VALUE",
    "INDEX_SUFFIX",
    "PALETTE_SUFFIX",
    "OUTPUT_SUFFIXES",
    "IMAGE_EXTENSIONS",
]
