# recolour/__init__.py
"""
recolour package.

Purpose:
  Turn a full-colour sprite into an index image plus a small ordered palette
  image, so a renderer can swap palettes later. See recolour_sprite.py for CLI.

Public API:
  generate            : read an image file, write outputs, return the palette.
  generate_from_image : same, starting from a decoded SourceImage.
  build_recolour      : in-memory pipeline returning a RecolourResult.
  pipeline            : module holding the three entry points above.
  catalog             : colour dedup, HSV ordering and index assignment.
  colour_convert      : 8-bit normalisation, RGB->HSV, key packing.
  index_encode        : index packing, index image encoder, apply_palette.
  palette_layout      : next_power_of_two, palette_dimensions, layout_palette.
  image_io            : injected Pillow codec registry.
  core_types          : shared aliases and value objects.
  utils               : formatting and logging helpers.

Quick start:
  from recolour import generate
  palette = generate("hero.png", "hero_index.png", "hero_palette.png")
"""

__version__ = "0.1.0"

from . import catalog
from . import colour_convert
from . import core_types
from . import image_io
from . import index_encode
from . import palette_layout
from . import pipeline
from . import utils

from .core_types import RecolourResult, SourceImage, UniqueColour  # noqa: E402
from .errors import (  # noqa: E402
    CapacityExceededError,
    RecolourError,
    UnsupportedFormatError,
)
from .pipeline import (  # noqa: E402
    build_recolour,
    generate,
    generate_from_image,
    write_outputs,
)

__all__ = [
    "__version__",
    "catalog",
    "colour_convert",
    "core_types",
    "image_io",
    "index_encode",
    "palette_layout",
    "pipeline",
    "utils",
    "RecolourResult",
    "SourceImage",
    "UniqueColour",
    "CapacityExceededError",
    "RecolourError",
    "UnsupportedFormatError",
    "build_recolour",
    "generate",
    "generate_from_image",
    "write_outputs",
]
