# recolour/pipeline.py
from __future__ import annotations

"""
Recolour pipeline.

  source -> catalog (one pass) -> index image + palette image -> optional writes

Outputs are written only after every buffer is complete, so a capacity
failure leaves nothing on disk.
"""

from pathlib import Path
from typing import List, Optional, Union

from .catalog import build_catalog
from .core_types import RecolourResult, RGBATuple, SourceImage
from .image_io import ImageCodecs, default_codecs
from .index_encode import encode_index_image
from .palette_layout import layout_palette
from .utils import warn

PathLike = Union[str, Path]


def build_recolour(source: SourceImage) -> RecolourResult:
    """
    Run the whole transform in memory.

    Raises CapacityExceededError when the image has more than 65536 colours.
    """
    catalog = build_catalog(source)
    index_image, missing = encode_index_image(source, catalog)
    palette = catalog.palette
    palette_image = layout_palette(palette) if palette else None
    return RecolourResult(
        palette=palette,
        index_image=index_image,
        palette_image=palette_image,
        catalog=catalog,
        missing_pixels=missing,
    )


def write_outputs(
    result: RecolourResult,
    index_path: Optional[PathLike] = None,
    palette_path: Optional[PathLike] = None,
    *,
    codecs: Optional[ImageCodecs] = None,
) -> List[Path]:
    """Write whichever outputs have a path. Returns the written paths."""
    codecs = codecs or default_codecs()
    # Resolve encoders first so an unsupported suffix fails before any write.
    if index_path is not None:
        codecs.encoder_for(Path(index_path))
    if palette_path is not None and result.palette_image is not None:
        codecs.encoder_for(Path(palette_path))

    written: List[Path] = []
    if index_path is not None:
        written.append(codecs.write(Path(index_path), result.index_image))
    if palette_path is not None:
        if result.palette_image is None:
            warn("image has no pixels; palette image not written")
        else:
            written.append(codecs.write(Path(palette_path), result.palette_image))
    return written


def generate_from_image(
    source: SourceImage,
    index_path: Optional[PathLike] = None,
    palette_path: Optional[PathLike] = None,
    *,
    codecs: Optional[ImageCodecs] = None,
) -> List[RGBATuple]:
    """
    Build the index image and palette for source, write the outputs that
    have a path, and return the ordered palette (index order, alpha 255).
    """
    result = build_recolour(source)
    write_outputs(result, index_path, palette_path, codecs=codecs)
    return result.palette


def generate(
    image_path: PathLike,
    index_path: Optional[PathLike] = None,
    palette_path: Optional[PathLike] = None,
    *,
    codecs: Optional[ImageCodecs] = None,
) -> List[RGBATuple]:
    """Read image_path through codecs, then generate_from_image."""
    codecs = codecs or default_codecs()
    source = codecs.read(Path(image_path))
    return generate_from_image(source, index_path, palette_path, codecs=codecs)


__all__ = [
    "PathLike",
    "build_recolour",
    "write_outputs",
    "generate_from_image",
    "generate",
]
