# recolour/image_io.py
from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict

import numpy as np
from PIL import Image, ImageOps

from .constants import IMAGE_EXTENSIONS
from .core_types import SourceImage, U8Image, assert_u8_image_rgba
from .errors import UnsupportedFormatError

"""
Image I/O boundary: Pillow-backed decoders and encoders picked by file suffix.

The pipeline never touches files directly. Callers hand it an ImageCodecs
registry (default_codecs() unless they need something else), which maps
'.png' etc. to decode(bytes) -> SourceImage and encode(U8Image) -> bytes.
"""

Decoder = Callable[[bytes], SourceImage]
Encoder = Callable[[U8Image], bytes]

_SIXTEEN_BIT_MODES = ("I;16", "I;16B", "I;16L", "I;16N", "I")


def source_from_pil(im: Image.Image) -> SourceImage:
    """
    Pillow image -> SourceImage, keeping the source's depth and alpha convention.

    RGBa / La     : premultiplied 8-bit
    I;16* / I     : 16-bit grey, opaque
    anything else : converted to straight 8-bit RGBA
    """
    mode = im.mode
    if mode == "RGBa":
        arr = np.array(im, dtype=np.uint8)
        return SourceImage(arr, 255, True)
    if mode == "La":
        la = np.array(im, dtype=np.uint8)
        arr = np.empty(la.shape[:2] + (4,), dtype=np.uint8)
        arr[..., :3] = la[..., 0:1]
        arr[..., 3] = la[..., 1]
        return SourceImage(arr, 255, True)
    if mode in _SIXTEEN_BIT_MODES:
        grey = np.clip(np.array(im, dtype=np.int64), 0, 65535).astype(np.uint16)
        arr16 = np.empty(grey.shape + (4,), dtype=np.uint16)
        arr16[..., :3] = grey[..., None]
        arr16[..., 3] = 65535
        return SourceImage(arr16, 65535, False)
    arr = np.array(im.convert("RGBA"), dtype=np.uint8)
    return SourceImage(arr, 255, False)


def decode_with_pillow(data: bytes) -> SourceImage:
    """Decode any Pillow-readable bytes. Raises PIL.UnidentifiedImageError on junk."""
    with Image.open(io.BytesIO(data)) as im0:
        im = ImageOps.exif_transpose(im0)
        im.load()
        return source_from_pil(im)


def encode_png(rgba: U8Image) -> bytes:
    """uint8 (H,W,4) straight RGBA -> PNG bytes. Channels are stored as-is."""
    arr = np.ascontiguousarray(assert_u8_image_rgba(rgba))
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG", optimize=False)
    return buf.getvalue()


@dataclass
class ImageCodecs:
    """Suffix -> codec registry. Suffixes are lowercase and include the dot."""

    decoders: Dict[str, Decoder] = field(default_factory=dict)
    encoders: Dict[str, Encoder] = field(default_factory=dict)

    def register_decoder(self, suffix: str, decoder: Decoder) -> None:
        self.decoders[suffix.lower()] = decoder

    def register_encoder(self, suffix: str, encoder: Encoder) -> None:
        self.encoders[suffix.lower()] = encoder

    def decoder_for(self, path: Path) -> Decoder:
        suffix = Path(path).suffix.lower()
        try:
            return self.decoders[suffix]
        except KeyError:
            raise UnsupportedFormatError(suffix, "decoder") from None

    def encoder_for(self, path: Path) -> Encoder:
        suffix = Path(path).suffix.lower()
        try:
            return self.encoders[suffix]
        except KeyError:
            raise UnsupportedFormatError(suffix, "encoder") from None

    def read(self, path: Path) -> SourceImage:
        path = Path(path)
        decoder = self.decoder_for(path)
        return decoder(path.read_bytes())

    def write(self, path: Path, rgba: U8Image) -> Path:
        path = Path(path)
        data = self.encoder_for(path)(rgba)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path


def default_codecs() -> ImageCodecs:
    """Pillow decoders for common raster types; PNG is the only lossless writer."""
    codecs = ImageCodecs()
    for suffix in sorted(IMAGE_EXTENSIONS):
        codecs.register_decoder(suffix, decode_with_pillow)
    codecs.register_encoder(".png", encode_png)
    return codecs


__all__ = [
    "Decoder",
    "Encoder",
    "source_from_pil",
    "decode_with_pillow",
    "encode_png",
    "ImageCodecs",
    "default_codecs",
]
