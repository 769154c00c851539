# recolour/errors.py
from __future__ import annotations

"""
Error types raised by the recolour pipeline.

I/O failures from Pillow or the filesystem are not wrapped; they propagate
as OSError / PIL.UnidentifiedImageError.
"""


class RecolourError(Exception):
    """Base class for recolour failures."""


class CapacityExceededError(RecolourError, ValueError):
    """The image holds more distinct colours than a 16-bit index can address."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(
            f"sprite contains too many colours: {count:,} (limit {limit:,})"
        )
        self.count = count
        self.limit = limit


class UnsupportedFormatError(RecolourError, ValueError):
    """No codec is registered for a file suffix."""

    def __init__(self, suffix: str, operation: str) -> None:
        super().__init__(f"no {operation} registered for '{suffix or '(none)'}'")
        self.suffix = suffix
        self.operation = operation


__all__ = ["RecolourError", "CapacityExceededError", "UnsupportedFormatError"]
