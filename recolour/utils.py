# recolour/utils.py
from __future__ import annotations

"""
Shared utilities for recolour.

Includes duration and number formatting, palette listings for reports,
and tidy print-based logging used by the pipeline and the CLI.
"""

import io
import sys
import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Sequence, TextIO, Tuple


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Palette report


def palette_hex_lines(palette: Sequence[Sequence[int]]) -> List[str]:
    """One '  idx  #rrggbb' line per entry, index zero-padded to the widest index."""
    width = max(1, len(str(max(len(palette) - 1, 0))))
    lines: List[str] = []
    for i, rgba in enumerate(palette):
        hex_code = f"#{int(rgba[0]):02x}{int(rgba[1]):02x}{int(rgba[2]):02x}"
        lines.append(f"  {i:0{width}d}  {hex_code}")
    return lines


# Per-thread capture

_capture = threading.local()


def _log_stream() -> TextIO:
    """Current thread's capture buffer, else sys.stdout."""
    stream = getattr(_capture, "stream", None)
    return stream if stream is not None else sys.stdout


@contextmanager
def capture_log() -> Iterator[io.StringIO]:
    """
    Route log / debug_log / warn / print_banner of the calling thread into a
    fresh buffer. sys.stdout is never replaced, so other threads are unaffected.
    """
    buf = io.StringIO()
    previous = getattr(_capture, "stream", None)
    _capture.stream = buf
    try:
        yield buf
    finally:
        _capture.stream = previous


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] CPU cores: 8  Jobs: 2  Index: on  Palette: on
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def enable_line_buffered_stdout() -> None:
    """Enable line-buffered stdout when the stream supports .reconfigure()."""
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", file=_log_stream(), flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, file=_log_stream(), flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", file=_log_stream(), flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", file=_log_stream(), flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "palette_hex_lines",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "enable_line_buffered_stdout",
    "capture_log",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
