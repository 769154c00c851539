#!/usr/bin/env python3
"""
recolour_sprite.py
Split sprites into an index image and an HSV-ordered palette image for palette swapping.

Usage:
  python recolour_sprite.py INPUT [--outdir DIR] [--index-out PATH] [--palette-out PATH]
                            [--no-index] [--no-palette] [--palette-json PATH]
                            [--print-palette] [--verify] [--jobs N] [--debug]

Input:
  A single image or a folder of images (.png .gif .jpg .jpeg .bmp .tga .webp).
  Files already named *_index / *_palette are skipped in folder mode.

Output:
  <stem>_index.png   : R = index low byte, G = index high byte, B = 0, A = source alpha
  <stem>_palette.png : opaque colours in index order, row-major, power-of-two sized
  Written next to INPUT unless --outdir is given.

Notes:
  Each image is handled in one thread; --jobs only parallelises across files.
  More than 65536 distinct colours is an error and writes nothing for that file.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import UnidentifiedImageError

from recolour.colour_convert import normalise_to_rgba8
from recolour.constants import (
    IMAGE_EXTENSIONS,
    INDEX_SUFFIX,
    OUTPUT_SUFFIXES,
    PALETTE_SUFFIX,
)
from recolour.core_types import RecolourResult, SourceImage, rgb_to_hex
from recolour.errors import RecolourError
from recolour.pipeline import build_recolour, write_outputs
from recolour.image_io import ImageCodecs, default_codecs
from recolour.index_encode import apply_palette
from recolour.utils import (
    capture_log,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    palette_hex_lines,
    print_banner,
    print_config_line,
    warn,
)

# CLI args & small helpers


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        index_out / palette_out: explicit output paths (single file only)
        no_index / no_palette: skip writing that output
        palette_json: optional Path for a hex list of the palette
        print_palette: bool, list palette entries in the report
        verify: bool, rebuild the image from the outputs and compare
        jobs: parallel file workers
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="recolour_sprite",
        description="Split sprite(s) into an index image and an ordered palette image.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--index-out",
        type=Path,
        default=None,
        help="Index image path (single file only). Defaults to <stem>_index.png",
    )
    parser.add_argument(
        "--palette-out",
        type=Path,
        default=None,
        help="Palette image path (single file only). Defaults to <stem>_palette.png",
    )
    parser.add_argument(
        "--no-index", action="store_true", help="Do not write the index image"
    )
    parser.add_argument(
        "--no-palette", action="store_true", help="Do not write the palette image"
    )
    parser.add_argument(
        "--palette-json",
        type=Path,
        default=None,
        help="Also write the palette as a JSON list of '#rrggbb' (single file only)",
    )
    parser.add_argument(
        "--print-palette", action="store_true", help="List palette entries"
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Rebuild the image from index + palette and check it matches",
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def output_paths_for(
    src_path: Path,
    outdir: Optional[Path],
    index_out: Optional[Path] = None,
    palette_out: Optional[Path] = None,
    emit_index: bool = True,
    emit_palette: bool = True,
) -> Tuple[Optional[Path], Optional[Path]]:
    """Resolve (index_path, palette_path); None where that output is disabled."""
    base = outdir if outdir is not None else src_path.parent
    index_path = index_out or base / f"{src_path.stem}{INDEX_SUFFIX}.png"
    palette_path = palette_out or base / f"{src_path.stem}{PALETTE_SUFFIX}.png"
    return (
        index_path if emit_index else None,
        palette_path if emit_palette else None,
    )


def is_output_artifact(path: Path) -> bool:
    """True for files this tool wrote (<stem>_index / <stem>_palette)."""
    return any(path.stem.endswith(sfx) for sfx in OUTPUT_SUFFIXES)


def verify_round_trip(source: SourceImage, result: RecolourResult) -> int:
    """
    Rebuild RGBA from index + palette and compare with the canonical source.
    Returns the number of mismatching pixels.
    """
    expected = normalise_to_rgba8(
        source.pixels, source.max_value, source.premultiplied
    )
    if not result.palette:
        return 0
    rebuilt = apply_palette(result.index_image, result.palette)
    return int(np.count_nonzero(np.any(rebuilt != expected, axis=-1)))


def write_palette_json(path: Path, result: RecolourResult) -> Path:
    """Dump the palette as a JSON list of '#rrggbb' strings in index order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump([rgb_to_hex(c) for c in result.palette], fh, indent=2)
    return path


# Per-file processing


def _process_single_image(
    src_path: Path,
    index_path: Optional[Path],
    palette_path: Optional[Path],
    json_path: Optional[Path],
    print_palette: bool,
    verify: bool,
    debug: bool,
    codecs: ImageCodecs,
) -> None:
    """
    Process a single image path end-to-end:
      load -> catalog -> encode -> layout -> save -> report.
    Raises on failure; nothing is written when the catalog cannot be built.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)

    source = codecs.read(src_path)
    t_loaded = time.perf_counter()
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{source.width}x{source.height}"),
                    ("Depth", "16-bit" if source.max_value > 255 else "8-bit"),
                    ("Premultiplied", source.premultiplied),
                ]
            )
        )

    result = build_recolour(source)
    t_built = time.perf_counter()
    if debug:
        dims = (
            f"{result.palette_image.shape[1]}x{result.palette_image.shape[0]}"
            if result.palette_image is not None
            else "-"
        )
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Unique colours", len(result.palette)),
                    ("Palette image", dims),
                    ("Missing pixels", result.missing_pixels),
                    ("Build time", format_seconds_compact(t_built - t_loaded)),
                ]
            )
        )

    if verify:
        mismatched = verify_round_trip(source, result)
        if mismatched:
            warn(f"verify: {mismatched:,} pixel(s) do not round-trip")
        else:
            log("Verify: ok")

    written = write_outputs(result, index_path, palette_path, codecs=codecs)
    if json_path is not None:
        written.append(write_palette_json(json_path, result))
    t_saved = time.perf_counter()

    # Report
    for path in written:
        log(f"Wrote {path.name}")
    log(
        key_value_pairs_to_string(
            [
                ("Size", f"{source.width}x{source.height}"),
                ("Palette size", len(result.palette)),
            ]
        )
    )
    if print_palette:
        log("Palette:")
        for line in palette_hex_lines(result.palette):
            log(line)

    if debug:
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"build={format_seconds_compact(t_built - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_built)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")


def _process_one(
    path: Path,
    args: argparse.Namespace,
    codecs: ImageCodecs,
    single: bool,
) -> bool:
    """Process one file, logging failures. Returns True on success."""
    index_path, palette_path = output_paths_for(
        path,
        args.outdir,
        args.index_out if single else None,
        args.palette_out if single else None,
        emit_index=not args.no_index,
        emit_palette=not args.no_palette,
    )
    try:
        _process_single_image(
            path,
            index_path,
            palette_path,
            args.palette_json if single else None,
            args.print_palette,
            args.verify,
            args.debug,
            codecs,
        )
    except (RecolourError, UnidentifiedImageError, OSError) as e:
        error(f"{path.name}: {e}")
        return False
    return True


def _process_one_captured(
    path: Path, args: argparse.Namespace, codecs: ImageCodecs
) -> Tuple[bool, str]:
    """
    Process a single file with its log lines captured per thread.

    Useful for concurrent execution where output should be printed in order.
    """
    with capture_log() as buf:
        ok = _process_one(path, args, codecs, single=False)
    return ok, buf.getvalue()


def collect_folder_images(folder: Path) -> List[Path]:
    """Image files in folder (not recursive), skipping our own outputs, sorted by name."""
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTENSIONS
        and not is_output_artifact(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering. Returns the process exit code.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    print_config_line(
        "run",
        [
            ("CPU cores", os.cpu_count() or 1),
            ("Jobs", args.jobs),
            ("Index", not args.no_index),
            ("Palette", not args.no_palette),
        ],
        debug=False,
    )

    codecs = default_codecs()

    if not src.is_dir():
        return 0 if _process_one(src, args, codecs, single=True) else 1

    if args.index_out or args.palette_out or args.palette_json:
        warn("--index-out/--palette-out/--palette-json ignored in folder mode")
    files = collect_folder_images(src)
    if args.debug:
        debug_log(
            key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)])
        )

    if args.jobs <= 1:
        results = [_process_one(p, args, codecs, single=False) for p in files]
    else:
        with ThreadPoolExecutor(max_workers=args.jobs) as ex:
            futures = [
                ex.submit(_process_one_captured, p, args, codecs) for p in files
            ]
            outcomes = [f.result() for f in futures]
        for _ok, text in outcomes:
            print(text, end="", flush=True)
        results = [ok for ok, _text in outcomes]

    failed = results.count(False)
    if failed:
        error(f"{failed} of {len(results)} file(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
