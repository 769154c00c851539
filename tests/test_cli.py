from __future__ import annotations

import json
import sys

import numpy as np
from PIL import Image

from conftest import distinct_colour_strip
import recolour_sprite
from recolour_sprite import collect_folder_images, is_output_artifact, main, output_paths_for


def _save(path, arr):
    Image.fromarray(arr).save(path)
    return path


def test_output_paths_default_next_to_source(tmp_path):
    src = tmp_path / "hero.png"
    assert output_paths_for(src, None) == (
        tmp_path / "hero_index.png",
        tmp_path / "hero_palette.png",
    )


def test_output_paths_respect_outdir_and_flags(tmp_path):
    src = tmp_path / "hero.gif"
    out = tmp_path / "out"
    index_path, palette_path = output_paths_for(src, out, emit_palette=False)
    assert index_path == out / "hero_index.png"
    assert palette_path is None


def test_output_artifacts_are_recognised(tmp_path):
    assert is_output_artifact(tmp_path / "hero_index.png")
    assert is_output_artifact(tmp_path / "hero_palette.png")
    assert not is_output_artifact(tmp_path / "hero.png")


def test_single_file_run(tmp_path, noisy, capsys):
    src = _save(tmp_path / "noisy.png", noisy.pixels)
    json_path = tmp_path / "noisy.json"
    code = main([str(src), "--palette-json", str(json_path), "--verify", "--print-palette"])
    assert code == 0
    assert (tmp_path / "noisy_index.png").exists()
    assert (tmp_path / "noisy_palette.png").exists()
    hexes = json.loads(json_path.read_text(encoding="utf-8"))
    assert all(h.startswith("#") and len(h) == 7 for h in hexes)
    out = capsys.readouterr().out
    assert "Verify: ok" in out
    assert f"Palette size: {len(hexes)}" in out


def test_explicit_output_paths_and_no_palette(tmp_path, sprite):
    src = _save(tmp_path / "sprite.png", sprite.pixels)
    index_out = tmp_path / "custom" / "idx.png"
    code = main([str(src), "--index-out", str(index_out), "--no-palette"])
    assert code == 0
    assert index_out.exists()
    assert not (tmp_path / "sprite_palette.png").exists()


def test_folder_run_skips_outputs(tmp_path, sprite, noisy):
    _save(tmp_path / "a.png", sprite.pixels)
    _save(tmp_path / "b.png", noisy.pixels)
    _save(tmp_path / "old_index.png", sprite.pixels)
    (tmp_path / "readme.txt").write_text("not an image", encoding="utf-8")
    assert [p.name for p in collect_folder_images(tmp_path)] == ["a.png", "b.png"]

    outdir = tmp_path / "out"
    code = main([str(tmp_path), "--outdir", str(outdir), "--jobs", "1"])
    assert code == 0
    assert sorted(p.name for p in outdir.iterdir()) == [
        "a_index.png",
        "a_palette.png",
        "b_index.png",
        "b_palette.png",
    ]


def test_parallel_folder_run_keeps_stdout_and_orders_logs(
    tmp_path, sprite, noisy, capsys
):
    names = ["a", "b", "c", "d", "e", "f"]
    for i, name in enumerate(names):
        _save(tmp_path / f"{name}.png", (sprite if i % 2 else noisy).pixels)
    outdir = tmp_path / "out"
    stdout_before = sys.stdout

    code = main([str(tmp_path), "--outdir", str(outdir), "--jobs", "4"])

    assert code == 0
    assert sys.stdout is stdout_before
    out = capsys.readouterr().out
    banners = [line for line in out.splitlines() if line.startswith("=== ")]
    assert banners == [f"=== {name}.png ===" for name in names]
    for name in names:
        assert (outdir / f"{name}_index.png").exists()
        assert (outdir / f"{name}_palette.png").exists()


def test_too_many_colours_fails_without_output(tmp_path, capsys):
    arr = distinct_colour_strip(256 * 257).reshape(257, 256, 4)
    src = _save(tmp_path / "big.png", arr)
    code = main([str(src)])
    assert code == 1
    assert not (tmp_path / "big_index.png").exists()
    assert not (tmp_path / "big_palette.png").exists()
    assert "too many colours" in capsys.readouterr().err


def test_missing_source(tmp_path):
    assert main([str(tmp_path / "nope.png")]) == 2


def test_unreadable_file_is_reported(tmp_path, capsys):
    bad = tmp_path / "broken.png"
    bad.write_bytes(b"not a png")
    assert recolour_sprite.main([str(bad)]) == 1
    assert "broken.png" in capsys.readouterr().err


def test_verify_counts_mismatches(sprite):
    result = recolour_sprite.build_recolour(sprite)
    assert recolour_sprite.verify_round_trip(sprite, result) == 0
    tampered = result.index_image.copy()
    tampered[0, 1, 0] ^= 1
    broken = type(result)(
        palette=result.palette,
        index_image=tampered,
        palette_image=result.palette_image,
        catalog=result.catalog,
    )
    assert recolour_sprite.verify_round_trip(sprite, broken) == 1
    assert np.any(tampered != result.index_image)
