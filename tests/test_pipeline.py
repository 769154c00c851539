from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from conftest import distinct_colour_strip, rgba_image
from recolour.constants import MAX_PALETTE_COLOURS
from recolour.core_types import SourceImage
from recolour.errors import CapacityExceededError, UnsupportedFormatError
from recolour.pipeline import build_recolour, generate, generate_from_image
from recolour.index_encode import apply_palette


def _read_png(path):
    with Image.open(path) as im:
        return np.array(im.convert("RGBA"), dtype=np.uint8)


def test_build_recolour_in_memory(sprite):
    result = build_recolour(sprite)
    assert len(result.palette) == 5
    assert result.palette_image.shape == (1, 8, 4)
    assert result.missing_pixels == 0
    np.testing.assert_array_equal(
        apply_palette(result.index_image, result.palette), sprite.pixels
    )


def test_generate_from_image_writes_both_outputs(tmp_path, sprite):
    index_path = tmp_path / "hero_index.png"
    palette_path = tmp_path / "hero_palette.png"
    palette = generate_from_image(sprite, index_path, palette_path)

    result = build_recolour(sprite)
    assert palette == result.palette
    np.testing.assert_array_equal(_read_png(index_path), result.index_image)
    np.testing.assert_array_equal(_read_png(palette_path), result.palette_image)


def test_generate_from_image_without_paths_only_returns_palette(tmp_path, sprite):
    palette = generate_from_image(sprite)
    assert palette[0] == (0, 0, 0, 255)
    assert list(tmp_path.iterdir()) == []


def test_palette_is_returned_when_only_index_written(tmp_path, sprite):
    palette = generate_from_image(sprite, index_path=tmp_path / "i.png")
    assert len(palette) == 5
    assert [p.name for p in tmp_path.iterdir()] == ["i.png"]


def test_capacity_failure_writes_nothing(tmp_path):
    img = SourceImage.from_rgba8(distinct_colour_strip(MAX_PALETTE_COLOURS + 1))
    with pytest.raises(CapacityExceededError):
        generate_from_image(img, tmp_path / "i.png", tmp_path / "p.png")
    assert list(tmp_path.iterdir()) == []


def test_unsupported_output_suffix_writes_nothing(tmp_path, sprite):
    with pytest.raises(UnsupportedFormatError):
        generate_from_image(sprite, tmp_path / "i.png", tmp_path / "p.jpg")
    assert list(tmp_path.iterdir()) == []


def test_generate_reads_file(tmp_path, noisy):
    src = tmp_path / "noisy.png"
    Image.fromarray(noisy.pixels).save(src)
    palette = generate(src, tmp_path / "noisy_index.png", tmp_path / "noisy_palette.png")

    index_image = _read_png(tmp_path / "noisy_index.png")
    rebuilt = apply_palette(index_image, palette)
    np.testing.assert_array_equal(rebuilt, noisy.pixels)


def test_same_rgb_different_alpha_collapse_end_to_end(tmp_path):
    img = SourceImage.from_rgba8(
        rgba_image([[(10, 20, 30, 0), (10, 20, 30, 255), (10, 20, 30, 90)]])
    )
    palette = generate_from_image(img, tmp_path / "i.png")
    assert palette == [(10, 20, 30, 255)]
    assert _read_png(tmp_path / "i.png")[0, :, 3].tolist() == [0, 255, 90]


def test_empty_image_has_no_palette_image():
    result = build_recolour(SourceImage.from_rgba8(np.zeros((0, 0, 4), dtype=np.uint8)))
    assert result.palette == []
    assert result.palette_image is None


def test_pipeline_module_and_generate_function_are_both_reachable():
    import recolour
    from recolour import pipeline

    assert recolour.pipeline is pipeline
    assert pipeline.build_recolour is build_recolour
    assert recolour.generate is generate
    assert callable(recolour.generate)


def test_results_compare_by_identity(sprite):
    first = build_recolour(sprite)
    second = build_recolour(sprite)
    assert first == first
    assert first != second
    assert first.catalog == first.catalog
    assert first.catalog != second.catalog
    assert first.catalog.as_dict() == second.catalog.as_dict()
