"""Tests for bitmap encoding and the algorithm gallery."""

import numpy as np
import pytest
from PIL import Image

from bitdither.core.bitmap import Bitmap
from bitdither.core.engine import dither
from bitdither.core.gallery import gallery_algorithms, render_gallery
from bitdither.core.options import Algorithm, DitherOptions
from bitdither.core.reader import load_bitmap
from bitdither.core.writer import bitmap_to_image, save_bitmap


def _gradient_png(path, width=24, height=8):
    ramp = np.linspace(0, 255, width, dtype=np.uint8)
    arr = np.tile(ramp, (height, 1))
    Image.fromarray(arr, "L").save(str(path))
    return path


class TestBitmapToImage:
    def test_produces_rgba_image(self):
        bmp = Bitmap.blank(3, 2, color=(1, 2, 3, 4))
        img = bitmap_to_image(bmp)
        assert img.mode == "RGBA"
        assert img.size == (3, 2)
        assert img.getpixel((2, 1)) == (1, 2, 3, 4)


class TestSaveBitmap:
    def test_png_round_trip(self, tmp_path):
        bmp = Bitmap.blank(4, 4, color=(128, 64, 32, 255))
        dither(bmp, Algorithm.ORDERED_BAYER)
        output = save_bitmap(bmp, tmp_path / "out.png")
        assert output.exists()
        again = load_bitmap(output)
        assert bytes(again.data) == bytes(bmp.data)

    def test_bmp_supported(self, tmp_path):
        output = save_bitmap(Bitmap.blank(2, 2), tmp_path / "out.bmp")
        assert Image.open(str(output)).format == "BMP"

    def test_lossy_format_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported output format"):
            save_bitmap(Bitmap.blank(2, 2), tmp_path / "out.jpg")


class TestGallery:
    def test_excludes_custom(self):
        algorithms = gallery_algorithms()
        assert Algorithm.CUSTOM not in algorithms
        assert len(algorithms) == len(Algorithm) - 1

    def test_renders_every_algorithm(self, tmp_path):
        source = _gradient_png(tmp_path / "src.png")
        out_dir = tmp_path / "gallery"
        result = render_gallery(source, out_dir, DitherOptions(seed=1, tm_width=8, tm_height=8))

        assert result.failed == {}
        assert set(result.written) == set(gallery_algorithms())
        for algorithm, path in result.written.items():
            assert path == out_dir / f"{algorithm.name}.png"
            assert path.exists()

    def test_each_render_starts_from_source(self, tmp_path):
        source = _gradient_png(tmp_path / "src.png")
        result = render_gallery(source, tmp_path / "g", DitherOptions(seed=1, tm_width=8, tm_height=8))
        gray = load_bitmap(result.written[Algorithm.GRAYSCALE]).pixels()[:, :, 0]
        assert len(np.unique(gray)) > 2

    def test_progress_callback(self, tmp_path):
        source = _gradient_png(tmp_path / "src.png", width=8, height=4)
        progress = []

        render_gallery(
            source,
            tmp_path / "g",
            DitherOptions(seed=0, tm_width=4, tm_height=4),
            on_progress=lambda current, total: progress.append((current, total)),
        )

        total = len(gallery_algorithms())
        assert len(progress) == total
        assert progress[-1] == (total, total)

    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            render_gallery(tmp_path / "nope.png", tmp_path / "g")

    def test_failing_algorithm_does_not_stop_the_rest(self, tmp_path):
        source = _gradient_png(tmp_path / "src.png", width=8, height=4)
        out_dir = tmp_path / "g"
        progress = []

        result = render_gallery(
            source,
            out_dir,
            DitherOptions(matrix_size=1, seed=0, tm_width=4, tm_height=4),
            on_progress=lambda current, total: progress.append(current),
        )

        assert set(result.failed) == {Algorithm.EVEN_TONED_SCREENING}
        assert "matrix_size" in result.failed[Algorithm.EVEN_TONED_SCREENING]
        assert len(result.written) == len(gallery_algorithms()) - 1
        assert not (out_dir / "EVEN_TONED_SCREENING.png").exists()
        assert (out_dir / "STUCKI.png").exists()
        assert len(progress) == len(gallery_algorithms())

    def test_failure_is_logged(self, tmp_path, caplog):
        source = _gradient_png(tmp_path / "src.png", width=4, height=4)
        with caplog.at_level("WARNING", logger="bitdither.core.gallery"):
            render_gallery(
                source,
                tmp_path / "g",
                DitherOptions(matrix_size=1, seed=0, tm_width=4, tm_height=4),
            )
        assert "Error generating EVEN_TONED_SCREENING" in caplog.text
