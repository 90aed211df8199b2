"""Tests for ordered dithering (Bayer and even-toned matrices)."""

import numpy as np
import pytest

from bitdither.core.bitmap import Bitmap
from bitdither.core.options import DitherOptions
from bitdither.core.screening import (
    BAYER_4X4,
    apply_even_toned,
    apply_ordered_bayer,
    even_toned_matrix,
    generate_even_toned_matrix,
    screen_plane,
    tile_thresholds,
)


class TestBayer:
    def test_matrix_literal(self):
        assert BAYER_4X4.tolist() == [
            [0, 8, 2, 10],
            [12, 4, 14, 6],
            [3, 11, 1, 9],
            [15, 7, 13, 5],
        ]

    def test_matrix_is_read_only(self):
        with pytest.raises(ValueError):
            BAYER_4X4[0, 0] = 1

    def test_uniform_100_follows_rank_order(self):
        bmp = Bitmap.blank(4, 4, color=(100, 100, 100, 255))
        apply_ordered_bayer(bmp, DitherOptions())
        # rank 5 -> threshold 87.7, rank 6 -> 103.6
        expected = np.where(BAYER_4X4 <= 5, 255, 0)
        np.testing.assert_array_equal(bmp.pixels()[:, :, 0], expected)

    def test_rank_zero_white_rank_fifteen_black(self):
        plane = np.full((4, 4), 100)
        result = screen_plane(plane, BAYER_4X4, 255 / 16)
        assert result[0, 0] == 255  # rank 0, threshold ~7.97
        assert result[3, 0] == 0  # rank 15, threshold ~247.9

    def test_tiles_over_larger_image(self):
        bmp = Bitmap.blank(9, 6, color=(100, 100, 100, 255))
        apply_ordered_bayer(bmp, DitherOptions())
        red = bmp.pixels()[:, :, 0]
        np.testing.assert_array_equal(red[:2, :4], red[4:6, :4])
        np.testing.assert_array_equal(red[:, :4], red[:, 4:8])

    def test_idempotent(self):
        arr = np.random.default_rng(5).integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
        first = Bitmap.from_array(arr.copy())
        second = Bitmap.from_array(arr.copy())
        apply_ordered_bayer(first, DitherOptions())
        apply_ordered_bayer(second, DitherOptions())
        np.testing.assert_array_equal(first.pixels(), second.pixels())


class TestEvenTonedMatrix:
    def test_two_by_two_all_ties(self):
        assert generate_even_toned_matrix(2).tolist() == [[0, 1], [2, 3]]

    def test_three_by_three(self):
        assert generate_even_toned_matrix(3).tolist() == [
            [5, 1, 6],
            [2, 0, 3],
            [7, 4, 8],
        ]

    @pytest.mark.parametrize("n", [2, 4, 5, 8, 16])
    def test_is_permutation(self, n):
        matrix = generate_even_toned_matrix(n)
        assert sorted(matrix.ravel().tolist()) == list(range(n * n))

    def test_center_ranks_first(self):
        matrix = generate_even_toned_matrix(8)
        assert matrix[3:5, 3:5].max() == 3

    def test_cached_instance_reused(self):
        assert even_toned_matrix(6) is even_toned_matrix(6)

    def test_cached_matrix_is_read_only(self):
        with pytest.raises(ValueError):
            even_toned_matrix(4)[0, 0] = 99


class TestEvenTonedScreening:
    def test_two_by_two_thresholds(self):
        # scale 255 / 3 = 85 -> thresholds 42.5, 127.5, 212.5, 297.5
        thresholds = tile_thresholds(generate_even_toned_matrix(2), 85.0, 2, 2)
        assert thresholds.tolist() == [[42.5, 127.5], [212.5, 297.5]]

    def test_uniform_150_with_size_two(self):
        bmp = Bitmap.blank(4, 2, color=(150, 150, 150, 255))
        apply_even_toned(bmp, DitherOptions(matrix_size=2))
        assert bmp.pixels()[:, :, 0].tolist() == [
            [255, 255, 255, 255],
            [0, 0, 0, 0],
        ]

    def test_white_never_reaches_top_rank(self):
        # The top rank's threshold exceeds 255, so even pure white is cut there.
        bmp = Bitmap.blank(2, 2, color=(255, 255, 255, 255))
        apply_even_toned(bmp, DitherOptions(matrix_size=2))
        assert bmp.pixels()[1, 1, 0] == 0

    def test_default_size_binary(self):
        arr = np.random.default_rng(6).integers(0, 256, size=(10, 10, 4), dtype=np.uint8)
        bmp = Bitmap.from_array(arr)
        apply_even_toned(bmp, DitherOptions())
        assert set(np.unique(arr[:, :, :3])) <= {0, 255}
