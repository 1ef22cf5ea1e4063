"""
Tests for incremental matrix repair after seam removal.

The defining property: removing a seam and repairing locally must leave
the matrix identical to one rebuilt from scratch over the new pixels.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from seam_carver.pixels import PixelBuffer
from seam_carver.matrix import MinPathMatrix
from seam_carver.seam import find_vertical_seam, remove_seam
from seam_carver.reenergize import Worklist, recompute_local_energies, propagate_min_sums

from conftest import (make_random_image, make_band_image, make_uniform_image,
                      assert_dp_invariant, assert_same_matrix, rebuilt)


def remove_and_repair(matrix, seam):
    remove_seam(matrix, seam)
    worklist = recompute_local_energies(matrix, seam)
    propagate_min_sums(matrix, worklist)


class TestWorklist:
    def test_iterates_bottom_row_first(self):
        worklist = Worklist(4)
        worklist.push(1, 0)
        worklist.push(2, 3)
        worklist.push(0, 1)
        worklist.push(3, 3)
        assert list(worklist) == [(2, 3), (3, 3), (0, 1), (1, 0)]
        assert len(worklist) == 4

    def test_row_queue_is_fifo(self):
        worklist = Worklist(2)
        for x in [4, 1, 3]:
            worklist.push(x, 1)
        assert list(worklist.row(1)) == [4, 1, 3]


class TestRecomputeLocalEnergies:
    def test_seeds_window_around_seam(self, random_pixels):
        matrix = MinPathMatrix.build(random_pixels)
        seam = find_vertical_seam(matrix)
        remove_seam(matrix, seam)
        worklist = recompute_local_energies(matrix, seam)

        rows = [y for _, y in worklist]
        assert rows == sorted(rows, reverse=True)
        assert matrix.height - 1 not in rows

        for y in range(matrix.height - 1):
            col = seam[y].item()
            expected = list(range(max(col - 2, 0), min(col + 2, matrix.width - 1) + 1))
            assert list(worklist.row(y)) == expected

    def test_energies_match_rebuild(self, random_pixels):
        matrix = MinPathMatrix.build(random_pixels)
        seam = find_vertical_seam(matrix)
        remove_seam(matrix, seam)
        recompute_local_energies(matrix, seam)
        assert torch.allclose(matrix.energy, rebuilt(matrix).energy)

    def test_leaves_sums_alone(self, random_pixels):
        matrix = MinPathMatrix.build(random_pixels)
        seam = find_vertical_seam(matrix)
        remove_seam(matrix, seam)
        sums = matrix.cum_min_sum.clone()
        recompute_local_energies(matrix, seam)
        assert torch.equal(matrix.cum_min_sum, sums)

    def test_single_row_has_nothing_to_seed(self):
        pixels = PixelBuffer(make_random_image(1, 6))
        matrix = MinPathMatrix.build(pixels)
        seam = find_vertical_seam(matrix)
        remove_seam(matrix, seam)
        assert len(recompute_local_energies(matrix, seam)) == 0

    def test_seam_at_edges_clipped(self):
        pixels = PixelBuffer(make_random_image(5, 6, seed=4))
        matrix = MinPathMatrix.build(pixels)
        seam = torch.zeros(5, dtype=torch.long)
        remove_seam(matrix, seam)
        worklist = recompute_local_energies(matrix, seam)
        assert list(worklist.row(0)) == [0, 1, 2]


class TestPropagateMinSums:
    def test_empty_worklist_is_noop(self, random_pixels):
        matrix = MinPathMatrix.build(random_pixels)
        before = matrix.copy()
        assert propagate_min_sums(matrix, Worklist(matrix.height)) == 0
        assert_same_matrix(matrix, before)

    def test_spreads_change_beyond_seed(self):
        """Lowering one energy must reach every ancestor whose best path changes."""
        pixels = PixelBuffer(make_random_image(10, 10, seed=8))
        matrix = MinPathMatrix.build(pixels)

        matrix.energy[8 * 10 + 5] = 0.0
        worklist = Worklist(matrix.height)
        worklist.push(5, 8)
        relaxed = propagate_min_sums(matrix, worklist)

        assert relaxed > 1
        assert_dp_invariant(matrix)

    def test_each_cell_relaxed_once_per_row_pass(self):
        pixels = PixelBuffer(make_random_image(4, 6, seed=1))
        matrix = MinPathMatrix.build(pixels)
        worklist = Worklist(matrix.height)
        for _ in range(3):
            worklist.push(2, 1)
        assert propagate_min_sums(matrix, worklist) == 1


class TestIncrementalEquivalence:
    @pytest.mark.parametrize("H,W,seed", [(8, 12, 0), (15, 10, 1), (5, 20, 2), (3, 7, 3)])
    def test_matches_full_rebuild_over_many_seams(self, H, W, seed):
        matrix = MinPathMatrix.build(PixelBuffer(make_random_image(H, W, seed=seed)))
        for _ in range(W - 1):
            remove_and_repair(matrix, find_vertical_seam(matrix))
            assert_same_matrix(matrix, rebuilt(matrix))

    def test_matches_rebuild_for_arbitrary_seams(self):
        """Seams that are not optimal exercise pointers far from the minimum."""
        torch.manual_seed(42)
        matrix = MinPathMatrix.build(PixelBuffer(make_random_image(12, 14, seed=6)))
        for _ in range(6):
            seam = torch.zeros(matrix.height, dtype=torch.long)
            seam[0] = torch.randint(0, matrix.width, (1,)).item()
            for y in range(1, matrix.height):
                step = torch.randint(-1, 2, (1,)).item()
                seam[y] = min(max(seam[y - 1].item() + step, 0), matrix.width - 1)
            remove_and_repair(matrix, seam)
            assert_same_matrix(matrix, rebuilt(matrix))

    def test_band_image(self):
        matrix = MinPathMatrix.build(PixelBuffer(make_band_image(10, 12, 3, 8, seed=5)))
        for _ in range(8):
            remove_and_repair(matrix, find_vertical_seam(matrix))
            assert_same_matrix(matrix, rebuilt(matrix))
            assert_dp_invariant(matrix)

    def test_uniform_image(self):
        matrix = MinPathMatrix.build(PixelBuffer(make_uniform_image(6, 7)))
        for _ in range(6):
            remove_and_repair(matrix, find_vertical_seam(matrix))
            assert_same_matrix(matrix, rebuilt(matrix))

    def test_custom_border_energy(self):
        pixels = PixelBuffer(make_random_image(7, 9, seed=12))
        matrix = MinPathMatrix.build(pixels, border_energy=3.0)
        for _ in range(4):
            remove_and_repair(matrix, find_vertical_seam(matrix))
            assert_same_matrix(matrix, rebuilt(matrix))
