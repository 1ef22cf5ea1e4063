"""Shared test fixtures for the seam carving test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from seam_carver.pixels import PixelBuffer
from seam_carver.matrix import MinPathMatrix


@pytest.fixture
def uniform_3x3():
    """3x3 image of a single colour."""
    return PixelBuffer(make_uniform_image(3, 3, (40, 90, 200)))


@pytest.fixture
def random_pixels():
    """Seeded 8x12 random image."""
    return PixelBuffer(make_random_image(8, 12, seed=7))


def make_uniform_image(H, W, color=(128, 128, 128)):
    """Single-colour RGB image (3, H, W)."""
    return torch.tensor(color, dtype=torch.float64).view(3, 1, 1).expand(3, H, W).clone()


def make_random_image(H, W, seed=0):
    """Integer-valued random RGB image (3, H, W) in 0-255."""
    gen = torch.Generator().manual_seed(seed)
    return torch.randint(0, 256, (3, H, W), generator=gen).to(torch.float64)


def make_band_image(H, W, band_start, band_end, band_value=128, seed=0):
    """Random image with a constant-colour vertical band.

    Columns band_start..band_end (inclusive) are band_value on every channel,
    so the interior of the band has zero energy.
    """
    image = make_random_image(H, W, seed=seed)
    image[:, :, band_start:band_end + 1] = band_value
    return image


def assert_dp_invariant(matrix):
    """Every cell's sum is its energy plus the cheapest child's sum."""
    energy = matrix.field('energy')
    cum = matrix.field('cum_min_sum')
    best = matrix.field('best_child')
    H, W = energy.shape

    for x in range(W):
        assert cum[H - 1, x].item() == pytest.approx(energy[H - 1, x].item())
        assert best[H - 1, x].item() == -1

    for y in range(H - 1):
        for x in range(W):
            children = range(max(x - 1, 0), min(x + 1, W - 1) + 1)
            child_min = min(cum[y + 1, c].item() for c in children)
            assert cum[y, x].item() == pytest.approx(energy[y, x].item() + child_min), \
                f"Cell ({x}, {y}) breaks the DP invariant"
            assert cum[y + 1, best[y, x].item()].item() == pytest.approx(child_min)


def assert_same_matrix(actual, expected):
    """Two matrices hold the same fields."""
    assert (actual.width, actual.height) == (expected.width, expected.height)
    assert torch.allclose(actual.energy, expected.energy)
    assert torch.allclose(actual.cum_min_sum, expected.cum_min_sum)
    assert torch.equal(actual.best_child, expected.best_child)


def rebuilt(matrix):
    """Fresh matrix built from scratch over the same pixels."""
    return MinPathMatrix.build(matrix.pixels, matrix.border_energy)
