"""
Seam extraction and removal.

A vertical seam is a (H,) tensor holding one column index per row, top to
bottom, with neighbouring rows at most one column apart.
"""

import torch

from .matrix import MinPathMatrix
from .pixels import PixelBuffer


class InvalidSeamError(ValueError):
    """Raised for a seam that cannot be removed from the current image."""


def find_vertical_seam(matrix: MinPathMatrix) -> torch.Tensor:
    """
    Backtrack the cheapest top-to-bottom path through a built matrix.

    Starts at the row 0 column with the smallest cum_min_sum (the first
    one on ties) and follows best_child down to the bottom row. Since the
    matrix holds the exact minimum for every pixel, the result is the
    globally optimal seam.

    Args:
        matrix: Fully built MinPathMatrix

    Returns:
        Seam indices (H,) with column index per row
    """
    H, W = matrix.height, matrix.width
    seam = torch.zeros(H, dtype=torch.long)

    # argmin returns the first minimal value
    col = torch.argmin(matrix.cum_min_sum[:W]).item()
    seam[0] = col

    best_child = matrix.field('best_child')
    for y in range(1, H):
        col = best_child[y - 1, col].item()
        seam[y] = col

    return seam


def validate_seam(seam: torch.Tensor, width: int, height: int):
    """
    Check a vertical seam against the image dimensions.

    Raises:
        InvalidSeamError: wrong length, column out of range, or a step of
            more than one column between consecutive rows
    """
    seam = torch.as_tensor(seam)
    if seam.dim() != 1 or seam.shape[0] != height:
        raise InvalidSeamError(
            f"Seam length {tuple(seam.shape)} does not match image height {height}")
    if seam.dtype.is_floating_point:
        raise InvalidSeamError(f"Seam must hold integer columns, got {seam.dtype}")

    bad = (seam < 0) | (seam >= width)
    if bad.any():
        row = torch.nonzero(bad)[0].item()
        raise InvalidSeamError(
            f"Seam column {seam[row].item()} at row {row} outside [0, {width})")

    if height > 1:
        steps = torch.abs(seam[1:] - seam[:-1])
        if steps.max() > 1:
            row = torch.nonzero(steps > 1)[0].item() + 1
            raise InvalidSeamError(
                f"Seam jumps from column {seam[row - 1].item()} to "
                f"{seam[row].item()} at row {row}")


def remove_seam(matrix: MinPathMatrix, seam: torch.Tensor) -> PixelBuffer:
    """
    Remove a vertical seam from the matrix and its pixel buffer together.

    Both the new buffer and the shifted field tensors are built before
    anything is swapped into the matrix, so a failure leaves the matrix
    untouched. After this call the cum_min_sum values near the seam are
    stale until recompute_local_energies() and propagate_min_sums() run.

    Args:
        matrix: Built MinPathMatrix; its pixels are replaced
        seam: Seam indices (H,)

    Returns:
        The new, narrower pixel buffer (also set as matrix.pixels)
    """
    if matrix.width <= 1:
        raise InvalidSeamError("Cannot remove a seam from a 1-pixel-wide image")
    seam = torch.as_tensor(seam)
    validate_seam(seam, matrix.width, matrix.height)
    seam = seam.long()

    pixels = matrix.pixels.without_seam(seam)
    energy, cum_min_sum, best_child = matrix.without_seam(seam)
    matrix.adopt(pixels, energy, cum_min_sum, best_child)

    return pixels
