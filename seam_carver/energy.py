"""
Energy functions for seam carving.

The energy function determines which pixels are "important".
Low-energy seams are preferred for removal.

We use the dual-gradient energy: the Euclidean norm of the colour
differences across the horizontal and vertical neighbour pairs,

    E(x, y) = sqrt(sum_c (P(x+1,y,c) - P(x-1,y,c))^2
                 + sum_c (P(x,y+1,c) - P(x,y-1,c))^2)

Pixels on the image border have no full neighbourhood and get a fixed
BORDER_ENERGY instead, so border columns are the last to be carved.
"""

import torch

from .pixels import PixelBuffer

BORDER_ENERGY = 1000.0


def pixel_energy(pixels: PixelBuffer, x: int, y: int,
                 border_energy: float = BORDER_ENERGY) -> float:
    """
    Dual-gradient energy of a single pixel.

    Args:
        pixels: Pixel buffer
        x, y: Column and row, must lie inside the image
        border_energy: Value returned for border pixels

    Returns:
        Energy as a Python float
    """
    pixels.check(x, y)
    if pixels.is_border(x, y):
        return border_energy

    p = pixels.data
    dx = p[:, y, x + 1] - p[:, y, x - 1]
    dy = p[:, y + 1, x] - p[:, y - 1, x]
    return torch.sqrt((dx * dx).sum() + (dy * dy).sum()).item()


def dual_gradient_energy(pixels: PixelBuffer,
                         border_energy: float = BORDER_ENERGY) -> torch.Tensor:
    """
    Dual-gradient energy for every pixel at once.

    Same values as calling pixel_energy on each coordinate, computed with
    shifted slices of the image.

    Args:
        pixels: Pixel buffer
        border_energy: Value assigned to border pixels

    Returns:
        Energy map (H, W), float64
    """
    p = pixels.data
    H, W = pixels.height, pixels.width

    energy = torch.full((H, W), border_energy, dtype=torch.float64)
    if H < 3 or W < 3:
        # Every pixel touches the border
        return energy

    dx = p[:, 1:-1, 2:] - p[:, 1:-1, :-2]
    dy = p[:, 2:, 1:-1] - p[:, :-2, 1:-1]
    energy[1:-1, 1:-1] = torch.sqrt((dx * dx).sum(dim=0) + (dy * dy).sum(dim=0))

    return energy
