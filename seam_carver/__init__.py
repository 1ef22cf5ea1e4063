"""
Content-aware image narrowing by seam carving.

The min-path matrix is built once and then repaired locally after every
seam removal, instead of being recomputed for the whole image.
"""

__version__ = "0.1.0"

from .pixels import PixelBuffer, PixelIndexError
from .energy import BORDER_ENERGY, pixel_energy, dual_gradient_energy
from .matrix import MinPathMatrix, EnergyCell
from .seam import InvalidSeamError, find_vertical_seam, validate_seam, remove_seam
from .reenergize import Worklist, recompute_local_energies, propagate_min_sums
from .carving import SeamCarver, carve_image_incremental
from .debug import render_field, render_pixels

__all__ = [
    'PixelBuffer',
    'PixelIndexError',
    'BORDER_ENERGY',
    'pixel_energy',
    'dual_gradient_energy',
    'MinPathMatrix',
    'EnergyCell',
    'InvalidSeamError',
    'find_vertical_seam',
    'validate_seam',
    'remove_seam',
    'Worklist',
    'recompute_local_energies',
    'propagate_min_sums',
    'SeamCarver',
    'carve_image_incremental',
    'render_field',
    'render_pixels',
]
