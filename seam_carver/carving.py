"""
High-level carving session that ties the pieces together.

A SeamCarver owns one pixel buffer and the min-path matrix built over it.
Each seam removal is one transaction: find the seam, drop it from both
structures, then repair the matrix around it.
"""

import logging
from typing import List, Union

import torch

from .debug import render_field, render_pixels
from .energy import BORDER_ENERGY
from .matrix import MinPathMatrix
from .pixels import PixelBuffer
from .reenergize import propagate_min_sums, recompute_local_energies
from .seam import find_vertical_seam, remove_seam

logger = logging.getLogger(__name__)


class SeamCarver:
    """
    Removes low-energy vertical seams from an RGB image.

    Args:
        image: PixelBuffer or RGB tensor (3, H, W) with samples in 0-255
        border_energy: Energy assigned to border pixels
        incremental: Repair the matrix locally after each removal. When
            False the matrix is rebuilt from scratch instead, which is
            slower but useful as a reference.
    """

    def __init__(self, image: Union[PixelBuffer, torch.Tensor],
                 border_energy: float = BORDER_ENERGY,
                 incremental: bool = True):
        if isinstance(image, PixelBuffer):
            pixels = image.clone()
        else:
            pixels = PixelBuffer(image)

        self.incremental = incremental

        logger.info("Calculating energy matrix for %dx%d image", pixels.width, pixels.height)
        self.matrix = MinPathMatrix.build(pixels, border_energy)
        logger.info("Energy matrix done")

    @property
    def pixels(self) -> PixelBuffer:
        return self.matrix.pixels

    @property
    def width(self) -> int:
        return self.matrix.width

    @property
    def height(self) -> int:
        return self.matrix.height

    def find_vertical_seam(self) -> torch.Tensor:
        return find_vertical_seam(self.matrix)

    def remove_vertical_seam(self, seam: torch.Tensor):
        """
        Remove a seam and bring the matrix back to a consistent state.

        The seam is validated before anything changes.
        """
        seam = torch.as_tensor(seam)
        remove_seam(self.matrix, seam)

        if self.incremental:
            worklist = recompute_local_energies(self.matrix, seam)
            propagate_min_sums(self.matrix, worklist)
        else:
            self.matrix.build_full()

    def carve(self, n_seams: int) -> List[torch.Tensor]:
        """
        Remove n_seams seams one after another.

        Returns:
            The removed seams, each in the coordinates of the image it was
            removed from
        """
        if n_seams < 0 or n_seams >= self.width:
            raise ValueError(
                f"Can remove between 0 and {self.width - 1} seams, got {n_seams}")

        seams = []
        for i in range(n_seams):
            seam = self.find_vertical_seam()
            self.remove_vertical_seam(seam)
            seams.append(seam)

            if (i + 1) % 50 == 0:
                logger.debug("Removed %d/%d seams, width now %d", i + 1, n_seams, self.width)

        return seams

    def carve_to_width(self, width: int) -> List[torch.Tensor]:
        if width < 1 or width > self.width:
            raise ValueError(f"Target width must be in [1, {self.width}], got {width}")
        return self.carve(self.width - width)

    def image(self) -> torch.Tensor:
        """Current pixels as an RGB tensor (3, H, W)."""
        return self.pixels.data.clone()

    def to_string(self, field: str = 'rgb') -> str:
        """Text dump of the pixels ('rgb') or of a matrix field."""
        if field == 'rgb':
            return render_pixels(self.pixels)
        return render_field(self.matrix, field)


def carve_image_incremental(image: torch.Tensor, n_seams: int,
                            border_energy: float = BORDER_ENERGY) -> torch.Tensor:
    """
    Seam carving with incremental matrix repair.

    Args:
        image: RGB tensor (3, H, W), samples in 0-255
        n_seams: Number of vertical seams to remove, 0 <= n_seams < W
        border_energy: Energy assigned to border pixels

    Returns:
        Carved image (3, H, W - n_seams)
    """
    carver = SeamCarver(image, border_energy=border_energy)
    carver.carve(n_seams)
    return carver.image()
