"""
Minimum-path matrix for vertical seam carving.

For every pixel the matrix stores three values:
- energy: the pixel's own energy
- cum_min_sum: the smallest total energy of any connected path from the
  pixel down to the bottom row
- best_child: the column in the row below that continues that path
  (-1 on the bottom row)

The values live in three parallel flat tensors indexed by y * width + x
rather than one object per cell.
"""

import logging
from collections import namedtuple

import torch

from .energy import BORDER_ENERGY, dual_gradient_energy, pixel_energy
from .pixels import PixelBuffer, PixelIndexError

logger = logging.getLogger(__name__)

NO_CHILD = -1

FIELDS = ('energy', 'cum_min_sum', 'best_child')

EnergyCell = namedtuple('EnergyCell', ['energy', 'cum_min_sum', 'best_child'])


class MinPathMatrix:
    """
    Bottom-up dynamic program over a pixel buffer.

    Row y depends only on row y + 1, so construction runs from the bottom
    row up. Single cells can be recomputed with recalculate() once the row
    below them is final.
    """

    def __init__(self, pixels: PixelBuffer, border_energy: float = BORDER_ENERGY):
        self.pixels = pixels
        self.border_energy = border_energy
        self.width = pixels.width
        self.height = pixels.height

        n = self.width * self.height
        self.energy = torch.zeros(n, dtype=torch.float64)
        self.cum_min_sum = torch.zeros(n, dtype=torch.float64)
        self.best_child = torch.full((n,), NO_CHILD, dtype=torch.long)

    @classmethod
    def build(cls, pixels: PixelBuffer, border_energy: float = BORDER_ENERGY) -> 'MinPathMatrix':
        matrix = cls(pixels, border_energy)
        matrix.build_full()
        return matrix

    def index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelIndexError(
                f"Cell ({x}, {y}) out of bounds for {self.width}x{self.height} matrix")
        return y * self.width + x

    def cell(self, x: int, y: int) -> EnergyCell:
        i = self.index(x, y)
        return EnergyCell(self.energy[i].item(), self.cum_min_sum[i].item(),
                          self.best_child[i].item())

    def field(self, name: str) -> torch.Tensor:
        """(H, W) view of one of the stored fields."""
        if name not in FIELDS:
            raise ValueError(f"Unknown field: {name!r}. Must be one of {FIELDS}")
        return getattr(self, name).view(self.height, self.width)

    def _min_child(self, x: int, y: int):
        """Column and cum_min_sum of the cheapest child of (x, y).

        Children are (x-1, y+1), (x, y+1), (x+1, y+1) clipped to the image.
        Ties go to the first one examined: left, then centre, then right.
        """
        left = max(x - 1, 0)
        right = min(x + 1, self.width - 1)
        base = (y + 1) * self.width
        sums = self.cum_min_sum[base + left:base + right + 1].tolist()

        best_col = left
        best_sum = sums[0]
        for offset in range(1, len(sums)):
            if sums[offset] < best_sum:
                best_sum = sums[offset]
                best_col = left + offset
        return best_col, best_sum

    def recalculate_energy(self, x: int, y: int) -> float:
        """Recompute only the energy of (x, y) from the current pixels."""
        i = self.index(x, y)
        e = pixel_energy(self.pixels, x, y, self.border_energy)
        self.energy[i] = e
        return e

    def relax(self, x: int, y: int) -> bool:
        """
        Recompute cum_min_sum and best_child of (x, y) from its stored
        energy and the row below.

        Returns:
            True if cum_min_sum changed
        """
        i = self.index(x, y)
        e = self.energy[i].item()
        old = self.cum_min_sum[i].item()

        if y == self.height - 1:
            new = e
            self.best_child[i] = NO_CHILD
        else:
            col, child_sum = self._min_child(x, y)
            new = e + child_sum
            self.best_child[i] = col

        self.cum_min_sum[i] = new
        return new != old

    def recalculate(self, x: int, y: int) -> EnergyCell:
        """
        Recompute every field of (x, y), assuming row y + 1 is final.
        """
        self.recalculate_energy(x, y)
        self.relax(x, y)
        return self.cell(x, y)

    def build_full(self):
        """
        Fill the whole matrix, bottom row first.

        Rows must be processed in reverse order since each depends on the
        one below. Within a row the columns are independent, so a row is
        computed in one vectorised step with the same tie-breaking as
        recalculate().
        """
        H, W = self.height, self.width
        logger.debug("Building %dx%d min-path matrix", W, H)

        energy = dual_gradient_energy(self.pixels, self.border_energy)
        cum = torch.empty_like(energy)
        best = torch.full((H, W), NO_CHILD, dtype=torch.long)

        cum[H - 1] = energy[H - 1]
        cols = torch.arange(W)

        for y in range(H - 2, -1, -1):
            below = cum[y + 1]
            from_left = torch.full((W,), float('inf'), dtype=torch.float64)
            from_left[1:] = below[:-1]
            from_right = torch.full((W,), float('inf'), dtype=torch.float64)
            from_right[:-1] = below[1:]

            # argmin returns the first minimum, giving left > centre > right
            candidates = torch.stack([from_left, below, from_right])
            choice = torch.argmin(candidates, dim=0)
            child_sum = candidates.gather(0, choice.unsqueeze(0)).squeeze(0)

            cum[y] = energy[y] + child_sum
            best[y] = cols + choice - 1

        self.energy = energy.reshape(-1)
        self.cum_min_sum = cum.reshape(-1)
        self.best_child = best.reshape(-1)

    def without_seam(self, seam: torch.Tensor):
        """
        Field tensors with the seam's cell removed from every row.

        Cells right of the seam move one column left. A best_child pointer
        at or past the removed column of the row below is decremented so it
        keeps naming the same pixel; pointers left of it are untouched.
        The matrix itself is not modified.

        Returns:
            (energy, cum_min_sum, best_child) flat tensors of width - 1
        """
        H, W = self.height, self.width
        keep = torch.ones(H, W, dtype=torch.bool)
        keep[torch.arange(H), seam] = False

        energy = self.field('energy')[keep].reshape(H, W - 1)
        cum = self.field('cum_min_sum')[keep].reshape(H, W - 1)
        best = self.field('best_child')[keep].reshape(H, W - 1).clone()

        if H > 1:
            removed_below = seam[1:].unsqueeze(1)
            best[:-1] -= (best[:-1] >= removed_below).long()

        return energy.reshape(-1), cum.reshape(-1), best.reshape(-1)

    def adopt(self, pixels: PixelBuffer, energy: torch.Tensor,
              cum_min_sum: torch.Tensor, best_child: torch.Tensor):
        """Swap in a new buffer and matching field tensors together."""
        n = pixels.width * pixels.height
        if not (energy.numel() == cum_min_sum.numel() == best_child.numel() == n):
            raise ValueError("Field tensors do not match the pixel buffer size")

        self.pixels = pixels
        self.energy = energy
        self.cum_min_sum = cum_min_sum
        self.best_child = best_child
        self.width = pixels.width
        self.height = pixels.height

    def copy(self) -> 'MinPathMatrix':
        other = MinPathMatrix(self.pixels, self.border_energy)
        other.energy = self.energy.clone()
        other.cum_min_sum = self.cum_min_sum.clone()
        other.best_child = self.best_child.clone()
        return other

    def __repr__(self):
        return f"MinPathMatrix(width={self.width}, height={self.height})"
