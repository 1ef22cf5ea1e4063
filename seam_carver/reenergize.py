"""
Incremental repair of the min-path matrix after a seam removal.

Removing a seam only changes the energy of pixels whose neighbourhood
touched the removed pixels, i.e. a few columns around the seam on each
row. Those pixels are re-energised and then their cum_min_sum changes are
pushed upwards, row by row, through every parent whose optimal path might
pass through them. Everything else keeps its shifted values.
"""

import logging
from collections import deque

import torch

from .matrix import MinPathMatrix

logger = logging.getLogger(__name__)

# Columns either side of the seam whose energy can change
ENERGY_RADIUS = 2


class Worklist:
    """
    Pending (x, y) cells, one FIFO of columns per row.

    Cells are drained strictly from the bottom row upwards, so a pixel is
    always relaxed after every pending pixel of the row below it.
    """

    def __init__(self, height: int):
        self._rows = [deque() for _ in range(height)]

    def push(self, x: int, y: int):
        self._rows[y].append(x)

    def row(self, y: int) -> deque:
        return self._rows[y]

    def __len__(self):
        return sum(len(q) for q in self._rows)

    def __iter__(self):
        """Pending cells as (x, y), bottom row first."""
        for y in range(len(self._rows) - 1, -1, -1):
            for x in self._rows[y]:
                yield x, y


def recompute_local_energies(matrix: MinPathMatrix, seam: torch.Tensor,
                             radius: int = ENERGY_RADIUS) -> Worklist:
    """
    Recompute the energy of the pixels around a just-removed seam.

    For every row except the bottom one (whose pixels are all border
    pixels), columns seam[row] - radius .. seam[row] + radius, clipped to
    the new width, get fresh energies. Only energy is updated; the sums
    are left to propagate_min_sums().

    Args:
        matrix: Matrix already narrowed by remove_seam()
        seam: The removed seam, in the coordinates it had before removal
        radius: Columns to refresh on each side of the seam

    Returns:
        Worklist of the touched cells, seeded bottom row first
    """
    seam = torch.as_tensor(seam)
    worklist = Worklist(matrix.height)

    for y in range(matrix.height - 2, -1, -1):
        col = seam[y].item()
        for x in range(max(col - radius, 0), min(col + radius, matrix.width - 1) + 1):
            matrix.recalculate_energy(x, y)
            worklist.push(x, y)

    return worklist


def propagate_min_sums(matrix: MinPathMatrix, worklist: Worklist) -> int:
    """
    Relax queued cells and spread any cum_min_sum change to their parents.

    Rows are drained bottom-up. Within a row, cells leave the queue in FIFO
    order and a single row-sized seen array skips duplicates. A cell whose
    sum changed enqueues its up to three parents on the row above. Since
    every dependency points to the row below, each row is final before the
    row above reads it and the result matches a full rebuild.

    Args:
        matrix: Matrix with refreshed local energies
        worklist: Cells to relax, usually from recompute_local_energies()

    Returns:
        Number of cells relaxed
    """
    seen = torch.zeros(matrix.width, dtype=torch.bool)
    relaxed = 0

    for y in range(matrix.height - 1, -1, -1):
        queue = worklist.row(y)
        if not queue:
            continue

        seen.zero_()
        while queue:
            x = queue.popleft()
            if seen[x]:
                continue
            seen[x] = True
            relaxed += 1

            if matrix.relax(x, y) and y > 0:
                for parent in range(max(x - 1, 0), min(x + 1, matrix.width - 1) + 1):
                    worklist.push(parent, y - 1)

    logger.debug("Relaxed %d cells", relaxed)
    return relaxed
