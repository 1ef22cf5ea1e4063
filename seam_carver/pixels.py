"""
RGB pixel storage for seam carving.

The buffer keeps the image channel-first, (C, H, W), the same layout the
energy and seam functions work on. Samples are stored as float64 in the
0-255 range so gradient differences are exact.
"""

import torch
from typing import Tuple


class PixelIndexError(IndexError):
    """Raised when a coordinate falls outside the pixel grid."""


class PixelBuffer:
    """
    Width x height grid of RGB samples.

    Coordinates are (x, y) with x the column and y the row, matching the
    way seams are indexed (one column per row).
    """

    def __init__(self, data: torch.Tensor):
        """
        Args:
            data: RGB tensor (3, H, W). Integer or float samples in 0-255.
        """
        if data.dim() != 3 or data.shape[0] != 3:
            raise ValueError(f"Expected an RGB tensor of shape (3, H, W), got {tuple(data.shape)}")
        if data.shape[1] == 0 or data.shape[2] == 0:
            raise ValueError(f"Image must be at least 1x1, got {data.shape[2]}x{data.shape[1]}")

        self.data = data.to(torch.float64).contiguous()

    @classmethod
    def from_rows(cls, rows):
        """
        Build a buffer from nested rows of (r, g, b) tuples.

        Handy for small hand-written test images:
            PixelBuffer.from_rows([[(0, 0, 0), (255, 255, 255)]])
        """
        hwc = torch.tensor(rows, dtype=torch.float64)
        if hwc.dim() != 3 or hwc.shape[2] != 3:
            raise ValueError("Rows must be a rectangular grid of (r, g, b) triples")
        return cls(hwc.permute(2, 0, 1))

    @property
    def height(self) -> int:
        return self.data.shape[1]

    @property
    def width(self) -> int:
        return self.data.shape[2]

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)"""
        return self.height, self.width

    def in_range(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_border(self, x: int, y: int) -> bool:
        return x <= 0 or y <= 0 or x >= self.width - 1 or y >= self.height - 1

    def check(self, x: int, y: int):
        if not self.in_range(x, y):
            raise PixelIndexError(
                f"Pixel ({x}, {y}) out of bounds for {self.width}x{self.height} image")

    def channel(self, x: int, y: int, c: int) -> float:
        """Single sample at (x, y) for channel c (0=R, 1=G, 2=B)."""
        self.check(x, y)
        if not 0 <= c < 3:
            raise PixelIndexError(f"Channel {c} out of range")
        return self.data[c, y, x].item()

    def rgb(self, x: int, y: int) -> torch.Tensor:
        """The three samples at (x, y) as a (3,) tensor."""
        self.check(x, y)
        return self.data[:, y, x]

    def without_seam(self, seam: torch.Tensor) -> 'PixelBuffer':
        """
        New buffer of width - 1 with one pixel per row removed.

        Columns left of seam[row] are copied unchanged, columns after it
        move one position left. The seam must already be validated.
        """
        C, H, W = self.data.shape
        carved = torch.empty(C, H, W - 1, dtype=self.data.dtype)

        for i in range(H):
            col = seam[i].item()
            carved[:, i, :col] = self.data[:, i, :col]
            carved[:, i, col:] = self.data[:, i, col + 1:]

        return PixelBuffer(carved)

    def clone(self) -> 'PixelBuffer':
        return PixelBuffer(self.data.clone())

    def __repr__(self):
        return f"PixelBuffer(width={self.width}, height={self.height})"
