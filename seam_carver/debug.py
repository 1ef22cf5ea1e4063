"""
Text dumps of carving state, for debugging and tests.

Every function here is pure: it reads a buffer or matrix and returns a
string with one line per image row and tab-separated cells. The format is
meant for eyeballing, not for parsing.
"""

from .matrix import FIELDS, NO_CHILD, MinPathMatrix
from .pixels import PixelBuffer

MISSING = '-----'


def rgb_to_num(red: int, green: int, blue: int) -> int:
    """Pack 8-bit channels into one 24-bit integer, red highest."""
    return (int(red) << 16) + (int(green) << 8) + int(blue)


def num_to_rgb(num: int):
    return (num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF


def render_pixels(pixels: PixelBuffer) -> str:
    """
    Each pixel as its packed RGB value divided by 100000, two decimals.

    Scaling keeps the columns narrow enough to line up with tabs.
    """
    rows = pixels.data.round().long().permute(1, 2, 0).tolist()
    lines = []
    for row in rows:
        lines.append(''.join(f"{rgb_to_num(*rgb) / 100000:.2f}\t" for rgb in row))
    return '\n'.join(lines) + '\n'


def render_field(matrix: MinPathMatrix, field: str) -> str:
    """
    One matrix field as a grid.

    Args:
        matrix: Min-path matrix
        field: 'energy', 'cum_min_sum' or 'best_child'

    Returns:
        Row-major grid; unset best_child entries show as '-----'
    """
    if field not in FIELDS:
        raise ValueError(f"Unknown field: {field!r}. Must be one of {FIELDS}")

    values = matrix.field(field).tolist()
    lines = []
    for row in values:
        if field == 'best_child':
            cells = [MISSING if v == NO_CHILD else str(v) for v in row]
        else:
            cells = [f"{v:.2f}" for v in row]
        lines.append(''.join(c + '\t' for c in cells))
    return '\n'.join(lines) + '\n'
