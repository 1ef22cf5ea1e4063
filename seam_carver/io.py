"""
Pixel source and sink adapters.

Conversion between Pillow images / files and the (3, H, W) tensors the
carver works on. Samples stay in the 0-255 range throughout.
"""

import logging
from typing import Sequence

import numpy as np
import torch
from PIL import Image

logger = logging.getLogger(__name__)


def from_pil(img: Image.Image) -> torch.Tensor:
    """Convert a Pillow image to an RGB tensor (3, H, W), float64."""
    img_array = np.array(img.convert('RGB'), dtype=np.float64)
    return torch.from_numpy(img_array).permute(2, 0, 1).contiguous()


def to_pil(tensor: torch.Tensor) -> Image.Image:
    """Convert an RGB tensor (3, H, W) with samples in 0-255 to a Pillow image."""
    img_array = tensor.permute(1, 2, 0).cpu().numpy()
    img_array = img_array.round().clip(0, 255).astype(np.uint8)
    return Image.fromarray(img_array)


def load_image(path: str) -> torch.Tensor:
    """Load an image file as an RGB tensor (3, H, W)."""
    with Image.open(path) as img:
        tensor = from_pil(img)
    logger.debug("Loaded %s (%d x %d)", path, tensor.shape[2], tensor.shape[1])
    return tensor


def save_image(tensor: torch.Tensor, path: str):
    """Save an RGB tensor (3, H, W) to an image file."""
    to_pil(tensor).save(path)
    logger.debug("Saved %s", path)


def overlay_seam(image: torch.Tensor, seam: torch.Tensor,
                 color: Sequence[float] = (255.0, 0.0, 0.0)) -> torch.Tensor:
    """Copy of the image with the seam's pixels painted in one colour."""
    img_vis = image.clone()
    paint = torch.tensor(color, dtype=image.dtype, device=image.device)
    for row, col in enumerate(seam.tolist()):
        img_vis[:, row, col] = paint
    return img_vis
