"""
Visualize the energy map, the cumulative min-path sums and the first seam
of an image, followed by the carved result.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import argparse

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from seam_carver.carving import SeamCarver
from seam_carver.io import load_image, overlay_seam


def to_display(tensor):
    """(3, H, W) 0-255 tensor to an (H, W, 3) array in [0, 1] for imshow."""
    return (tensor.permute(1, 2, 0) / 255.0).clamp(0, 1).numpy()


def main():
    parser = argparse.ArgumentParser(description='Plot seam carving internals')
    parser.add_argument('image', help='Input image path')
    parser.add_argument('-n', '--seams', type=int, default=20, help='Seams to remove')
    parser.add_argument('-o', '--output', default='energy_panels.png', help='Figure path')
    args = parser.parse_args()

    image = load_image(args.image)
    carver = SeamCarver(image)

    energy = carver.matrix.field('energy').clone()
    cum_min_sum = carver.matrix.field('cum_min_sum').clone()
    seam = carver.find_vertical_seam()

    carver.carve(args.seams)
    carved = carver.image()

    fig, axes = plt.subplots(1, 4, figsize=(20, 5))

    axes[0].imshow(to_display(overlay_seam(image, seam)))
    axes[0].set_title(f'Original ({image.shape[2]}×{image.shape[1]}) + first seam', fontsize=12)
    axes[0].axis('off')

    axes[1].imshow(energy.numpy(), cmap='magma')
    axes[1].set_title('Dual-gradient energy', fontsize=12)
    axes[1].axis('off')

    axes[2].imshow(cum_min_sum.numpy(), cmap='viridis')
    axes[2].set_title('Cumulative min sum (to bottom row)', fontsize=12)
    axes[2].axis('off')

    axes[3].imshow(to_display(carved))
    axes[3].set_title(f'Carved ({carved.shape[2]}×{carved.shape[1]})', fontsize=12)
    axes[3].axis('off')

    plt.tight_layout()
    plt.savefig(args.output, dpi=150, bbox_inches='tight')
    print(f"  Saved: {args.output}")


if __name__ == '__main__':
    main()
