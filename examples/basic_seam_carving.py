"""
Basic seam carving example.

Narrows an image by removing vertical seams and saves the result together
with a copy of the original showing the first seam.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import argparse
import logging
import time

from seam_carver.carving import SeamCarver
from seam_carver.io import load_image, save_image, overlay_seam


def main():
    parser = argparse.ArgumentParser(description='Content-aware image narrowing')
    parser.add_argument('image', help='Input image path')
    parser.add_argument('-o', '--output', default='carved.png', help='Output image path')
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('-n', '--seams', type=int, help='Number of seams to remove')
    group.add_argument('-w', '--width', type=int, help='Target width')
    parser.add_argument('--seam-preview', help='Save the original with the first seam drawn in red')
    parser.add_argument('--full-rebuild', action='store_true',
                        help='Rebuild the whole matrix after every seam (slow reference path)')
    parser.add_argument('--border-energy', type=float, default=1000.0,
                        help='Energy of border pixels (default: 1000)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    print("Loading image...")
    image = load_image(args.image)
    C, H, W = image.shape
    print(f"Image shape: {C} x {H} x {W}")

    carver = SeamCarver(image, border_energy=args.border_energy,
                        incremental=not args.full_rebuild)

    if args.seam_preview:
        save_image(overlay_seam(image, carver.find_vertical_seam()), args.seam_preview)
        print(f"Saved: {args.seam_preview}")

    n_seams = args.seams if args.seams is not None else W - args.width
    print(f"Carving image (removing {n_seams} seams)...")
    start = time.perf_counter()
    carver.carve(n_seams)
    elapsed = time.perf_counter() - start
    print(f"  Done in {elapsed:.2f}s, size: {carver.width} x {carver.height}")

    save_image(carver.image(), args.output)
    print(f"Saved: {args.output}")


if __name__ == '__main__':
    main()
