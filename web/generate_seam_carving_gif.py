#!/usr/bin/env python3
"""
Generate a GIF of seam carving: each frame shows the current image with the
seam about to be removed, padded back to the original width.
"""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import argparse
from PIL import Image

from seam_carver.carving import SeamCarver
from seam_carver.io import load_image, overlay_seam, to_pil


def make_frame(carver, seam, canvas_size, show_seams):
    tensor = carver.image()
    if show_seams:
        tensor = overlay_seam(tensor, seam)
    frame = Image.new('RGB', canvas_size, (0, 0, 0))
    frame.paste(to_pil(tensor), (0, 0))
    return frame


def generate_gif(image_path, n_seams, output_path, fps=10, every=1, show_seams=True):
    """
    Carve n_seams from an image and save the steps as a GIF.

    Args:
        image_path: Input image
        n_seams: Number of seams to remove
        output_path: Path to save the output GIF
        fps: Frames per second for the GIF
        every: Keep one frame per this many seams
        show_seams: If True, draw the next seam in red on each frame
    """
    image = load_image(image_path)
    carver = SeamCarver(image)
    canvas_size = (carver.width, carver.height)

    print(f"Generating GIF for {image_path} ({n_seams} seams)...")

    frames = []
    for step in range(n_seams):
        seam = carver.find_vertical_seam()
        if step % every == 0:
            frames.append(make_frame(carver, seam, canvas_size, show_seams))
        carver.remove_vertical_seam(seam)

        if (step + 1) % 25 == 0:
            print(f"  Processed step {step + 1}/{n_seams}")

    final = Image.new('RGB', canvas_size, (0, 0, 0))
    final.paste(to_pil(carver.image()), (0, 0))
    frames.append(final)

    duration = int(1000 / fps)

    print(f"Saving GIF to {output_path}...")
    frames[0].save(
        output_path,
        save_all=True,
        append_images=frames[1:],
        duration=duration,
        loop=0,
        optimize=False
    )

    print(f" GIF created successfully: {output_path}")
    print(f"  Frames: {len(frames)}, Duration: {len(frames) * duration / 1000:.1f}s")


def main():
    parser = argparse.ArgumentParser(
        description="Generate GIF of successive seam removals"
    )
    parser.add_argument('image', type=str, help='Input image path')
    parser.add_argument(
        '--seams',
        type=int,
        default=50,
        help='Number of seams to remove (default: 50)'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Output GIF filename (default: {image_name}.gif)'
    )
    parser.add_argument(
        '--fps',
        type=int,
        default=10,
        help='Frames per second (default: 10)'
    )
    parser.add_argument(
        '--every',
        type=int,
        default=1,
        help='Keep one frame every N seams (default: 1)'
    )
    parser.add_argument(
        '--clean',
        action='store_true',
        help='Do not draw seams on the frames'
    )

    args = parser.parse_args()

    output = args.output or os.path.splitext(os.path.basename(args.image))[0] + '.gif'
    try:
        generate_gif(args.image, args.seams, output, args.fps, args.every,
                     show_seams=not args.clean)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
