#!/usr/bin/env python3
"""Render a built-in scene to a PNG file.

Creates the scene and its camera, renders the frame with progressive
accumulation and writes an 8-bit RGBA PNG.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene NAME        Built-in scene: cornell or two_spheres (default: cornell)
    --width WIDTH       Image width in pixels (default: 200)
    --height HEIGHT     Image height in pixels (default: 200)
    --samples SAMPLES   Samples per pixel (default: 25)
    --depth DEPTH       Maximum scatter depth (default: 25)
    --gamma GAMMA       Display gamma (default: none, linear output)
    --jitter            Jitter samples inside each pixel
    --batch-size SIZE   Samples per progress update (default: 5)
    --output OUTPUT     Output file path (default: <scene>.png)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --seed SEED         Random seed (default: 42)
    --quiet             Suppress progress output
    --verbose           Log per-batch render details

Example:
    python examples/render_scene.py --scene cornell --samples 100 --gamma 2.2 --jitter
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a built-in scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=("cornell", "two_spheres"),
        default="cornell",
        help="Built-in scene to render (default: cornell)",
    )
    parser.add_argument("--width", type=int, default=200, help="Image width in pixels (default: 200)")
    parser.add_argument("--height", type=int, default=200, help="Image height in pixels (default: 200)")
    parser.add_argument("--samples", type=int, default=25, help="Samples per pixel (default: 25)")
    parser.add_argument("--depth", type=int, default=25, help="Maximum scatter depth (default: 25)")
    parser.add_argument("--gamma", type=float, default=None, help="Display gamma (default: linear)")
    parser.add_argument("--jitter", action="store_true", help="Jitter samples inside each pixel")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=5,
        help="Samples per progress update (default: 5)",
    )
    parser.add_argument("--output", type=str, default=None, help="Output file path")
    parser.add_argument("--arch", choices=("cpu", "gpu"), default="cpu", help="Taichi backend")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true", help="Log per-batch render details")
    return parser.parse_args(argv)


def render_scene(args: argparse.Namespace) -> Path:
    """Render the requested scene and save it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so that Taichi is initialized before fields are allocated
    from rayt.config import RenderConfig
    from rayt.core.progressive import ProgressiveRenderer
    from rayt.scene.builtin import build_camera, build_scene

    config = RenderConfig(
        width=args.width,
        height=args.height,
        samples_per_pixel=args.samples,
        max_depth=args.depth,
        gamma=args.gamma,
        jitter=args.jitter,
    )

    if not args.quiet:
        print(f"Creating {args.scene} scene ({config.width}x{config.height})...")
    scene = build_scene(args.scene)
    camera = build_camera(args.scene, aspect=config.aspect_ratio)

    renderer = ProgressiveRenderer(
        config.width,
        config.height,
        scene=scene,
        camera=camera,
        max_depth=config.max_depth,
        jitter=config.jitter,
    )

    if not args.quiet:
        print(f"Rendering {config.samples_per_pixel} samples per pixel...")
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not args.quiet:
            elapsed = time.time() - start_time
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples - {samples_per_sec:.1f} spp/s",
                end="",
                flush=True,
            )

    renderer.render(config.samples_per_pixel, batch_size=args.batch_size, callback=progress_callback)
    if not args.quiet:
        print()

    output_file = Path(args.output or f"{args.scene}.png")
    renderer.save_image(output_file, gamma=config.gamma)

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    ti.init(arch=arch, default_fp=ti.f64, random_seed=args.seed)

    try:
        render_scene(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
