#!/usr/bin/env python3
"""Render six views of a matte cube.

Each view places a 4x4x4 cube in front of the camera at a different distance
and orientation, lit by a single point light above and to the left, and
writes it to cuboid_<n>.png in the output directory.

Usage:
    python -m examples.render_cubes [options]

Options:
    --width WIDTH       Image width in pixels (default: 300)
    --height HEIGHT     Image height in pixels (default: 300)
    --zoom ZOOM         Camera zoom factor (default: 3.0)
    --anti-alias N      Samples per pixel along each axis (default: 2)
    --output-dir DIR    Directory for the PNG files (default: output)
    --only N            Render only view N (1-6)
    --resolve           Average ambiguous samples instead of aborting
    --debug-pixel I J   Log the traces through output pixel (I, J)
    --quiet             Suppress progress output

Example:
    python -m examples.render_cubes --width 150 --height 150 --only 3
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

# (distance, rotate_x degrees, rotate_y degrees) for each view
CUBE_VIEWS = [
    (50.0, -115.0, 22.0),
    (50.0, -115.0, -22.0),
    (20.0, -90.0, 22.0),
    (55.0, -115.0, 122.0),
    (20.0, 21.0, 22.0),
    (65.0, -35.0, 122.0),
]


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render six views of a matte cube.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=300, help="Image width in pixels (default: 300)")
    parser.add_argument("--height", type=int, default=300, help="Image height in pixels (default: 300)")
    parser.add_argument("--zoom", type=float, default=3.0, help="Camera zoom factor (default: 3.0)")
    parser.add_argument(
        "--anti-alias",
        type=int,
        default=2,
        help="Samples per pixel along each axis (default: 2)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Directory for the PNG files (default: output)",
    )
    parser.add_argument(
        "--only",
        type=int,
        choices=range(1, len(CUBE_VIEWS) + 1),
        help="Render only this view",
    )
    parser.add_argument(
        "--resolve",
        action="store_true",
        help="Average ambiguous samples instead of aborting",
    )
    parser.add_argument(
        "--debug-pixel",
        type=int,
        nargs=2,
        metavar=("I", "J"),
        help="Log the traces through output pixel (I, J)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def build_cube_scene(distance: float, rotate_x: float, rotate_y: float, resolve: bool = False):
    """Create a scene holding one rotated cube and one light."""
    from csgtracer.core.config import RenderConfig
    from csgtracer.core.vector import Color, Vector
    from csgtracer.geometry.cuboid import Cuboid
    from csgtracer.scene.manager import LightSource, Scene

    config = RenderConfig(ambiguity_policy="resolve" if resolve else "raise")
    scene = Scene(Color(0.0, 0.0, 0.0), config)

    cube = Cuboid(2.0, 2.0, 2.0)
    cube.set_full_matte(Color(0.7, 0.7, 0.8))
    cube.move(0.0, 0.0, -distance)
    cube.rotate_x(rotate_x)
    cube.rotate_y(rotate_y)

    scene.add_solid_object(cube)
    scene.add_light_source(LightSource(Vector(-5.0, 50.0, +20.0), Color(0.7, 0.7, 0.7)))
    return scene


def render_cubes(args: argparse.Namespace) -> list[Path]:
    """Render the requested views and return the written paths."""
    from csgtracer.preview.export import save_png

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    views = range(1, len(CUBE_VIEWS) + 1) if args.only is None else [args.only]
    written = []
    for index in views:
        scene = build_cube_scene(*CUBE_VIEWS[index - 1], resolve=args.resolve)
        if args.debug_pixel is not None:
            scene.add_debug_point(*args.debug_pixel)

        def progress_callback(current: int, target: int, index: int = index) -> None:
            if not args.quiet:
                print(f"\r  View {index}: row {current}/{target}", end="", flush=True)

        start_time = time.time()
        image = scene.render(args.width, args.height, args.zoom, args.anti_alias, progress_callback)
        if not args.quiet:
            print()

        output_file = output_dir / f"cuboid_{index}.png"
        save_png(image, str(output_file))
        written.append(output_file)
        if not args.quiet:
            print(f"Saved to: {output_file.absolute()} ({time.time() - start_time:.2f}s)")

    return written


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Image buffers are float64, which the CPU backend always supports
    ti.init(arch=ti.cpu, default_fp=ti.f64)

    from csgtracer.core.errors import ImagerError
    from csgtracer.logging_config import configure_logging

    if args.debug_pixel is not None:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging(logging.INFO)

    try:
        render_cubes(args)
        return 0
    except ImagerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
