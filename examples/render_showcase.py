#!/usr/bin/env python3
"""Render the showcase scene.

This script renders the showcase scene pixel by pixel, the way an
interactive host would: the renderer is advanced a fixed number of pixels
per "tick" until the frame completes, then the raster is saved as a PNG.

Usage:
    python -m examples.render_showcase [options]

Options:
    --width WIDTH               Image width in pixels (default: 640)
    --height HEIGHT             Image height in pixels (default: 480)
    --supersample N             Sub-samples per pixel axis (default: 1)
    --pixels-per-tick N         Pixels rendered per progress update (default: 640)
    --output OUTPUT             Output file path (default: showcase.png)
    --torus                     Add the torus ring (slower)
    --log-level LEVEL           Logging level (default: INFO)

Example:
    python -m examples.render_showcase --width 320 --height 240 --supersample 2
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_showcase")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the showcase scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--supersample",
        type=int,
        default=1,
        help="Sub-samples per pixel axis (default: 1)",
    )
    parser.add_argument(
        "--pixels-per-tick",
        type=int,
        default=640,
        help="Pixels rendered per progress update (default: 640)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="showcase.png",
        help="Output file path (default: showcase.png)",
    )
    parser.add_argument(
        "--torus",
        action="store_true",
        help="Add the torus ring around the mirror sphere",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser.parse_args()


def render_showcase(
    width: int = 640,
    height: int = 480,
    supersample: int = 1,
    pixels_per_tick: int = 640,
    output_path: str = "showcase.png",
    include_torus: bool = False,
) -> Path:
    """Render the showcase scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        supersample: Sub-samples per pixel axis.
        pixels_per_tick: Pixels to render between progress updates.
        output_path: Output file path (PNG).
        include_torus: Whether to add the torus to the scene.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.progressive import ProgressiveRenderer
    from whitted.core.raster import Raster
    from whitted.preview.export import save_png
    from whitted.scene.showcase import ShowcaseParams, create_showcase_scene

    logger.info("Creating showcase scene (%dx%d)", width, height)
    manager, camera = create_showcase_scene(ShowcaseParams(include_torus=include_torus))

    renderer = ProgressiveRenderer(
        manager.build(), camera, width, height, supersample=supersample
    )
    raster = Raster(width, height)

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        elapsed = time.time() - start_time
        rate = done / elapsed if elapsed > 0 else 0.0
        logger.info(
            "Progress: %d/%d pixels (%.1f%%) - %.0f px/s",
            done,
            total,
            100.0 * done / total,
            rate,
        )

    renderer.render(raster, batch_size=pixels_per_tick, callback=progress_callback)

    output_file = Path(output_path)
    save_png(raster, str(output_file))

    logger.info("Saved to: %s", output_file.absolute())
    logger.info("Total time: %.2fs", time.time() - start_time)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ti.init(arch=ti.cpu)

    try:
        render_showcase(
            width=args.width,
            height=args.height,
            supersample=args.supersample,
            pixels_per_tick=args.pixels_per_tick,
            output_path=args.output,
            include_torus=args.torus,
        )
        return 0
    except ValueError as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
