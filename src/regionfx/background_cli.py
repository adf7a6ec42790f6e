"""CLI for background compositing.

Usage:
    regionfx background -i in.mp4 -o out.mp4 -W 1920 -H 1080 --padding 10
    regionfx background -i in.mp4 -o out.mp4 -W 1920 -H 1080 --type image --image wall.png
    regionfx background ... --border-radius 24 --mask-preview mask.png
"""

import argparse

from PIL import Image

from .background import (
    build_background_command,
    corner_alpha_mask,
    generate_background_filter,
    padding_pixels,
)
from .common import validate_color
from .config import VALID_BACKGROUND_TYPES
from .pipeline import PipelineStep
from .regions import BackgroundConfig
from .runner import execute_plan


def save_mask_preview(config: BackgroundConfig, width: int, height: int, path: str) -> None:
    """Write the foreground's rounded-corner alpha mask as a grayscale PNG."""
    pad_px = padding_pixels(config.padding, width, height)
    mask = corner_alpha_mask(width - 2 * pad_px, height - 2 * pad_px, config.border_radius)
    Image.fromarray(mask).save(path)


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="regionfx background",
        description="Composite a video onto a color, blurred, image or gradient background.",
    )
    parser.add_argument("-i", "--input", required=True, help="Input video path")
    parser.add_argument("-o", "--output", help="Output video path")
    parser.add_argument("-W", "--width", type=int, required=True, help="Video width")
    parser.add_argument("-H", "--height", type=int, required=True, help="Video height")
    parser.add_argument(
        "-t", "--type", default="color", choices=sorted(VALID_BACKGROUND_TYPES),
        help="Background type (default: color)",
    )
    parser.add_argument("-c", "--color", default="#1a1a2e", help="Background color")
    parser.add_argument("--blur-radius", type=int, default=20, help="Blur radius for blur type")
    parser.add_argument("--image", default=None, help="Background image path")
    parser.add_argument("-p", "--padding", type=float, default=10, help="Padding percent (0-100)")
    parser.add_argument("--border-radius", type=int, default=0, help="Corner radius in pixels")
    parser.add_argument("--filter-only", action="store_true", help="Only print the filter string")
    parser.add_argument("--dry-run", action="store_true", help="Print the ffmpeg command only")
    parser.add_argument(
        "--mask-preview", default=None,
        help="Write the rounded-corner alpha mask to this PNG",
    )
    parsed = parser.parse_args(args)

    if parsed.type == "image" and not parsed.image:
        parser.error("--type image requires --image")

    config = BackgroundConfig(
        type=parsed.type,
        color=validate_color(parsed.color, "--color"),
        image_path=parsed.image,
        blur_radius=parsed.blur_radius,
        padding=parsed.padding,
        border_radius=parsed.border_radius,
    )

    if parsed.mask_preview:
        save_mask_preview(config, parsed.width, parsed.height, parsed.mask_preview)
        print(f"Mask preview: {parsed.mask_preview}")

    if parsed.filter_only:
        print(generate_background_filter(config, parsed.width, parsed.height))
        return

    if not parsed.output:
        parser.error("--output is required (unless using --filter-only)")

    cmd = build_background_command(
        parsed.input, parsed.output, config, parsed.width, parsed.height,
    )
    execute_plan([PipelineStep("Apply background/wallpaper", tuple(cmd))], dry_run=parsed.dry_run)


if __name__ == "__main__":
    main()
