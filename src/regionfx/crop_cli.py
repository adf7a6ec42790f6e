"""CLI for cropping with normalized coordinates.

Usage:
    regionfx crop apply -i in.mp4 -o out.mp4 -W 1920 -H 1080 --y 0.05 --ch 0.95
    regionfx crop apply ... --filter-only
    regionfx crop presets
"""

import argparse

from .crop import CROP_PRESETS, build_crop_command, generate_crop_filter
from .pipeline import PipelineStep
from .regions import CropRegion
from .runner import execute_plan


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="regionfx crop",
        description="Crop video using normalized (0-1) coordinates.",
    )
    sub = parser.add_subparsers(dest="action", required=True)

    p_apply = sub.add_parser("apply", help="Crop a video")
    p_apply.add_argument("-i", "--input", required=True, help="Input video path")
    p_apply.add_argument("-o", "--output", help="Output video path")
    p_apply.add_argument("-W", "--width", type=int, required=True, help="Input video width")
    p_apply.add_argument("-H", "--height", type=int, required=True, help="Input video height")
    p_apply.add_argument("--x", type=float, default=0, help="Crop X offset (0-1)")
    p_apply.add_argument("--y", type=float, default=0, help="Crop Y offset (0-1)")
    p_apply.add_argument("--cw", type=float, default=1, help="Crop width (0-1)")
    p_apply.add_argument("--ch", type=float, default=1, help="Crop height (0-1)")
    p_apply.add_argument(
        "--scale", action="store_true",
        help="Scale back to the original resolution after cropping",
    )
    p_apply.add_argument("--filter-only", action="store_true", help="Only print the filter string")
    p_apply.add_argument("--dry-run", action="store_true", help="Print the ffmpeg command only")

    sub.add_parser("presets", help="List crop presets")

    parsed = parser.parse_args(args)

    if parsed.action == "presets":
        print("Available crop presets:")
        for name, crop in CROP_PRESETS.items():
            print(f"  {name:<18} x={crop.x} y={crop.y} width={crop.width} height={crop.height}")
        return

    crop = CropRegion(x=parsed.x, y=parsed.y, width=parsed.cw, height=parsed.ch)

    if parsed.filter_only:
        print(generate_crop_filter(crop, parsed.width, parsed.height))
        return

    if not parsed.output:
        parser.error("--output is required (unless using --filter-only)")

    cmd = build_crop_command(
        parsed.input, parsed.output, crop, parsed.width, parsed.height,
        scale_to_original=parsed.scale,
    )
    execute_plan([PipelineStep("Crop video", tuple(cmd))], dry_run=parsed.dry_run)


if __name__ == "__main__":
    main()
