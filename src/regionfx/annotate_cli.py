"""CLI for text/arrow annotations.

Usage:
    regionfx annotate -i in.mp4 -o out.mp4 -W 1920 -H 1080 --annotations notes.yaml
    regionfx annotate -i in.mp4 -W 1920 -H 1080 --annotations notes.json --filter-only
"""

import argparse

from .annotations import build_annotation_command, generate_annotation_filters
from .config import load_regions_arg, parse_annotation
from .pipeline import PipelineStep
from .runner import execute_plan


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="regionfx annotate",
        description="Add text/arrow annotations to a video.",
    )
    parser.add_argument("-i", "--input", required=True, help="Input video path")
    parser.add_argument("-o", "--output", help="Output video path")
    parser.add_argument("-W", "--width", type=int, required=True, help="Canvas width")
    parser.add_argument("-H", "--height", type=int, required=True, help="Canvas height")
    parser.add_argument(
        "--annotations", required=True,
        help="JSON array of annotations, or a .json/.yaml file",
    )
    parser.add_argument("--filter-only", action="store_true", help="Only print the filter string")
    parser.add_argument("--dry-run", action="store_true", help="Print the ffmpeg command only")
    parsed = parser.parse_args(args)

    annotations = [
        parse_annotation(a, i) for i, a in enumerate(load_regions_arg(parsed.annotations))
    ]

    if parsed.filter_only:
        print(generate_annotation_filters(annotations, parsed.width, parsed.height))
        return

    if not parsed.output:
        parser.error("--output is required (unless using --filter-only)")

    cmd = build_annotation_command(
        parsed.input, parsed.output, annotations, parsed.width, parsed.height,
    )
    execute_plan([PipelineStep("Add annotations", tuple(cmd))], dry_run=parsed.dry_run)


if __name__ == "__main__":
    main()
