"""CLI for trimming — remove time ranges, keep the rest.

Usage:
    regionfx trim -i in.mp4 -o out.mp4 --regions '[{"id": "t1", "startMs": 5000, "endMs": 10000}]'
    regionfx trim -i in.mp4 -o out.mp4 --regions cuts.yaml --duration 60000 --dry-run
"""

import argparse

from .config import load_regions_arg, parse_trim_region
from .pipeline import PipelineStep
from .probe import probe_video_info
from .runner import execute_plan
from .trim import build_trim_command, compute_effective_duration


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="regionfx trim",
        description="Trim a video by removing the given time ranges.",
    )
    parser.add_argument("-i", "--input", required=True, help="Input video path")
    parser.add_argument("-o", "--output", required=True, help="Output video path")
    parser.add_argument(
        "--regions", required=True,
        help="Regions to REMOVE: JSON array, or a .json/.yaml file",
    )
    parser.add_argument(
        "--duration", type=float, default=None,
        help="Total duration in ms (probed from the input when omitted)",
    )
    parser.add_argument("--no-audio", action="store_true", help="Drop audio")
    parser.add_argument("--dry-run", action="store_true", help="Print the ffmpeg command only")
    parsed = parser.parse_args(args)

    regions = [parse_trim_region(r, i) for i, r in enumerate(load_regions_arg(parsed.regions))]

    duration_ms = parsed.duration
    if duration_ms is None:
        duration_ms = probe_video_info(parsed.input).duration_ms

    effective = compute_effective_duration(regions, duration_ms)
    print(f"Effective duration: {effective / 1000:.2f}s")

    cmd = build_trim_command(
        parsed.input, parsed.output, regions, duration_ms,
        has_audio=not parsed.no_audio,
    )
    execute_plan([PipelineStep("Trim video", tuple(cmd))], dry_run=parsed.dry_run)


if __name__ == "__main__":
    main()
