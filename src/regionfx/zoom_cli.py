"""CLI for zoom/pan — filter strings, keyframes and presets.

Usage:
    regionfx zoom filter --regions zoom.json -W 1920 -H 1080
    regionfx zoom static --cx 0.5 --cy 0.06 --depth 3 -W 1920 -H 1080
    regionfx zoom keyframes --regions zoom.json --duration 10000
    regionfx zoom presets
"""

import argparse
import json
from dataclasses import asdict

from .config import load_regions_arg, parse_zoom_region
from .regions import DEFAULT_TRANSITION_MS, ZOOM_DEPTH_SCALES, ZoomFocus
from .zoom import (
    ZOOM_PRESETS,
    generate_static_zoom_filter,
    generate_zoom_filter,
    sample_zoom_keyframes,
)


def _add_size_args(parser):
    parser.add_argument("-W", "--width", type=int, required=True, help="Input video width")
    parser.add_argument("-H", "--height", type=int, required=True, help="Input video height")


def _load_regions(arg):
    return [parse_zoom_region(r, i) for i, r in enumerate(load_regions_arg(arg))]


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="regionfx zoom",
        description="Generate ffmpeg zoom/pan filters.",
    )
    sub = parser.add_subparsers(dest="action", required=True)

    p_filter = sub.add_parser("filter", help="Animated zoom filter for a list of regions")
    p_filter.add_argument(
        "-r", "--regions", required=True,
        help="JSON array of zoom regions, or a .json/.yaml file",
    )
    _add_size_args(p_filter)
    p_filter.add_argument(
        "--transition-ms", type=float, default=DEFAULT_TRANSITION_MS,
        help="Ease-in/out duration in ms (default: 320)",
    )
    p_filter.add_argument(
        "--fps", type=float, default=30, help="Input frame rate (default: 30)",
    )

    p_static = sub.add_parser("static", help="Fixed zoom filter")
    p_static.add_argument("--cx", type=float, required=True, help="Focus X (0-1)")
    p_static.add_argument("--cy", type=float, required=True, help="Focus Y (0-1)")
    p_static.add_argument(
        "-d", "--depth", type=int, required=True, choices=sorted(ZOOM_DEPTH_SCALES),
        help="Zoom depth (1-6)",
    )
    _add_size_args(p_static)

    p_keys = sub.add_parser("keyframes", help="Sampled zoom trajectory as JSON")
    p_keys.add_argument("-r", "--regions", required=True, help="Zoom regions (JSON or file)")
    p_keys.add_argument("--duration", type=float, required=True, help="Clip duration in ms")
    p_keys.add_argument("--interval", type=float, default=33, help="Sample interval in ms")

    sub.add_parser("presets", help="List focus presets and depth scales")

    parsed = parser.parse_args(args)

    if parsed.action == "filter":
        regions = _load_regions(parsed.regions)
        print(generate_zoom_filter(
            regions, parsed.width, parsed.height, parsed.transition_ms, fps=parsed.fps,
        ))
    elif parsed.action == "static":
        print(generate_static_zoom_filter(
            ZoomFocus(parsed.cx, parsed.cy), parsed.depth, parsed.width, parsed.height,
        ))
    elif parsed.action == "keyframes":
        regions = _load_regions(parsed.regions)
        keyframes = sample_zoom_keyframes(regions, parsed.duration, parsed.interval)
        print(json.dumps([asdict(k) for k in keyframes], indent=2))
    elif parsed.action == "presets":
        print("Available zoom presets:")
        for name, focus in ZOOM_PRESETS.items():
            print(f"  {name:<16} cx={focus.cx} cy={focus.cy}")
        print()
        print("Zoom depth scales:")
        for depth, scale in ZOOM_DEPTH_SCALES.items():
            print(f"  depth {depth}: {scale}x magnification")


if __name__ == "__main__":
    main()
