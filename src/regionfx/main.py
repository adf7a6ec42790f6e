"""Subcommand dispatcher for regionfx.

Usage:
    regionfx process    --config edit.yaml [--dry-run]
    regionfx zoom       filter --regions zoom.json -W 1920 -H 1080
    regionfx crop       apply -i in.mp4 -o out.mp4 -W 1920 -H 1080 --y 0.05 --ch 0.95
    regionfx trim       -i in.mp4 -o out.mp4 --regions cuts.json
    regionfx background -i in.mp4 -o out.mp4 -W 1920 -H 1080 --padding 10
    regionfx annotate   -i in.mp4 -o out.mp4 -W 1920 -H 1080 --annotations notes.json
"""

import argparse
import sys


COMMANDS = {
    "process": "Run the full effect pipeline from a YAML/JSON config",
    "zoom": "Zoom/pan filters, keyframes and presets",
    "crop": "Crop with normalized coordinates",
    "trim": "Remove time ranges and concatenate the rest",
    "background": "Composite the video onto a background",
    "annotate": "Draw text/arrow annotations",
}


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="regionfx",
        description="Region-driven ffmpeg effects: zoom, crop, trim, background, annotations.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, add_help=False)

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "process":
        from .process_cli import main as process_main
        process_main(remaining)
    elif parsed.command == "zoom":
        from .zoom_cli import main as zoom_main
        zoom_main(remaining)
    elif parsed.command == "crop":
        from .crop_cli import main as crop_main
        crop_main(remaining)
    elif parsed.command == "trim":
        from .trim_cli import main as trim_main
        trim_main(remaining)
    elif parsed.command == "background":
        from .background_cli import main as background_main
        background_main(remaining)
    elif parsed.command == "annotate":
        from .annotate_cli import main as annotate_main
        annotate_main(remaining)


if __name__ == "__main__":
    main()
