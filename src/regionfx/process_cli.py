"""CLI for the full pipeline — plan and run every pass from a config.

Usage:
    regionfx process --config edit.yaml
    regionfx process --config edit.yaml --dry-run
    regionfx process --config edit.yaml --validate
"""

import argparse

from .config import load_processing_config, validate_config_paths
from .pipeline import build_pipeline
from .probe import probe_video_info
from .runner import execute_plan


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="regionfx process",
        description="Run the full effect pipeline from a YAML/JSON config.",
    )
    parser.add_argument(
        "-c", "--config", required=True,
        help="Path to YAML or JSON processing config",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the ffmpeg commands without executing",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate config and input paths only",
    )
    parser.add_argument(
        "--gpu", action="store_true",
        help="Use GPU encoding (h264_nvenc). Default is CPU (libx264).",
    )
    parser.add_argument(
        "--clean", action="store_true",
        help="Delete intermediate files after the final pass",
    )
    parsed = parser.parse_args(args)

    config = load_processing_config(parsed.config, probe=probe_video_info)

    if parsed.validate:
        validate_config_paths(config)
        video = config.video
        print(f"Config valid: {config.input_path} -> {config.output_path}")
        print(f"  Video: {video.width}x{video.height}, {video.fps:g}fps, "
              f"{video.duration_ms / 1000:.1f}s")
        print("All paths verified.")
        return

    steps = build_pipeline(config, codec="h264_nvenc" if parsed.gpu else "libx264")

    if not parsed.dry_run:
        validate_config_paths(config)
        print(f"Processing {config.input_path} ({len(steps)} passes)")

    execute_plan(steps, dry_run=parsed.dry_run, keep_intermediates=not parsed.clean)

    if not parsed.dry_run:
        print(f"\nDone: {config.output_path}")


if __name__ == "__main__":
    main()
