"""Pipeline planner — ProcessingConfig to an ordered list of ffmpeg passes.

Strategy: put as many filters as possible into one pass, and split only
where the invocation shape forces it:

  1. Trim with several kept segments needs trim+concat in its own
     filter_complex pass. A single kept segment with no other effects
     is a fast -ss/-to extraction and the whole plan.
  2. Crop, zoom and annotations are per-frame filters on one input, so
     they share a single -vf chain (in that order).
  3. Background may need a second input (the image) and always needs
     filter_complex, so it runs last in its own pass, reading the
     flushed -vf output when step 2 produced anything.
  4. With nothing to do, the plan is a single stream copy.

Intermediate files are named from the output path (<base>_stepN<ext>,
N counting intermediates from 0). Steps must run in order; the planner
never creates or deletes files itself.
"""

import shlex
from dataclasses import dataclass
from pathlib import PurePath

from .annotations import generate_annotation_filters
from .background import background_inputs, generate_background_filter
from .common import encode_args
from .crop import crop_pixels, generate_crop_filter
from .regions import ProcessingConfig
from .trim import (
    NoKeptSegmentsError,
    build_concat_command,
    build_seek_command,
    compute_kept_segments,
)
from .zoom import generate_zoom_filter


@dataclass(frozen=True)
class PipelineStep:
    description: str
    args: tuple[str, ...]


def intermediate_output(final_path: str, index: int) -> str:
    """'out/final.mp4', 0 -> 'out/final_step0.mp4'."""
    path = PurePath(final_path)
    return str(path.with_name(f"{path.stem}_step{index}{path.suffix}"))


def _with_output_fps(args: list[str], output_fps: float | None) -> list[str]:
    """Insert -r before the output path when an output fps is requested."""
    if not output_fps:
        return args
    return [*args[:-1], "-r", f"{output_fps:g}", args[-1]]


def build_pipeline(config: ProcessingConfig, codec: str = "libx264") -> list[PipelineStep]:
    """Plan the ffmpeg invocations that apply every configured effect.

    Args:
        config: Effects, paths and source video metadata.
        codec: Video encoder for re-encoding passes.

    Returns:
        Steps in execution order. The last step writes config.output_path.

    Raises:
        NoKeptSegmentsError: Trim regions remove the entire clip.
    """
    video = config.video
    canvas_w, canvas_h = config.canvas_size
    steps = []
    current_input = config.input_path
    intermediates = 0

    def next_intermediate():
        nonlocal intermediates
        path = intermediate_output(config.output_path, intermediates)
        intermediates += 1
        return path

    needs_trim = bool(config.trim)
    needs_zoom = config.zoom is not None and bool(config.zoom.regions)
    needs_crop = config.crop is not None and not config.crop.is_full_frame
    needs_background = (
        config.background is not None and (config.background.padding or 0) > 0
    )
    needs_annotations = bool(config.annotations)

    # ── Step 1: trim ─────────────────────────────────────────────
    if needs_trim:
        segments = compute_kept_segments(config.trim, video.duration_ms)
        if not segments:
            raise NoKeptSegmentsError(
                "Trim regions remove the entire clip: no segments to keep"
            )

        only_trim = not (needs_zoom or needs_crop or needs_background or needs_annotations)
        if len(segments) == 1 and only_trim:
            args = build_seek_command(
                current_input, config.output_path, segments[0],
                has_audio=video.has_audio, codec=codec,
            )
            args = _with_output_fps(args, config.output_fps)
            return [PipelineStep("Trim video", tuple(args))]

        # A single segment alongside other effects gets no trim pass.
        if len(segments) > 1:
            trim_output = config.output_path if only_trim else next_intermediate()
            args = build_concat_command(
                current_input, trim_output, config.trim, video.duration_ms,
                has_audio=video.has_audio, codec=codec,
            )
            if only_trim:
                args = _with_output_fps(args, config.output_fps)
            steps.append(PipelineStep("Trim video (remove cut sections)", tuple(args)))
            current_input = trim_output

    # ── Step 2: per-frame filters share one -vf chain ────────────
    vf_parts = []
    frame_w, frame_h = video.width, video.height
    if needs_crop:
        vf_parts.append(generate_crop_filter(config.crop, video.width, video.height))
        # Zoom sees the cropped frame.
        frame_w, frame_h, _, _ = crop_pixels(config.crop, video.width, video.height)
    if needs_zoom:
        vf_parts.append(generate_zoom_filter(
            list(config.zoom.regions), frame_w, frame_h,
            config.zoom.transition_ms, fps=video.fps,
        ))
    if needs_annotations:
        ann_filter = generate_annotation_filters(
            list(config.annotations), canvas_w, canvas_h,
        )
        if ann_filter:
            vf_parts.append(ann_filter)

    def vf_args(output_path):
        return [
            "ffmpeg", "-y",
            "-i", current_input,
            "-vf", ",".join(vf_parts),
            *encode_args(codec),
            "-c:a", "copy",
            output_path,
        ]

    # ── Step 3: background runs last, in its own pass ────────────
    if needs_background:
        if vf_parts:
            vf_output = next_intermediate()
            steps.append(PipelineStep("Apply zoom/crop/annotations", tuple(vf_args(vf_output))))
            current_input = vf_output

        graph = generate_background_filter(config.background, canvas_w, canvas_h)
        args = [
            "ffmpeg", "-y",
            *background_inputs(current_input, config.background),
            "-filter_complex", graph,
            *encode_args(codec),
            "-c:a", "copy",
            config.output_path,
        ]
        args = _with_output_fps(args, config.output_fps)
        steps.append(PipelineStep("Apply background/wallpaper", tuple(args)))

    # ── Step 4: per-frame filters are the final pass ─────────────
    elif vf_parts:
        args = _with_output_fps(vf_args(config.output_path), config.output_fps)
        steps.append(PipelineStep("Apply video effects (zoom/crop/annotations)", tuple(args)))

    # ── Step 5: nothing to do ────────────────────────────────────
    elif not steps:
        steps.append(PipelineStep(
            "Copy (no effects)",
            ("ffmpeg", "-y", "-i", current_input, "-c", "copy", config.output_path),
        ))

    return steps


def intermediate_paths(steps: list[PipelineStep], final_path: str) -> list[str]:
    """Output paths of every step except the one writing final_path."""
    return [step.args[-1] for step in steps if step.args[-1] != final_path]


def pipeline_to_shell_commands(steps: list[PipelineStep]) -> list[str]:
    """Render each step as a POSIX shell command line."""
    return [shlex.join(step.args) for step in steps]
