"""Trim planner — remove cut regions and concatenate what survives.

TrimRegions mark spans to REMOVE. The planner walks them in start order
to find the kept segments, then either:
  - stream-copies (no cuts at all),
  - seeks straight to the single surviving segment (-ss/-to), or
  - builds a trim/atrim + concat filter graph for several segments.
"""

from dataclasses import dataclass

from .common import encode_args
from .regions import TrimRegion


class NoKeptSegmentsError(ValueError):
    """Cut regions remove the entire clip, leaving nothing to output."""


@dataclass(frozen=True)
class Segment:
    """Kept span of the source, in seconds."""

    start_s: float
    end_s: float


def compute_kept_segments(
    trim_regions: list[TrimRegion], total_duration_ms: float,
) -> list[Segment]:
    """Segments that survive after removing every trim region.

    Regions are sorted by start but never merged; the cursor simply
    jumps to each region's end.
    """
    total_s = total_duration_ms / 1000
    if not trim_regions:
        return [Segment(0, total_s)]

    segments = []
    cursor = 0
    for trim in sorted(trim_regions, key=lambda r: r.start_ms):
        trim_start = trim.start_ms / 1000
        if cursor < trim_start:
            segments.append(Segment(cursor, trim_start))
        cursor = trim.end_ms / 1000

    if cursor < total_s:
        segments.append(Segment(cursor, total_s))
    return segments


def compute_effective_duration(
    trim_regions: list[TrimRegion], total_duration_ms: float,
) -> float:
    """Duration in ms after trimming.

    Overlapping regions are NOT deduplicated: each region's length is
    subtracted in full, so overlaps are counted twice.
    """
    trimmed_ms = sum(r.end_ms - r.start_ms for r in trim_regions)
    return total_duration_ms - trimmed_ms


def generate_trim_filter(
    trim_regions: list[TrimRegion],
    total_duration_ms: float,
    has_audio: bool = True,
) -> str:
    """filter_complex text that keeps the surviving segments.

    Output pads are [outv] and, with audio, [outa].

    Raises:
        NoKeptSegmentsError: The regions cover the whole clip.
    """
    segments = compute_kept_segments(trim_regions, total_duration_ms)

    if not segments:
        raise NoKeptSegmentsError(
            "Trim regions remove the entire clip: no segments to keep"
        )

    if len(segments) == 1 and segments[0].start_s == 0:
        # Only the tail is cut.
        seg = segments[0]
        filters = [
            f"[0:v]trim=start={seg.start_s:g}:end={seg.end_s:g},"
            f"setpts=PTS-STARTPTS[outv]"
        ]
        if has_audio:
            filters.append(
                f"[0:a]atrim=start={seg.start_s:g}:end={seg.end_s:g},"
                f"asetpts=PTS-STARTPTS[outa]"
            )
        return "; ".join(filters)

    filters = []
    v_labels = []
    a_labels = []
    for i, seg in enumerate(segments):
        bounds = f"start={seg.start_s:.3f}:end={seg.end_s:.3f}"
        filters.append(f"[0:v]trim={bounds},setpts=PTS-STARTPTS[v{i}]")
        v_labels.append(f"[v{i}]")
        if has_audio:
            filters.append(f"[0:a]atrim={bounds},asetpts=PTS-STARTPTS[a{i}]")
            a_labels.append(f"[a{i}]")

    n = len(segments)
    if has_audio:
        filters.append(
            f"{''.join(v_labels)}{''.join(a_labels)}"
            f"concat=n={n}:v=1:a=1[outv][outa]"
        )
    else:
        filters.append(f"{''.join(v_labels)}concat=n={n}:v=1:a=0[outv]")

    return "; ".join(filters)


def build_seek_command(
    input_path: str,
    output_path: str,
    segment: Segment,
    has_audio: bool = True,
    codec: str = "libx264",
) -> list[str]:
    """Extract one segment with input seeking (no filter graph)."""
    return [
        "ffmpeg", "-y",
        "-ss", f"{segment.start_s:.3f}",
        "-to", f"{segment.end_s:.3f}",
        "-i", input_path,
        *encode_args(codec),
        *(["-c:a", "aac"] if has_audio else ["-an"]),
        output_path,
    ]


def build_concat_command(
    input_path: str,
    output_path: str,
    trim_regions: list[TrimRegion],
    total_duration_ms: float,
    has_audio: bool = True,
    codec: str = "libx264",
) -> list[str]:
    """Cut-and-concatenate through filter_complex."""
    graph = generate_trim_filter(trim_regions, total_duration_ms, has_audio)
    args = [
        "ffmpeg", "-y",
        "-i", input_path,
        "-filter_complex", graph,
        "-map", "[outv]",
    ]
    if has_audio:
        args.extend(["-map", "[outa]"])
    args.extend(encode_args(codec))
    if has_audio:
        args.extend(["-c:a", "aac"])
    args.append(output_path)
    return args


def build_trim_command(
    input_path: str,
    output_path: str,
    trim_regions: list[TrimRegion],
    total_duration_ms: float,
    has_audio: bool = True,
    codec: str = "libx264",
) -> list[str]:
    """Complete ffmpeg argument list for trimming a clip."""
    if not trim_regions:
        return ["ffmpeg", "-y", "-i", input_path, "-c", "copy", output_path]

    segments = compute_kept_segments(trim_regions, total_duration_ms)
    if len(segments) == 1:
        # A single survivor is cheaper to extract by seeking.
        return build_seek_command(
            input_path, output_path, segments[0], has_audio, codec,
        )

    return build_concat_command(
        input_path, output_path, trim_regions, total_duration_ms, has_audio, codec,
    )
