"""Annotation filters — text (drawtext) and arrows (drawbox).

Each annotation is only visible between its start and end time via an
enable='between(t,...)' predicate. Positions are percentages (0-100) of
the canvas.

ffmpeg has no arrow primitive, so an arrow is approximated by a thick
filled box covering its shaft. Text annotations without text are
skipped, as are annotations of unknown type.
"""

from .common import encode_args, to_ffmpeg_color
from .geometry import percent_to_pixels, round_half_up
from .regions import AnnotationRegion, AnnotationType, ArrowDirection


TEXT_BOX_BORDER = 8
MIN_ARROW_THICKNESS = 3


def escape_drawtext(text: str) -> str:
    """Escape text for a single-quoted drawtext text= value."""
    return (
        text.replace("\\", "\\\\\\\\")
        .replace("'", "'\\''")
        .replace(":", "\\:")
        .replace("%", "\\\\%")
        .replace("\n", "\\n")
    )


def enable_window(start_ms: float, end_ms: float) -> str:
    return f"enable='between(t,{start_ms / 1000:.3f},{end_ms / 1000:.3f})'"


def text_annotation_filter(
    annotation: AnnotationRegion, canvas_width: int, canvas_height: int,
) -> str:
    x = percent_to_pixels(annotation.x, canvas_width)
    y = percent_to_pixels(annotation.y, canvas_height)
    text = escape_drawtext(annotation.text or "")

    parts = [
        f"drawtext=text='{text}'",
        f"x={x}",
        f"y={y}",
        f"fontsize={annotation.font_size}",
        f"fontcolor={to_ffmpeg_color(annotation.font_color)}",
        f"font='{annotation.font_family}'",
        enable_window(annotation.start_ms, annotation.end_ms),
    ]

    bg = annotation.background_color
    if bg and bg != "transparent":
        parts.extend([
            "box=1",
            f"boxcolor={to_ffmpeg_color(bg)}",
            f"boxborderw={TEXT_BOX_BORDER}",
        ])

    return ":".join(parts)


def arrow_coords(
    direction: str, cx: int, cy: int, size: int,
) -> tuple[int, int, int, int]:
    """Shaft endpoints (x1, y1, x2, y2) centered on (cx, cy).

    Unrecognized directions point right.
    """
    half = round_half_up(size / 2)
    if direction == ArrowDirection.LEFT:
        return cx + half, cy, cx - half, cy
    elif direction == ArrowDirection.UP:
        return cx, cy + half, cx, cy - half
    elif direction == ArrowDirection.DOWN:
        return cx, cy - half, cx, cy + half
    elif direction == ArrowDirection.UP_RIGHT:
        return cx - half, cy + half, cx + half, cy - half
    elif direction == ArrowDirection.UP_LEFT:
        return cx + half, cy + half, cx - half, cy - half
    elif direction == ArrowDirection.DOWN_RIGHT:
        return cx - half, cy - half, cx + half, cy + half
    elif direction == ArrowDirection.DOWN_LEFT:
        return cx + half, cy - half, cx - half, cy + half
    # right
    return cx - half, cy, cx + half, cy


def arrow_annotation_filter(
    annotation: AnnotationRegion, canvas_width: int, canvas_height: int,
) -> str:
    cx = percent_to_pixels(annotation.x, canvas_width)
    cy = percent_to_pixels(annotation.y, canvas_height)
    size = annotation.arrow_size
    x1, y1, x2, y2 = arrow_coords(annotation.arrow_direction, cx, cy, size)
    thickness = max(MIN_ARROW_THICKNESS, round_half_up(size / 15))

    # Horizontal/vertical shafts have zero extent on one axis.
    box_w = abs(x2 - x1) or thickness
    box_h = abs(y2 - y1) or thickness
    color = to_ffmpeg_color(annotation.arrow_color)

    return (
        f"drawbox=x={min(x1, x2)}:y={min(y1, y2)}:w={box_w}:h={box_h}:"
        f"color={color}:t=fill:"
        f"{enable_window(annotation.start_ms, annotation.end_ms)}"
    )


def generate_annotation_filters(
    annotations: list[AnnotationRegion], canvas_width: int, canvas_height: int,
) -> str:
    """Comma-separated drawtext/drawbox chain ("" when nothing to draw)."""
    filters = []
    for ann in annotations:
        if ann.type == AnnotationType.TEXT:
            if ann.text:
                filters.append(text_annotation_filter(ann, canvas_width, canvas_height))
        elif ann.type == AnnotationType.ARROW:
            filters.append(arrow_annotation_filter(ann, canvas_width, canvas_height))
    return ",".join(filters)


def build_annotation_command(
    input_path: str,
    output_path: str,
    annotations: list[AnnotationRegion],
    canvas_width: int,
    canvas_height: int,
    codec: str = "libx264",
) -> list[str]:
    """Complete ffmpeg argument list; stream copy when nothing is drawn."""
    vf = generate_annotation_filters(annotations, canvas_width, canvas_height)
    if not vf:
        return ["ffmpeg", "-y", "-i", input_path, "-c", "copy", output_path]

    return [
        "ffmpeg", "-y",
        "-i", input_path,
        "-vf", vf,
        *encode_args(codec),
        "-c:a", "copy",
        output_path,
    ]
