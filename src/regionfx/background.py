"""Background compositing — place the video on a backdrop.

The video is scaled down inside a padding inset and overlaid on one of:
  - color:    solid fill painted over a video-sized copy of input 0.
  - blur:     blurred copy of the video itself.
  - image:    still image (second ffmpeg input) scaled/cropped to fill.
  - gradient: ffmpeg has no CSS gradients; falls back to a dark solid.

Padding is a percentage of min(width, height). Rounded corners are an
alpha mask on the foreground: a pixel is transparent only when it lies
inside a corner's radius x radius square AND outside the circle of
that radius centered on the square's inner corner.
"""

import numpy as np

from .common import encode_args, to_ffmpeg_color
from .geometry import percent_to_pixels
from .regions import BackgroundConfig, BackgroundType


GRADIENT_FALLBACK_COLOR = "#1a1a2e"


def padding_pixels(padding: float, width: int, height: int) -> int:
    return percent_to_pixels(padding, min(width, height))


def rounded_corner_alpha_expression(radius: int) -> str:
    """geq alpha expression: 0 in the cut-off corners, 255 elsewhere."""
    r = radius
    return (
        f"if(gt(pow(min(X,W-X)-{r},2)+pow(min(Y,H-Y)-{r},2),pow({r},2))*"
        f"lt(min(X,W-X),{r})*lt(min(Y,H-Y),{r}),0,255)"
    )


def corner_alpha_mask(width: int, height: int, radius: int) -> np.ndarray:
    """Evaluate the rounded-corner alpha rule for a width x height frame.

    Same per-pixel rule as rounded_corner_alpha_expression(), with X/Y
    the pixel coordinates and W/H the frame size.

    Returns:
        numpy array of shape (height, width), dtype uint8 (0 or 255).
    """
    xs = np.arange(width)
    ys = np.arange(height)
    dx = np.minimum(xs, width - xs)[np.newaxis, :]
    dy = np.minimum(ys, height - ys)[:, np.newaxis]

    outside_circle = (dx - radius) ** 2 + (dy - radius) ** 2 > radius ** 2
    in_corner = (dx < radius) & (dy < radius)
    return np.where(outside_circle & in_corner, 0, 255).astype(np.uint8)


def _composite(
    bg_filters: list[str],
    video_width: int,
    video_height: int,
    pad_px: int,
    border_radius: int,
) -> str:
    """Shared tail: scale the foreground, round it, overlay on [bg]."""
    inner_w = video_width - pad_px * 2
    inner_h = video_height - pad_px * 2

    filters = list(bg_filters)
    filters.append(f"[0:v]scale={inner_w}:{inner_h}:flags=lanczos[vid]")

    if border_radius > 0:
        alpha = rounded_corner_alpha_expression(border_radius)
        filters.append(
            "[vid]format=yuva420p,"
            f"geq=lum='lum(X,Y)':cb='cb(X,Y)':cr='cr(X,Y)':a='{alpha}'[rounded]"
        )
        filters.append(f"[bg][rounded]overlay={pad_px}:{pad_px}:format=auto")
    else:
        filters.append(f"[bg][vid]overlay={pad_px}:{pad_px}:format=auto")

    return "; ".join(filters)


def color_background_filter(
    color: str, video_width: int, video_height: int, padding: float, border_radius: int,
) -> str:
    """Solid color painted over a full-size copy of the video."""
    pad_px = padding_pixels(padding, video_width, video_height)
    bg = (
        f"[0:v]scale={video_width}:{video_height},"
        f"drawbox=x=0:y=0:w=iw:h=ih:color={to_ffmpeg_color(color)}:t=fill[bg]"
    )
    return _composite([bg], video_width, video_height, pad_px, border_radius)


def blur_background_filter(
    blur_radius: int, video_width: int, video_height: int, padding: float, border_radius: int,
) -> str:
    """Blurred full-size copy of the video behind the scaled foreground."""
    pad_px = padding_pixels(padding, video_width, video_height)
    bg = (
        f"[0:v]scale={video_width}:{video_height}:flags=lanczos,"
        f"boxblur={blur_radius}:{blur_radius}[bg]"
    )
    return _composite([bg], video_width, video_height, pad_px, border_radius)


def image_background_filter(
    video_width: int, video_height: int, padding: float, border_radius: int,
) -> str:
    """Input 1 is the background image, input 0 the video.

    The still is overlaid on a video-sized canvas so the composite runs
    for the video's duration rather than the image's single frame.
    """
    pad_px = padding_pixels(padding, video_width, video_height)
    bg_filters = [
        f"[0:v]scale={video_width}:{video_height}[canvas]",
        f"[1:v]scale={video_width}:{video_height}:flags=lanczos:"
        f"force_original_aspect_ratio=increase,"
        f"crop={video_width}:{video_height}[img]",
        "[canvas][img]overlay=0:0[bg]",
    ]
    return _composite(bg_filters, video_width, video_height, pad_px, border_radius)


def generate_background_filter(
    config: BackgroundConfig, video_width: int, video_height: int,
) -> str:
    """filter_complex text for compositing onto the configured background.

    With no padding and no border radius there is nothing to composite,
    so the result is a plain resize.
    """
    passthrough = f"scale={video_width}:{video_height}"
    padding = config.padding or 0
    border_radius = config.border_radius or 0

    if padding == 0 and border_radius == 0:
        return passthrough

    if config.type == BackgroundType.COLOR:
        return color_background_filter(
            config.color or "#000000", video_width, video_height, padding, border_radius,
        )
    elif config.type == BackgroundType.BLUR:
        return blur_background_filter(
            config.blur_radius, video_width, video_height, padding, border_radius,
        )
    elif config.type == BackgroundType.IMAGE:
        return image_background_filter(video_width, video_height, padding, border_radius)
    elif config.type == BackgroundType.GRADIENT:
        return color_background_filter(
            GRADIENT_FALLBACK_COLOR, video_width, video_height, padding, border_radius,
        )
    return passthrough


def background_inputs(input_path: str, config: BackgroundConfig) -> list[str]:
    """-i arguments: the video, plus the image for image backgrounds."""
    args = ["-i", input_path]
    if config.type == BackgroundType.IMAGE and config.image_path:
        args.extend(["-i", config.image_path])
    return args


def build_background_command(
    input_path: str,
    output_path: str,
    config: BackgroundConfig,
    video_width: int,
    video_height: int,
    codec: str = "libx264",
) -> list[str]:
    """Complete ffmpeg argument list for background compositing."""
    graph = generate_background_filter(config, video_width, video_height)
    return [
        "ffmpeg", "-y",
        *background_inputs(input_path, config),
        "-filter_complex", graph,
        *encode_args(codec),
        "-c:a", "copy",
        output_path,
    ]
