"""Crop filter generator — normalized CropRegion to ffmpeg crop.

Pixel values are rounded; width and height are forced even since most
encoders (yuv420p) reject odd frame dimensions.
"""

from .common import encode_args
from .geometry import even_floor, to_pixels
from .regions import CropRegion


def crop_pixels(
    crop: CropRegion, input_width: int, input_height: int,
) -> tuple[int, int, int, int]:
    """(w, h, x, y) in pixels, w and h even."""
    x = to_pixels(crop.x, input_width)
    y = to_pixels(crop.y, input_height)
    w = to_pixels(crop.width, input_width)
    h = to_pixels(crop.height, input_height)
    return even_floor(w), even_floor(h), x, y


def generate_crop_filter(
    crop: CropRegion, input_width: int, input_height: int,
) -> str:
    """e.g. CropRegion(0, 0.05, 1, 0.95) at 1920x1080 -> "crop=1920:1026:0:54"."""
    w, h, x, y = crop_pixels(crop, input_width, input_height)
    return f"crop={w}:{h}:{x}:{y}"


def generate_crop_and_scale_filter(
    crop: CropRegion,
    input_width: int,
    input_height: int,
    output_width: int,
    output_height: int,
) -> str:
    """Crop, then scale to the target resolution."""
    crop_filter = generate_crop_filter(crop, input_width, input_height)
    return f"{crop_filter},scale={output_width}:{output_height}:flags=lanczos"


def build_crop_command(
    input_path: str,
    output_path: str,
    crop: CropRegion,
    input_width: int,
    input_height: int,
    scale_to_original: bool = False,
    codec: str = "libx264",
) -> list[str]:
    """Complete ffmpeg argument list for cropping a clip."""
    if scale_to_original:
        vf = generate_crop_and_scale_filter(
            crop, input_width, input_height, input_width, input_height,
        )
    else:
        vf = generate_crop_filter(crop, input_width, input_height)

    return [
        "ffmpeg", "-y",
        "-i", input_path,
        "-vf", vf,
        *encode_args(codec),
        "-c:a", "copy",
        output_path,
    ]


# ── Presets ──────────────────────────────────────────────────────
# Common crops for browser recordings.

CROP_PRESETS = {
    # Remove browser chrome (top ~5%).
    "no_browser_chrome": CropRegion(x=0, y=0.05, width=1, height=0.95),
    # Remove browser chrome and the OS taskbar.
    "content_only": CropRegion(x=0, y=0.05, width=1, height=0.9),
    # 4:3 center crop out of 16:9.
    "center_crop_4x3": CropRegion(x=0.125, y=0, width=0.75, height=1),
    "full": CropRegion(x=0, y=0, width=1, height=1),
}
