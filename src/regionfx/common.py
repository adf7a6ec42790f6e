"""regionfx.common — shared utilities for config loading and command building.

Contains: color parsing/conversion, path variable resolution, encoder
arguments, and ffmpeg executable lookup.
"""

import re
import shutil
import subprocess

import imageio_ffmpeg
from PIL import ImageColor


# ── Color utilities ────────────────────────────────────────────────


def parse_color(value: str) -> tuple[int, int, int]:
    """Parse '#RRGGBB', '#RGB' or a named color to an (R, G, B) tuple.

    Raises ValueError for anything Pillow does not recognize.
    """
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        raise ValueError(f"Unknown color: '{value}'") from None
    return rgb[:3]


def to_ffmpeg_color(value: str) -> str:
    """Convert a config color to ffmpeg color syntax.

    '#RRGGBB' becomes '0xRRGGBB'; 'transparent' becomes fully
    transparent black; color names pass through unchanged.
    """
    if value == "transparent":
        return "0x00000000"
    if value.startswith("#"):
        return f"0x{value[1:]}"
    return value


def validate_color(value: str, field: str) -> str:
    """Return value unchanged if it is a usable color, else raise."""
    if value == "transparent":
        return value
    try:
        parse_color(value)
    except ValueError:
        raise ValueError(f"{field}: unknown color '{value}'") from None
    return value


# ── Path utilities ─────────────────────────────────────────────────


def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Encoding ───────────────────────────────────────────────────────


def encode_args(codec: str = "libx264") -> list[str]:
    """Video encoder arguments for a re-encoding pass."""
    if codec == "h264_nvenc":
        return ["-c:v", codec, "-preset", "fast", "-cq", "18"]
    return ["-c:v", codec, "-preset", "fast", "-crf", "18"]


def ffmpeg_executable() -> str:
    """Path to ffmpeg: the one on PATH, else the imageio-ffmpeg bundle.

    The bundled static build has no drawtext (it ships without
    libfreetype), so a system ffmpeg is preferred when one exists.
    """
    return shutil.which("ffmpeg") or imageio_ffmpeg.get_ffmpeg_exe()


def ffmpeg_has_filter(name: str, executable: str | None = None) -> bool:
    """True if the ffmpeg binary lists filter `name` in `ffmpeg -filters`."""
    result = subprocess.run(
        [executable or ffmpeg_executable(), "-hide_banner", "-filters"],
        capture_output=True,
        text=True,
        check=True,
    )
    # Rows look like " TSC drawtext          V->V       Draw text ..."
    return any(line.split()[1:2] == [name] for line in result.stdout.splitlines())
