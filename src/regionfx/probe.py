"""Video metadata probe — VideoInfo from a media file via moviepy.

Only the CLI calls this, when a config omits its video section. The
planner itself never looks at media.
"""

from pathlib import Path

from moviepy import VideoFileClip

from .regions import VideoInfo


def probe_video_info(path: str | Path) -> VideoInfo:
    """Read width, height, duration, fps and audio presence.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if not Path(path).exists():
        raise FileNotFoundError(f"Input video not found: {path}")

    with VideoFileClip(str(path)) as clip:
        width, height = clip.size
        return VideoInfo(
            width=int(width),
            height=int(height),
            duration_ms=round(clip.duration * 1000),
            fps=float(clip.fps),
            has_audio=clip.audio is not None,
        )
