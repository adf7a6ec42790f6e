"""Region and config values consumed by the effect generators.

Every value here is a frozen dataclass: generators read them, never
mutate them. Times are milliseconds relative to the source clip.
Spatial values are normalized to 0-1 unless noted otherwise.

Closed variant sets (annotation type, arrow direction, background type)
are str-valued enums, so values loaded from YAML/JSON compare equal to
their plain string form.
"""

from dataclasses import dataclass, field
from enum import Enum


# ── Zoom ─────────────────────────────────────────────────────────

# Magnification per discrete zoom depth.
ZOOM_DEPTH_SCALES = {
    1: 1.25,
    2: 1.5,
    3: 1.8,
    4: 2.2,
    5: 3.5,
    6: 5.0,
}

DEFAULT_TRANSITION_MS = 320


@dataclass(frozen=True)
class ZoomFocus:
    cx: float
    cy: float


@dataclass(frozen=True)
class ZoomRegion:
    id: str
    start_ms: float
    end_ms: float
    depth: int
    focus: ZoomFocus

    @property
    def scale(self) -> float:
        return ZOOM_DEPTH_SCALES[self.depth]


@dataclass(frozen=True)
class ZoomConfig:
    regions: tuple[ZoomRegion, ...] = ()
    transition_ms: float = DEFAULT_TRANSITION_MS


# ── Crop ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CropRegion:
    x: float = 0.0
    y: float = 0.0
    width: float = 1.0
    height: float = 1.0

    @property
    def is_full_frame(self) -> bool:
        return (
            self.x == 0 and self.y == 0
            and self.width == 1 and self.height == 1
        )


DEFAULT_CROP_REGION = CropRegion()


# ── Trim ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TrimRegion:
    """A span to REMOVE from the clip."""

    id: str
    start_ms: float
    end_ms: float


# ── Annotations ──────────────────────────────────────────────────


class AnnotationType(str, Enum):
    TEXT = "text"
    ARROW = "arrow"


class ArrowDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    UP_RIGHT = "up-right"
    UP_LEFT = "up-left"
    DOWN_RIGHT = "down-right"
    DOWN_LEFT = "down-left"


@dataclass(frozen=True)
class AnnotationRegion:
    """Text or arrow drawn between start_ms and end_ms.

    x/y are percentages (0-100) of the canvas. Text fields are ignored
    for arrows and arrow fields are ignored for text.
    """

    id: str
    start_ms: float
    end_ms: float
    type: str
    x: float
    y: float
    text: str | None = None
    font_size: int = 32
    font_color: str = "#ffffff"
    font_family: str = "sans-serif"
    background_color: str | None = None
    arrow_direction: str = ArrowDirection.RIGHT.value
    arrow_color: str = "#34B27B"
    arrow_size: int = 60


# ── Background ───────────────────────────────────────────────────


class BackgroundType(str, Enum):
    COLOR = "color"
    GRADIENT = "gradient"
    IMAGE = "image"
    BLUR = "blur"


@dataclass(frozen=True)
class BackgroundConfig:
    type: str = BackgroundType.COLOR.value
    color: str = "#000000"
    gradient: str | None = None
    image_path: str | None = None
    blur_radius: int = 20
    padding: float = 0.0
    border_radius: int = 0


# ── Pipeline input ───────────────────────────────────────────────


@dataclass(frozen=True)
class VideoInfo:
    width: int
    height: int
    duration_ms: float
    fps: float
    has_audio: bool = True


@dataclass(frozen=True)
class ProcessingConfig:
    input_path: str
    output_path: str
    video: VideoInfo
    zoom: ZoomConfig | None = None
    crop: CropRegion | None = None
    trim: tuple[TrimRegion, ...] = field(default_factory=tuple)
    background: BackgroundConfig | None = None
    annotations: tuple[AnnotationRegion, ...] = field(default_factory=tuple)
    output_width: int | None = None
    output_height: int | None = None
    output_fps: float | None = None

    @property
    def canvas_size(self) -> tuple[int, int]:
        """Output canvas (output override, else source dimensions)."""
        return (
            self.output_width or self.video.width,
            self.output_height or self.video.height,
        )
