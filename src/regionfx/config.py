"""Processing config loader — effect regions from YAML or JSON.

Parses a config file into a ProcessingConfig. JSON is a subset of YAML,
so both go through yaml.safe_load. Keys may be snake_case or camelCase
(startMs and start_ms are the same field). Follows the same ${var}
path resolution as the path fields of other manifests.

Config schema:
  input: "${raw}/recording.mp4"
  output: "${out}/final.mp4"
  paths:
    raw: "/data/recordings"
    out: "/data/renders"
  video:                        # optional when a probe is supplied
    width: 1920
    height: 1080
    duration_ms: 60000
    fps: 30
    has_audio: true
  zoom:
    transition_ms: 320
    regions:
      - {id: z1, start_ms: 1000, end_ms: 3000, depth: 3, focus: {cx: 0.5, cy: 0.5}}
  crop: {x: 0, y: 0.05, width: 1, height: 0.95}
  trim:
    - {id: t1, start_ms: 5000, end_ms: 10000}
  background: {type: color, color: "#1a1a2e", padding: 10, border_radius: 12}
  annotations:
    - {id: a1, type: text, text: "Hello", start_ms: 0, end_ms: 2000, x: 10, y: 10}
  output_width: 1920
  output_height: 1080
  output_fps: 30
"""

import json
import sys
from pathlib import Path
from typing import Callable

import yaml

from .common import resolve_path_vars, validate_color
from .regions import (
    ZOOM_DEPTH_SCALES,
    AnnotationRegion,
    AnnotationType,
    ArrowDirection,
    BackgroundConfig,
    BackgroundType,
    CropRegion,
    ProcessingConfig,
    TrimRegion,
    VideoInfo,
    ZoomConfig,
    ZoomFocus,
    ZoomRegion,
)


VALID_ANNOTATION_TYPES = {t.value for t in AnnotationType}

VALID_ARROW_DIRECTIONS = {d.value for d in ArrowDirection}

VALID_BACKGROUND_TYPES = {t.value for t in BackgroundType}


# ── Key lookup ────────────────────────────────────────────────────


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _get(raw: dict, name: str, default=None):
    """Look a field up by snake_case name, falling back to camelCase."""
    if name in raw:
        return raw[name]
    return raw.get(_camel(name), default)


def _has(raw: dict, name: str) -> bool:
    return name in raw or _camel(name) in raw


def _require(raw: dict, name: str, where: str):
    if not _has(raw, name):
        raise ValueError(f"{where}: missing required field '{name}'")
    return _get(raw, name)


def _time_span(raw: dict, where: str) -> tuple[float, float]:
    start = float(_require(raw, "start_ms", where))
    end = float(_require(raw, "end_ms", where))
    if start >= end:
        raise ValueError(f"{where}: start_ms ({start}) must be < end_ms ({end})")
    return start, end


# ── Section parsers ───────────────────────────────────────────────


def parse_video_info(raw: dict) -> VideoInfo:
    where = "video"
    width = int(_require(raw, "width", where))
    height = int(_require(raw, "height", where))
    duration_ms = float(_require(raw, "duration_ms", where))
    fps = float(_require(raw, "fps", where))
    if width <= 0 or height <= 0:
        raise ValueError(f"video: width/height must be > 0, got {width}x{height}")
    if duration_ms <= 0:
        raise ValueError(f"video: duration_ms must be > 0, got {duration_ms}")
    return VideoInfo(
        width=width,
        height=height,
        duration_ms=duration_ms,
        fps=fps,
        has_audio=bool(_get(raw, "has_audio", True)),
    )


def parse_zoom_region(raw: dict, index: int) -> ZoomRegion:
    where = f"Zoom region {index}"
    start, end = _time_span(raw, where)
    depth = int(_require(raw, "depth", where))
    if depth not in ZOOM_DEPTH_SCALES:
        raise ValueError(f"{where}: depth must be 1-6, got {depth}")
    focus = _require(raw, "focus", where)
    return ZoomRegion(
        id=str(_get(raw, "id", f"zoom-{index}")),
        start_ms=start,
        end_ms=end,
        depth=depth,
        focus=ZoomFocus(
            cx=float(_require(focus, "cx", f"{where}.focus")),
            cy=float(_require(focus, "cy", f"{where}.focus")),
        ),
    )


def parse_zoom(raw: dict) -> ZoomConfig:
    regions = tuple(
        parse_zoom_region(r, i) for i, r in enumerate(_get(raw, "regions") or [])
    )
    transition_ms = float(_get(raw, "transition_ms", 320))
    if transition_ms <= 0:
        raise ValueError(f"zoom: transition_ms must be > 0, got {transition_ms}")
    return ZoomConfig(regions=regions, transition_ms=transition_ms)


def parse_crop(raw: dict) -> CropRegion:
    return CropRegion(
        x=float(_get(raw, "x", 0)),
        y=float(_get(raw, "y", 0)),
        width=float(_get(raw, "width", 1)),
        height=float(_get(raw, "height", 1)),
    )


def parse_trim_region(raw: dict, index: int) -> TrimRegion:
    where = f"Trim region {index}"
    start, end = _time_span(raw, where)
    if start < 0:
        raise ValueError(f"{where}: start_ms must be >= 0, got {start}")
    return TrimRegion(
        id=str(_get(raw, "id", f"trim-{index}")),
        start_ms=start,
        end_ms=end,
    )


def parse_annotation(raw: dict, index: int) -> AnnotationRegion:
    where = f"Annotation {index}"
    start, end = _time_span(raw, where)

    ann_type = _require(raw, "type", where)
    if ann_type not in VALID_ANNOTATION_TYPES:
        print(
            f"WARNING: {where}: unknown type '{ann_type}', it will not be drawn",
            file=sys.stderr,
        )

    direction = _get(raw, "arrow_direction", ArrowDirection.RIGHT.value)
    if direction not in VALID_ARROW_DIRECTIONS:
        print(
            f"WARNING: {where}: unknown arrow_direction '{direction}', drawing it pointing right",
            file=sys.stderr,
        )

    font_color = validate_color(_get(raw, "font_color", "#ffffff"), f"{where}.font_color")
    arrow_color = validate_color(_get(raw, "arrow_color", "#34B27B"), f"{where}.arrow_color")
    background_color = _get(raw, "background_color")
    if background_color is not None:
        validate_color(background_color, f"{where}.background_color")

    return AnnotationRegion(
        id=str(_get(raw, "id", f"annotation-{index}")),
        start_ms=start,
        end_ms=end,
        type=ann_type,
        x=float(_require(raw, "x", where)),
        y=float(_require(raw, "y", where)),
        text=_get(raw, "text"),
        font_size=int(_get(raw, "font_size", 32)),
        font_color=font_color,
        font_family=_get(raw, "font_family", "sans-serif"),
        background_color=background_color,
        arrow_direction=direction,
        arrow_color=arrow_color,
        arrow_size=int(_get(raw, "arrow_size", 60)),
    )


def parse_background(raw: dict, paths: dict[str, str]) -> BackgroundConfig:
    bg_type = _get(raw, "type", BackgroundType.COLOR.value)
    if bg_type not in VALID_BACKGROUND_TYPES:
        raise ValueError(
            f"background: unknown type '{bg_type}'. "
            f"Valid: {sorted(VALID_BACKGROUND_TYPES)}"
        )

    padding = float(_get(raw, "padding", 0))
    if not 0 <= padding <= 100:
        raise ValueError(f"background: padding must be 0-100, got {padding}")

    image_path = _get(raw, "image_path")
    if image_path is not None:
        image_path = resolve_path_vars(str(image_path), paths)
    if bg_type == BackgroundType.IMAGE and not image_path:
        raise ValueError("background: type 'image' requires image_path")

    return BackgroundConfig(
        type=bg_type,
        color=validate_color(_get(raw, "color", "#000000"), "background.color"),
        gradient=_get(raw, "gradient"),
        image_path=image_path,
        blur_radius=int(_get(raw, "blur_radius", 20)),
        padding=padding,
        border_radius=int(_get(raw, "border_radius", 0)),
    )


# ── Config loading ────────────────────────────────────────────────


def _output_dimension(raw: dict, name: str) -> int | None:
    value = _get(raw, name)
    if value is None:
        return None
    size = int(value)
    if size <= 0:
        raise ValueError(f"{name} must be > 0, got {size}")
    return size


def parse_processing_config(
    raw: dict,
    probe: Callable[[str], VideoInfo] | None = None,
) -> ProcessingConfig:
    """Validate and normalize a raw config dict.

    Processing pipeline:
      1. Resolve ${path} variables in input and output.
      2. Parse video metadata, or probe the input when it is absent.
      3. Parse each effect section that is present.

    Args:
        raw: Parsed YAML/JSON mapping.
        probe: Called with the resolved input path when the config has
            no 'video' section. Without a probe the section is required.

    Raises:
        ValueError: Missing/invalid fields.
    """
    if not isinstance(raw, dict):
        raise ValueError("Config: expected a mapping at the top level")

    paths = raw.get("paths", {})
    input_path = _get(raw, "input") or _get(raw, "input_path")
    output_path = _get(raw, "output") or _get(raw, "output_path")
    if not input_path:
        raise ValueError("Config: missing required 'input' field")
    if not output_path:
        raise ValueError("Config: missing required 'output' field")
    input_path = resolve_path_vars(str(input_path), paths)
    output_path = resolve_path_vars(str(output_path), paths)

    if "video" in raw:
        video = parse_video_info(raw["video"])
    elif probe is not None:
        video = probe(input_path)
    else:
        raise ValueError("Config: missing required 'video' section")

    zoom = parse_zoom(raw["zoom"]) if raw.get("zoom") else None
    crop = parse_crop(raw["crop"]) if raw.get("crop") else None
    background = (
        parse_background(raw["background"], paths) if raw.get("background") else None
    )
    trim = tuple(parse_trim_region(r, i) for i, r in enumerate(raw.get("trim") or []))
    annotations = tuple(
        parse_annotation(a, i) for i, a in enumerate(raw.get("annotations") or [])
    )

    seen_ids = set()
    for region in trim:
        if region.id in seen_ids:
            raise ValueError(f"Duplicate trim region id: '{region.id}'")
        seen_ids.add(region.id)

    output_fps = _get(raw, "output_fps")
    return ProcessingConfig(
        input_path=input_path,
        output_path=output_path,
        video=video,
        zoom=zoom,
        crop=crop,
        trim=trim,
        background=background,
        annotations=annotations,
        output_width=_output_dimension(raw, "output_width"),
        output_height=_output_dimension(raw, "output_height"),
        output_fps=float(output_fps) if output_fps is not None else None,
    )


def load_processing_config(
    config_path: str | Path,
    probe: Callable[[str], VideoInfo] | None = None,
) -> ProcessingConfig:
    """Load a YAML/JSON config file. See parse_processing_config."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)
    return parse_processing_config(raw, probe=probe)


def load_regions_arg(arg: str) -> list:
    """Parse a CLI regions argument: inline JSON, or a .json/.yaml file."""
    p = Path(arg)
    if p.suffix == ".json" and p.exists():
        with open(p) as f:
            return json.load(f)
    if p.suffix in {".yaml", ".yml"} and p.exists():
        with open(p) as f:
            return yaml.safe_load(f) or []
    return json.loads(arg)


def validate_config_paths(config: ProcessingConfig) -> None:
    """Check that the input video (and background image) exist on disk.

    Raises:
        FileNotFoundError: If an input file is missing.
    """
    if not Path(config.input_path).exists():
        raise FileNotFoundError(f"Input video not found: {config.input_path}")
    bg = config.background
    if bg is not None and bg.type == BackgroundType.IMAGE and bg.image_path:
        if not Path(bg.image_path).exists():
            raise FileNotFoundError(f"Background image not found: {bg.image_path}")
