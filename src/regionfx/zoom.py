"""Zoom/pan compiler: ZoomRegion list to an animated ffmpeg zoom filter.

Each region eases in over `transition_ms` before its start, holds the
zoomed crop box while active, and eases back out after its end. Two
consumers share that model:

  - The keyframe sampler, which walks the timeline at a fixed interval
    and blends full frame → dominant region by instantaneous strength.
    Useful for engines without expression support.
  - The schedule, an ordered list of time windows (lead-in, active,
    lead-out per region, regions sorted by start). The first window
    containing t decides the crop box, so when regions overlap the one
    that starts earlier wins. The schedule is evaluated directly by
    evaluate_schedule() and rendered to ffmpeg expression text by
    build_crop_expressions(); both walk the same windows.

Output is always scaled back to the input resolution.
"""

from dataclasses import dataclass

from .geometry import clamp, round_half_up, smoothstep
from .regions import (
    DEFAULT_TRANSITION_MS,
    ZOOM_DEPTH_SCALES,
    ZoomFocus,
    ZoomRegion,
)


LEAD_IN = "lead_in"
ACTIVE = "active"
LEAD_OUT = "lead_out"


# ── Strength model ───────────────────────────────────────────────


def _check_transition(transition_ms: float) -> None:
    if transition_ms <= 0:
        raise ValueError(f"transition_ms must be > 0, got {transition_ms}")


def compute_region_strength(
    region: ZoomRegion,
    time_ms: float,
    transition_ms: float = DEFAULT_TRANSITION_MS,
) -> float:
    """Strength (0-1) of a region at time_ms, eased at both ends."""
    _check_transition(transition_ms)
    lead_in_start = region.start_ms - transition_ms
    lead_out_end = region.end_ms + transition_ms

    if time_ms < lead_in_start or time_ms > lead_out_end:
        return 0.0

    fade_in = smoothstep((time_ms - lead_in_start) / transition_ms)
    fade_out = smoothstep((lead_out_end - time_ms) / transition_ms)
    return min(fade_in, fade_out)


def find_dominant_region(
    regions: list[ZoomRegion],
    time_ms: float,
    transition_ms: float = DEFAULT_TRANSITION_MS,
) -> tuple[ZoomRegion | None, float]:
    """Region with the strictly highest strength at time_ms.

    Ties keep the first region in input order. Returns (None, 0.0) when
    no region has any strength.
    """
    best = None
    best_strength = 0.0
    for region in regions:
        s = compute_region_strength(region, time_ms, transition_ms)
        if s > best_strength:
            best_strength = s
            best = region
    return best, best_strength


def clamp_focus(focus: ZoomFocus, depth: int) -> ZoomFocus:
    """Pull the focus inward so the zoomed window stays inside the frame."""
    scale = ZOOM_DEPTH_SCALES[depth]
    margin = 1 / (2 * scale)
    return ZoomFocus(
        cx=clamp(focus.cx, margin, 1 - margin),
        cy=clamp(focus.cy, margin, 1 - margin),
    )


# ── Keyframe sampling ────────────────────────────────────────────


@dataclass(frozen=True)
class ZoomKeyframe:
    """Crop state at one instant, as fractions of the input frame."""

    time_ms: float
    crop_width: float
    crop_height: float
    center_x: float
    center_y: float


def sample_zoom_keyframes(
    regions: list[ZoomRegion],
    duration_ms: float,
    sample_interval_ms: float = 33,
    transition_ms: float = DEFAULT_TRANSITION_MS,
) -> list[ZoomKeyframe]:
    """Sample the zoom trajectory every sample_interval_ms (~30fps default).

    Samples run from 0 up to and including duration_ms.
    """
    if sample_interval_ms <= 0:
        raise ValueError(
            f"sample_interval_ms must be > 0, got {sample_interval_ms}"
        )

    keyframes = []
    t = 0
    while t <= duration_ms:
        region, strength = find_dominant_region(regions, t, transition_ms)

        crop_w = crop_h = 1.0
        cx = cy = 0.5
        if region is not None and strength > 0:
            scale = region.scale
            focus = clamp_focus(region.focus, region.depth)
            # Blend between no zoom (1.0) and full zoom (1/scale).
            crop_w = crop_h = 1 / (1 + (scale - 1) * strength)
            cx = 0.5 + (focus.cx - 0.5) * strength
            cy = 0.5 + (focus.cy - 0.5) * strength

        keyframes.append(ZoomKeyframe(t, crop_w, crop_h, cx, cy))
        t += sample_interval_ms

    return keyframes


# ── Crop boxes ───────────────────────────────────────────────────


@dataclass(frozen=True)
class CropBox:
    """Pixel crop window: size (w, h) and top-left offset (x, y)."""

    w: float
    h: float
    x: float
    y: float


def zoomed_crop_box(
    focus: ZoomFocus, depth: int, width: int, height: int,
) -> CropBox:
    """Pixel crop box for a fully applied zoom at the given depth."""
    scale = ZOOM_DEPTH_SCALES[depth]
    clamped = clamp_focus(focus, depth)
    crop_w = round_half_up(width / scale)
    crop_h = round_half_up(height / scale)
    return CropBox(
        w=crop_w,
        h=crop_h,
        x=round_half_up(clamped.cx * width - crop_w / 2),
        y=round_half_up(clamped.cy * height - crop_h / 2),
    )


def generate_static_zoom_filter(
    focus: ZoomFocus, depth: int, input_width: int, input_height: int,
) -> str:
    """Fixed zoom: crop to the depth's box, then scale back up."""
    box = zoomed_crop_box(focus, depth, input_width, input_height)
    return (
        f"crop={box.w}:{box.h}:{box.x}:{box.y},"
        f"scale={input_width}:{input_height}:flags=lanczos"
    )


# ── Schedule ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class ZoomWindow:
    """One closed time window [start_s, end_s] of the zoom schedule.

    kind decides how the value moves between the full frame and target:
    LEAD_IN eases toward target, ACTIVE holds target, LEAD_OUT eases
    back to the full frame.
    """

    kind: str
    start_s: float
    end_s: float
    transition_s: float
    target: CropBox

    def contains(self, t: float) -> bool:
        return self.start_s <= t <= self.end_s

    def progress(self, t: float) -> float:
        """Eased fraction of the target applied at t (1.0 = fully zoomed)."""
        if self.kind == LEAD_IN:
            return smoothstep((t - self.start_s) / self.transition_s)
        if self.kind == LEAD_OUT:
            return smoothstep((self.end_s - t) / self.transition_s)
        return 1.0


def build_zoom_schedule(
    regions: list[ZoomRegion],
    width: int,
    height: int,
    transition_ms: float = DEFAULT_TRANSITION_MS,
) -> tuple[ZoomWindow, ...]:
    """Ordered windows for all regions, regions sorted by start time."""
    _check_transition(transition_ms)
    trans_s = transition_ms / 1000
    windows = []
    for region in sorted(regions, key=lambda r: r.start_ms):
        target = zoomed_crop_box(region.focus, region.depth, width, height)
        active_start = region.start_ms / 1000
        active_end = region.end_ms / 1000
        windows.extend([
            ZoomWindow(LEAD_IN, active_start - trans_s, active_start, trans_s, target),
            ZoomWindow(ACTIVE, active_start, active_end, trans_s, target),
            ZoomWindow(LEAD_OUT, active_end, active_end + trans_s, trans_s, target),
        ])
    return tuple(windows)


def _full_box(width: int, height: int) -> CropBox:
    return CropBox(w=width, h=height, x=0, y=0)


def evaluate_schedule(
    schedule: tuple[ZoomWindow, ...], t: float, width: int, height: int,
) -> CropBox:
    """Crop box at t seconds: first matching window wins, else full frame."""
    full = _full_box(width, height)
    for window in schedule:
        if window.contains(t):
            p = window.progress(t)
            target = window.target
            return CropBox(
                w=full.w + (target.w - full.w) * p,
                h=full.h + (target.h - full.h) * p,
                x=full.x + (target.x - full.x) * p,
                y=full.y + (target.y - full.y) * p,
            )
    return full


def _window_expression(
    window: ZoomWindow, full: float, zoomed: float, time_var: str = "t",
) -> str:
    """Render `if(between(t,a,b), value, `, left open for the next branch."""
    start = f"{window.start_s:.3f}"
    end = f"{window.end_s:.3f}"
    dur = f"{window.transition_s:.3f}"
    cond = f"between({time_var},{start},{end})"

    if window.kind == ACTIVE:
        return f"if({cond}, {zoomed}, "

    if window.kind == LEAD_IN:
        progress = f"({time_var}-{start})/{dur}"
    else:
        progress = f"({end}-{time_var})/{dur}"
    eased = f"(3*pow({progress},2)-2*pow({progress},3))"
    return f"if({cond}, {full}+({zoomed}-{full})*{eased}, "


def render_schedule_expression(
    schedule: tuple[ZoomWindow, ...],
    param: str,
    full: CropBox,
    time_var: str = "t",
) -> str:
    """Render one crop parameter ("w", "h", "x" or "y") as ffmpeg text."""
    default = getattr(full, param)
    branches = "".join(
        _window_expression(w, default, getattr(w.target, param), time_var)
        for w in schedule
    )
    return f"{branches}{default}" + ")" * len(schedule)


def build_crop_expressions(
    regions: list[ZoomRegion],
    width: int,
    height: int,
    transition_ms: float = DEFAULT_TRANSITION_MS,
    time_var: str = "t",
) -> dict[str, str]:
    """Time-based crop expressions keyed by parameter: w, h, x, y.

    time_var names the timestamp variable of the consuming filter: `t`
    for crop/overlay style filters, `it` for zoompan.
    """
    full = _full_box(width, height)
    schedule = build_zoom_schedule(regions, width, height, transition_ms)
    return {
        param: render_schedule_expression(schedule, param, full, time_var)
        for param in ("w", "h", "x", "y")
    }


def generate_zoom_filter(
    regions: list[ZoomRegion],
    input_width: int,
    input_height: int,
    transition_ms: float = DEFAULT_TRANSITION_MS,
    fps: float = 30,
) -> str:
    """Animated zoom filter for the given regions.

    The crop box is rendered through zoompan, which re-evaluates its
    expressions on every frame (crop only evaluates w/h once at setup).
    zoom = W / crop_w, and x/y are the crop box's top-left corner in
    input pixels. d=1 emits one output frame per input frame, so fps
    must match the input to keep the duration.
    """
    if not regions:
        return f"scale={input_width}:{input_height}"

    parts = build_crop_expressions(
        regions, input_width, input_height, transition_ms, time_var="it",
    )
    return (
        f"zoompan=z='{input_width}/({parts['w']})'"
        f":x='{parts['x']}':y='{parts['y']}'"
        f":d=1:s={input_width}x{input_height}:fps={fps:g}"
    )


# ── Presets ──────────────────────────────────────────────────────
# Common focus targets in a browser window recording.

ZOOM_PRESETS = {
    "center": ZoomFocus(0.5, 0.5),
    "search_bar": ZoomFocus(0.5, 0.06),
    "tab_bar": ZoomFocus(0.3, 0.02),
    "search_results": ZoomFocus(0.5, 0.35),
    "definition_card": ZoomFocus(0.75, 0.35),
    "image_grid": ZoomFocus(0.5, 0.5),
}


def element_focus(x: float, y: float) -> ZoomFocus:
    """Focus on an arbitrary element position, clamped into the frame."""
    return ZoomFocus(cx=clamp(x, 0, 1), cy=clamp(y, 0, 1))
