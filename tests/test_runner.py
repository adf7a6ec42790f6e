"""Tests for running planned passes.

Uses the shared source_video fixture from conftest.py.
Uses moviepy for probing outputs (imageio_ffmpeg does NOT bundle ffprobe).
"""

import subprocess

import pytest
from moviepy import VideoFileClip

from regionfx.pipeline import PipelineStep, build_pipeline
from regionfx.regions import (
    AnnotationRegion,
    BackgroundConfig,
    CropRegion,
    ProcessingConfig,
    TrimRegion,
    VideoInfo,
    ZoomConfig,
    ZoomFocus,
    ZoomRegion,
)


SOURCE_INFO = VideoInfo(width=320, height=240, duration_ms=5000, fps=10)


def _config(source, output, **overrides):
    c = dict(input_path=str(source), output_path=str(output), video=SOURCE_INFO)
    c.update(overrides)
    return ProcessingConfig(**c)


class TestResolveCommand:
    def test_swaps_bare_ffmpeg(self):
        from regionfx.common import ffmpeg_executable
        from regionfx.runner import resolve_command

        cmd = resolve_command(("ffmpeg", "-y", "-i", "a.mp4", "b.mp4"))
        assert cmd[0] == ffmpeg_executable()
        assert cmd[1:] == ["-y", "-i", "a.mp4", "b.mp4"]

    def test_leaves_other_commands(self):
        from regionfx.runner import resolve_command

        assert resolve_command(["/usr/bin/ffmpeg", "-version"])[0] == "/usr/bin/ffmpeg"


class TestRunSteps:
    def test_trim_and_crop(self, source_video, tmp_path):
        from regionfx.runner import run_steps

        out = tmp_path / "render" / "final.mp4"
        config = _config(
            source_video, out,
            trim=(TrimRegion("t1", 1000, 2000),),
            crop=CropRegion(x=0, y=0.1, width=1, height=0.8),
        )
        steps = build_pipeline(config)
        assert len(steps) == 2

        run_steps(steps, quiet=True)
        assert out.exists()
        assert (tmp_path / "render" / "final_step0.mp4").exists()
        with VideoFileClip(str(out)) as clip:
            assert tuple(clip.size) == (320, 192)
            assert 3.5 < clip.duration < 4.5

    def test_clean_removes_intermediates(self, source_video, tmp_path, capsys):
        from regionfx.runner import run_steps

        out = tmp_path / "final.mp4"
        config = _config(
            source_video, out,
            trim=(TrimRegion("t1", 1000, 2000),),
            crop=CropRegion(x=0, y=0.1, width=1, height=0.8),
        )
        run_steps(build_pipeline(config), keep_intermediates=False, quiet=True)
        assert out.exists()
        assert not (tmp_path / "final_step0.mp4").exists()
        assert "CLEAN" in capsys.readouterr().out

    def test_reports_progress(self, source_video, tmp_path, capsys):
        from regionfx.runner import run_steps

        steps = build_pipeline(_config(source_video, tmp_path / "copy.mp4"))
        run_steps(steps, quiet=True)
        assert "[1/1] Copy (no effects)" in capsys.readouterr().out

    def test_failure_stops_later_steps(self, tmp_path):
        from regionfx.runner import run_steps

        steps = [
            PipelineStep("Broken", ("ffmpeg", "-y", "-i", str(tmp_path / "missing.mp4"),
                                    str(tmp_path / "a.mp4"))),
            PipelineStep("Never", ("ffmpeg", "-y", "-i", str(tmp_path / "a.mp4"),
                                   str(tmp_path / "b.mp4"))),
        ]
        with pytest.raises(subprocess.CalledProcessError):
            run_steps(steps, quiet=True)
        assert not (tmp_path / "b.mp4").exists()


def _render(config):
    """Run the planned passes and return (size, duration) of the output."""
    from regionfx.runner import run_steps

    run_steps(build_pipeline(config), quiet=True)
    out = config.output_path
    with VideoFileClip(out) as clip:
        return tuple(clip.size), clip.duration


ZOOM = ZoomConfig(regions=(
    ZoomRegion(id="z1", start_ms=1000, end_ms=3000, depth=3, focus=ZoomFocus(0.3, 0.4)),
))


class TestRenderEffects:
    """Each effect pass renders through ffmpeg at the source size and length."""

    def test_zoom_pass(self, source_video, tmp_path):
        out = tmp_path / "zoom.mp4"
        size, duration = _render(_config(source_video, out, zoom=ZOOM))
        assert out.exists()
        assert size == (320, 240)
        assert 4.5 < duration < 5.5

    def test_crop_then_zoom(self, source_video, tmp_path):
        out = tmp_path / "crop_zoom.mp4"
        size, duration = _render(_config(
            source_video, out,
            crop=CropRegion(x=0, y=0.1, width=1, height=0.8),
            zoom=ZOOM,
        ))
        assert size == (320, 192)
        assert 4.5 < duration < 5.5

    def test_arrow_annotation_pass(self, source_video, tmp_path):
        out = tmp_path / "arrow.mp4"
        arrow = AnnotationRegion(
            id="a1", start_ms=500, end_ms=4000, type="arrow", x=50, y=50,
            arrow_direction="down-left", arrow_size=40,
        )
        size, duration = _render(_config(source_video, out, annotations=(arrow,)))
        assert out.exists()
        assert size == (320, 240)
        assert 4.5 < duration < 5.5

    def test_text_annotation_pass(self, source_video, tmp_path):
        from regionfx.common import ffmpeg_has_filter

        if not ffmpeg_has_filter("drawtext"):
            pytest.skip("ffmpeg binary has no drawtext filter")

        out = tmp_path / "text.mp4"
        note = AnnotationRegion(
            id="t1", start_ms=0, end_ms=3000, type="text", x=10, y=10,
            text="50%: it's done", font_size=18, background_color="#000000",
        )
        size, duration = _render(_config(source_video, out, annotations=(note,)))
        assert size == (320, 240)
        assert 4.5 < duration < 5.5

    def test_disjoint_cuts_pass(self, source_video, tmp_path):
        out = tmp_path / "cuts.mp4"
        cuts = (
            TrimRegion("a", 500, 1000),
            TrimRegion("b", 2000, 2500),
            TrimRegion("c", 4000, 4500),
        )
        size, duration = _render(_config(source_video, out, trim=cuts))
        assert size == (320, 240)
        assert 3.2 < duration < 3.8

    @pytest.mark.parametrize("kind", ["color", "blur", "gradient"])
    def test_background_pass(self, source_video, tmp_path, kind):
        out = tmp_path / f"{kind}.mp4"
        bg = BackgroundConfig(type=kind, color="#1a1a2e", blur_radius=10, padding=10)
        size, duration = _render(_config(source_video, out, background=bg))
        assert out.exists()
        assert size == (320, 240)
        assert 4.5 < duration < 5.5

    def test_image_background_pass(self, source_video, tmp_path):
        from PIL import Image

        wall = tmp_path / "wall.png"
        Image.new("RGB", (64, 48), "purple").save(wall)
        out = tmp_path / "image.mp4"
        bg = BackgroundConfig(type="image", image_path=str(wall), padding=10)
        size, duration = _render(_config(source_video, out, background=bg))
        assert out.exists()
        assert size == (320, 240)
        assert 4.5 < duration < 5.5

    def test_rounded_corners_pass(self, source_video, tmp_path):
        out = tmp_path / "rounded.mp4"
        bg = BackgroundConfig(type="color", color="#ffffff", padding=10, border_radius=12)
        size, duration = _render(_config(source_video, out, background=bg))
        assert size == (320, 240)
        assert 4.5 < duration < 5.5

    def test_background_canvas_size_override(self, source_video, tmp_path):
        out = tmp_path / "canvas.mp4"
        bg = BackgroundConfig(type="color", color="#1a1a2e", padding=10)
        size, duration = _render(_config(
            source_video, out, background=bg, output_width=400, output_height=300,
        ))
        assert size == (400, 300)
        assert 4.5 < duration < 5.5


class TestExecutePlan:
    def test_dry_run_prints_commands(self, capsys):
        from regionfx.runner import execute_plan

        steps = [
            PipelineStep("First", ("ffmpeg", "-i", "a b.mp4", "c.mp4")),
            PipelineStep("Second", ("ffmpeg", "-i", "c.mp4", "d.mp4")),
        ]
        execute_plan(steps, dry_run=True)
        out = capsys.readouterr().out
        assert "# Step 1: First\nffmpeg -i 'a b.mp4' c.mp4\n" in out
        assert "# Step 2: Second\nffmpeg -i c.mp4 d.mp4\n" in out

    def test_dry_run_runs_nothing(self, monkeypatch):
        from regionfx import runner

        def fail(*args, **kwargs):
            raise AssertionError("subprocess.run should not be called")

        monkeypatch.setattr(runner.subprocess, "run", fail)
        runner.execute_plan([PipelineStep("x", ("ffmpeg", "out.mp4"))], dry_run=True)

    def test_failure_exits_with_ffmpeg_code(self, monkeypatch, tmp_path, capsys):
        from regionfx import runner

        def fail(cmd, **kwargs):
            raise subprocess.CalledProcessError(3, cmd)

        monkeypatch.setattr(runner.subprocess, "run", fail)
        steps = [PipelineStep("x", ("ffmpeg", "-i", "in.mp4", str(tmp_path / "out.mp4")))]
        with pytest.raises(SystemExit) as exc_info:
            runner.execute_plan(steps)
        assert exc_info.value.code == 3
        assert "exit code 3" in capsys.readouterr().err
