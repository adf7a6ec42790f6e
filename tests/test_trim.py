"""Tests for trim planning and command building."""

import pytest

from regionfx.regions import TrimRegion
from regionfx.trim import (
    NoKeptSegmentsError,
    Segment,
    build_concat_command,
    build_seek_command,
    build_trim_command,
    compute_effective_duration,
    compute_kept_segments,
    generate_trim_filter,
)


def _cut(start, end, id="t"):
    return TrimRegion(id=id, start_ms=start, end_ms=end)


class TestKeptSegments:
    def test_no_cuts_keeps_everything(self):
        assert compute_kept_segments([], 60000) == [Segment(0, 60.0)]

    def test_middle_cut(self):
        segments = compute_kept_segments([_cut(5000, 10000)], 60000)
        assert segments == [Segment(0, 5.0), Segment(10.0, 60.0)]

    def test_unsorted_input(self):
        cuts = [_cut(7000, 8000, "b"), _cut(1000, 2000, "a")]
        segments = compute_kept_segments(cuts, 10000)
        assert segments == [Segment(0, 1.0), Segment(2.0, 7.0), Segment(8.0, 10.0)]

    def test_cut_at_start(self):
        assert compute_kept_segments([_cut(0, 2000)], 10000) == [Segment(2.0, 10.0)]

    def test_overlapping_cuts(self):
        cuts = [_cut(1000, 5000, "a"), _cut(3000, 8000, "b")]
        assert compute_kept_segments(cuts, 10000) == [Segment(0, 1.0), Segment(8.0, 10.0)]

    def test_cut_covers_everything(self):
        assert compute_kept_segments([_cut(0, 10000)], 10000) == []


class TestEffectiveDuration:
    def test_single_cut(self):
        assert compute_effective_duration([_cut(5000, 10000)], 60000) == 55000

    def test_no_cuts(self):
        assert compute_effective_duration([], 60000) == 60000

    def test_overlap_counted_twice(self):
        cuts = [_cut(1000, 5000, "a"), _cut(3000, 8000, "b")]
        assert compute_effective_duration(cuts, 10000) == 1000

    def test_disjoint_cuts_each_subtract_their_length(self):
        cuts = [_cut(1000, 1500, "a"), _cut(4000, 6000, "b"), _cut(9000, 9250, "c")]
        total = 10000
        duration = total
        for i, cut in enumerate(cuts, start=1):
            remaining = compute_effective_duration(cuts[:i], total)
            assert duration - remaining == cut.end_ms - cut.start_ms
            duration = remaining
        assert duration == 7250

    def test_disjoint_cuts_match_kept_segments(self):
        cuts = [_cut(9000, 9250, "c"), _cut(1000, 1500, "a"), _cut(4000, 6000, "b")]
        kept = compute_kept_segments(cuts, 10000)
        assert len(kept) == 4
        kept_ms = sum((s.end_s - s.start_s) * 1000 for s in kept)
        assert kept_ms == pytest.approx(compute_effective_duration(cuts, 10000))


class TestTrimFilter:
    def test_tail_only(self):
        f = generate_trim_filter([_cut(50000, 60000)], 60000)
        assert f == (
            "[0:v]trim=start=0:end=50,setpts=PTS-STARTPTS[outv]; "
            "[0:a]atrim=start=0:end=50,asetpts=PTS-STARTPTS[outa]"
        )

    def test_tail_only_without_audio(self):
        f = generate_trim_filter([_cut(50000, 60000)], 60000, has_audio=False)
        assert f == "[0:v]trim=start=0:end=50,setpts=PTS-STARTPTS[outv]"

    def test_two_segments(self):
        f = generate_trim_filter([_cut(5000, 10000)], 60000)
        assert f == (
            "[0:v]trim=start=0.000:end=5.000,setpts=PTS-STARTPTS[v0]; "
            "[0:a]atrim=start=0.000:end=5.000,asetpts=PTS-STARTPTS[a0]; "
            "[0:v]trim=start=10.000:end=60.000,setpts=PTS-STARTPTS[v1]; "
            "[0:a]atrim=start=10.000:end=60.000,asetpts=PTS-STARTPTS[a1]; "
            "[v0][v1][a0][a1]concat=n=2:v=1:a=1[outv][outa]"
        )

    def test_without_audio_has_no_audio_pads(self):
        f = generate_trim_filter([_cut(5000, 10000)], 60000, has_audio=False)
        assert "[0:a]" not in f
        assert f.endswith("[v0][v1]concat=n=2:v=1:a=0[outv]")

    def test_everything_cut_raises(self):
        with pytest.raises(NoKeptSegmentsError):
            generate_trim_filter([_cut(0, 60000)], 60000)

    def test_no_kept_segments_is_a_value_error(self):
        with pytest.raises(ValueError):
            generate_trim_filter([_cut(0, 5000, "a"), _cut(4000, 60000, "b")], 60000)


class TestTrimCommands:
    def test_no_cuts_stream_copies(self):
        cmd = build_trim_command("in.mp4", "out.mp4", [], 60000)
        assert cmd == ["ffmpeg", "-y", "-i", "in.mp4", "-c", "copy", "out.mp4"]

    def test_single_survivor_seeks(self):
        cmd = build_trim_command("in.mp4", "out.mp4", [_cut(0, 2000)], 10000)
        assert cmd[:8] == ["ffmpeg", "-y", "-ss", "2.000", "-to", "10.000", "-i", "in.mp4"]
        assert "-filter_complex" not in cmd
        assert cmd[-3:] == ["-c:a", "aac", "out.mp4"]

    def test_seek_without_audio(self):
        cmd = build_seek_command("in.mp4", "out.mp4", Segment(1.0, 2.0), has_audio=False)
        assert cmd[-2:] == ["-an", "out.mp4"]

    def test_several_segments_concat(self):
        cmd = build_trim_command("in.mp4", "out.mp4", [_cut(5000, 10000)], 60000)
        assert "-filter_complex" in cmd
        assert cmd[cmd.index("-map") + 1] == "[outv]"
        assert cmd.count("-map") == 2
        assert cmd[-1] == "out.mp4"

    def test_concat_without_audio_maps_video_only(self):
        cmd = build_concat_command(
            "in.mp4", "out.mp4", [_cut(5000, 10000)], 60000, has_audio=False,
        )
        assert cmd.count("-map") == 1
        assert "-c:a" not in cmd

    def test_gpu_codec(self):
        cmd = build_trim_command(
            "in.mp4", "out.mp4", [_cut(5000, 10000)], 60000, codec="h264_nvenc",
        )
        assert cmd[cmd.index("-c:v") + 1] == "h264_nvenc"
        assert "-cq" in cmd
        assert "-crf" not in cmd
