"""Tests for geometry and easing primitives."""

import math

import pytest

from regionfx.geometry import (
    clamp,
    even_floor,
    percent_to_pixels,
    round_half_up,
    smoothstep,
    to_normalized,
    to_pixels,
)


class TestClamp:
    def test_inside_range_unchanged(self):
        assert clamp(0.4, 0, 1) == 0.4

    def test_below_range(self):
        assert clamp(-2, 0, 1) == 0

    def test_above_range(self):
        assert clamp(7, 0, 1) == 1

    def test_nan_returns_midpoint(self):
        assert clamp(math.nan, 0.2, 0.8) == pytest.approx(0.5)


class TestSmoothstep:
    def test_endpoints(self):
        assert smoothstep(0) == 0
        assert smoothstep(1) == 1

    def test_midpoint(self):
        assert smoothstep(0.5) == 0.5

    def test_clamps_input(self):
        assert smoothstep(-3) == 0
        assert smoothstep(4) == 1

    def test_monotonic(self):
        values = [smoothstep(i / 20) for i in range(21)]
        assert values == sorted(values)


class TestPixelConversion:
    def test_half_rounds_up(self):
        assert round_half_up(426.5) == 427
        assert round_half_up(-259.5) == -259

    def test_to_pixels(self):
        assert to_pixels(0.05, 1080) == 54

    def test_percent_to_pixels(self):
        assert percent_to_pixels(10, 1080) == 108

    def test_to_normalized(self):
        assert to_normalized(54, 1080) == pytest.approx(0.05)

    def test_even_floor(self):
        assert even_floor(1026) == 1026
        assert even_floor(1067) == 1066
