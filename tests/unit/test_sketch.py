"""Unit tests for the setup/draw loop and its configuration."""

import argparse

import pytest

from sketchkit.sketch import REFERENCE_FRAME_MS, SketchConfig, add_sketch_args, run_sketch


def noop(*_):
    pass


class TestRunSketchValidation:
    def test_missing_setup(self):
        with pytest.raises(ValueError):
            run_sketch(None, noop, off_screen=True)

    def test_missing_draw(self):
        with pytest.raises(ValueError):
            run_sketch(noop, None, off_screen=True)

    def test_not_callable(self):
        with pytest.raises(ValueError):
            run_sketch(noop, "draw", off_screen=True)

    def test_unknown_override(self):
        with pytest.raises(TypeError):
            run_sketch(noop, noop, off_screen=True, colour="red")


class TestOffScreenLoop:
    def test_setup_once_then_frames(self):
        calls = []
        frames = []

        def setup(ctx):
            calls.append(ctx)

        run_sketch(setup, frames.append, off_screen=True, frames=3, width=60, height=40)
        assert len(calls) == 1
        ctx = calls[0]
        assert not ctx.canvas.main
        assert (ctx.canvas.width, ctx.canvas.height) == (60, 40)
        assert [f.frame_count for f in frames] == [0, 1, 2]
        assert [f.time for f in frames] == pytest.approx([0.0, 1000 / 60, 2000 / 60])
        assert all(f.delta_ratio == pytest.approx(1.0) for f in frames)
        assert all(f.canvas is ctx.canvas for f in frames)

    def test_delta_ratio_at_half_frame_rate(self):
        frames = []
        run_sketch(noop, frames.append, off_screen=True, frames=2, frame_rate=30)
        assert frames[0].delta_ratio == pytest.approx(0.5)
        assert frames[1].time == pytest.approx(1000 / 30)
        assert frames[1].frame_rate == 30

    def test_default_is_one_frame(self):
        frames = []
        run_sketch(noop, frames.append, off_screen=True)
        assert len(frames) == 1

    def test_zero_frames_still_runs_setup(self):
        calls = []
        frames = []
        run_sketch(calls.append, frames.append, off_screen=True, frames=0)
        assert len(calls) == 1
        assert frames == []

    def test_returns_canvas_with_last_frame(self):
        def draw(frame):
            frame.canvas.bg("red")

        canvas = run_sketch(noop, draw, off_screen=True, width=20, height=20)
        assert tuple(canvas.render()[10, 10]) == (255, 0, 0, 255)

    def test_config_object_and_overrides(self):
        frames = []
        config = SketchConfig(off_screen=True, frames=5)
        run_sketch(noop, frames.append, config, frames=2)
        assert len(frames) == 2
        assert config.frames == 5

    def test_output_png(self, tmp_path):
        out = tmp_path / "frame.png"
        run_sketch(noop, lambda f: f.canvas.bg("blue"), off_screen=True, output=str(out))
        assert out.read_bytes()[:4] == b"\x89PNG"

    def test_output_jpg(self, tmp_path):
        out = tmp_path / "frame.jpg"
        run_sketch(noop, lambda f: f.canvas.bg("blue"), off_screen=True, output=str(out))
        assert out.read_bytes()[:2] == b"\xff\xd8"


class TestSketchConfig:
    def test_defaults(self):
        config = SketchConfig()
        assert (config.width, config.height) == (400, 400)
        assert config.frame_rate == 60
        assert config.frame_ms == pytest.approx(REFERENCE_FRAME_MS)
        assert config.seed == ""

    @pytest.mark.parametrize("kwargs", [
        {"frame_rate": 0},
        {"width": 0},
        {"height": -5},
        {"frames": -1},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SketchConfig(**kwargs)

    def test_from_args(self):
        parser = argparse.ArgumentParser()
        add_sketch_args(parser)
        args = parser.parse_args(["--width", "120", "--fps", "30", "--off-screen", "--seed", "abc"])
        config = SketchConfig.from_args(args, title="T", height=90)
        assert config.title == "T"
        assert (config.width, config.height) == (120, 90)
        assert config.frame_rate == 30
        assert config.off_screen
        assert config.seed == "abc"
        assert config.frames is None

    def test_from_args_keeps_defaults(self):
        parser = argparse.ArgumentParser()
        add_sketch_args(parser)
        config = SketchConfig.from_args(parser.parse_args([]), width=256, height=256)
        assert config.title == "sketchkit"
        assert (config.width, config.height) == (256, 256)
        assert not config.off_screen
