"""Tests for the command-line entry point."""

import sys

import pytest

import main


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["main.py", "--headless", *argv])
    runs = []
    monkeypatch.setattr(
        main, "run_headless", lambda config, ticks, seed=None, script="": runs.append(config)
    )
    main.main()
    return runs


class TestSizeHints:
    """Size hints must come in pairs."""

    @pytest.mark.parametrize(
        "argv",
        [("--width", "500"), ("--height", "500"), ("--cols", "20"), ("--rows", "21")],
    )
    def test_lone_hint_is_rejected(self, monkeypatch, capsys, argv):
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, *argv)

        assert excinfo.value.code == 2
        assert "must be given together" in capsys.readouterr().err

    def test_pixel_hints_reach_config(self, monkeypatch):
        runs = _run(monkeypatch, "--width", "540", "--height", "688")

        assert runs[0].maze.available_width == 540.0
        assert runs[0].maze.available_height == 688.0

    def test_default_headless_area_is_window_below_hud(self, monkeypatch):
        runs = _run(monkeypatch)

        assert runs[0].maze.available_width == 540.0
        assert runs[0].maze.available_height == 688.0
        assert runs[0].maze.cols is None
