"""Tests for the ``python -m cadence`` console runner."""

from cadence.__main__ import main
from cadence.settings import Settings, save_settings


class TestMain:

    def test_one_shot_prints_lifecycle(self, qapp, capsys):
        assert main(["0.05"]) == 0
        assert capsys.readouterr().out.split() == ["start", "completed", "idle"]

    def test_repeat_with_count(self, qapp, capsys):
        assert main(["0.05", "--repeat", "--count", "2"]) == 0
        assert capsys.readouterr().out.split() == [
            "start", "completed", "start", "completed", "stop",
        ]

    def test_invalid_duration(self, qapp, capsys):
        assert main(["0"]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "duration" in captured.err

    def test_duration_from_settings(self, qapp, capsys):
        save_settings(Settings(duration=0.05))
        assert main([]) == 0
        assert capsys.readouterr().out.split() == ["start", "completed", "idle"]

    def test_no_repeat_overrides_settings(self, qapp, capsys):
        save_settings(Settings(duration=0.05, repeats=True))
        assert main(["--no-repeat"]) == 0
        assert capsys.readouterr().out.split() == ["start", "completed", "idle"]
