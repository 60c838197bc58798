# tests/test_cli.py
"""
Tests for the uireuse command-line interface.
"""

import json
from datetime import datetime

from uireuse.cli import main


class TestDateCommand:
    """Tests for `uireuse date`."""

    def test_today(self, capsys):
        assert main(["date", "today", "--format", "yyyymmdd"]) == 0
        assert capsys.readouterr().out.strip() == datetime.now().strftime("%Y%m%d")

    def test_explicit_date(self, capsys):
        assert main(["date", "2020-01-17", "-f", "dd.mm.yyyy"]) == 0
        assert capsys.readouterr().out.strip() == "17.01.2020"

    def test_object_format_prints_iso(self, capsys):
        assert main(["date", "2020-01-17", "-f", "object"]) == 0
        assert capsys.readouterr().out.strip() == "2020-01-17T00:00:00"

    def test_unparsable_date(self, capsys):
        assert main(["date", "someday"]) == 1
        assert "Error:" in capsys.readouterr().err


class TestPresetsCommand:
    """Tests for `uireuse presets`."""

    def test_prints_json(self, capsys):
        assert main(["presets"]) == 0
        presets = json.loads(capsys.readouterr().out)
        assert set(presets) == {"default", "fast", "slow", "ci"}


class TestCheckConfigCommand:
    """Tests for `uireuse check-config`."""

    def test_valid_config(self, tmp_path, capsys):
        path = tmp_path / "uireuse.yaml"
        path.write_text("preset: ci\nconventions:\n  token_selector: '.chip'\n", encoding="utf-8")

        assert main(["check-config", str(path)]) == 0

        out = capsys.readouterr().out
        assert "Configuration is valid" in out
        assert "Retry: 5 attempts" in out
        assert "Token selector: .chip" in out

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "uireuse.yaml"
        path.write_text("retries:\n  attempts: 0\n", encoding="utf-8")

        assert main(["check-config", str(path)]) == 2
        assert "Configuration is invalid" in capsys.readouterr().err

    def test_does_not_install_config(self, tmp_path):
        from uireuse.config import TimeConfig

        path = tmp_path / "uireuse.yaml"
        path.write_text("preset: slow\n", encoding="utf-8")

        main(["check-config", str(path)])

        assert TimeConfig.current().resolve_element.timeout == 30.0
