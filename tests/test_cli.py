"""
Tests for CLI — Commands end to end

These tests validate:
- show renders hats and a summary, and reports moved hats with --from
- stats prints every metric and writes .stats/.golden files
- config set/get round trips
- Errors return non-zero exit codes
"""

import pytest

from hatter.cli import main
from hatter.commands import get_registered_commands
from hatter.commands.show_cmd import parse_position
from hatter.core.geometry import Position


@pytest.fixture(autouse=True)
def ascii_output(clean_hatter_env, monkeypatch):
    """Stable symbols regardless of the terminal running the tests."""
    monkeypatch.setenv("HATTER_ASCII_ONLY", "1")


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("foo bar\n", encoding="utf-8")
    return path


def run(tmp_path, *argv):
    return main(["--project", str(tmp_path), *argv])


class TestShow:
    """hatter show"""

    def test_renders_golden(self, tmp_path, source_file, capsys):
        assert run(tmp_path, "show", str(source_file)) == 0
        out = capsys.readouterr().out
        assert "*   *\nfoo bar\n[-] [-]\n" in out
        assert "2 tokens, 2 hats, 0% without a hat" in out

    def test_from_reports_moved(self, tmp_path, source_file, capsys):
        code = run(tmp_path, "show", str(source_file), "--line", "0", "--column", "4",
                   "--from", "0:0", "--stability", "stable")
        assert code == 0
        assert "-> 0% of hats moved from 0:0 (stable)" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert run(tmp_path, "show", str(tmp_path / "missing.txt")) == 1
        assert "[ERR] Error:" in capsys.readouterr().out

    def test_cursor_outside_document(self, tmp_path, source_file, capsys):
        assert run(tmp_path, "show", str(source_file), "--line", "9") == 1
        assert "out of range" in capsys.readouterr().out

    def test_bad_from(self, tmp_path, source_file, capsys):
        assert run(tmp_path, "show", str(source_file), "--from", "nowhere") == 1

    def test_parse_position(self):
        assert parse_position("3:7") == Position(3, 7)
        with pytest.raises(ValueError):
            parse_position("37")


class TestStats:
    """hatter stats"""

    def test_report(self, tmp_path, source_file, capsys):
        assert run(tmp_path, "stats", str(source_file), "--samples", "4") == 0
        out = capsys.readouterr().out
        assert f"* {source_file}" in out
        assert "nTokens: 2" in out
        assert "nMoved:" in out

    def test_write(self, tmp_path, source_file, capsys):
        assert run(tmp_path, "stats", str(source_file), "--write") == 0
        stats_file = tmp_path / "sample.txt.stats"
        golden_file = tmp_path / "sample.txt.golden"
        assert stats_file.read_text(encoding="utf-8").startswith("nTokens: 2")
        assert golden_file.read_text(encoding="utf-8") == "*   *\nfoo bar\n[-] [-]\n\n"
        assert "[OK] Wrote" in capsys.readouterr().out

    def test_missing_file_fails(self, tmp_path, source_file):
        assert run(tmp_path, "stats", str(source_file), str(tmp_path / "missing.txt")) == 1


class TestConfigCommand:
    """hatter config"""

    def test_set_then_get(self, tmp_path, capsys):
        assert run(tmp_path, "config", "--set", "hats.stability", "stable") == 0
        assert "[OK] Set hats.stability = stable" in capsys.readouterr().out

        assert run(tmp_path, "config", "--get", "hats.stability") == 0
        assert capsys.readouterr().out.strip() == "stable"

    def test_set_invalid(self, tmp_path, capsys):
        assert run(tmp_path, "config", "--set", "hats.stability", "sticky") == 1
        assert "Unknown stability" in capsys.readouterr().out

    def test_get_unknown(self, tmp_path, capsys):
        assert run(tmp_path, "config", "--get", "hats.size") == 1

    def test_show(self, tmp_path, capsys):
        assert run(tmp_path, "config") == 0
        assert "Configuration:" in capsys.readouterr().out


class TestMain:
    """Entry point behavior."""

    def test_no_command_prints_help(self, tmp_path, capsys):
        assert run(tmp_path) == 0
        assert "usage: hatter" in capsys.readouterr().out

    def test_invalid_config_exit_code(self, tmp_path, source_file, capsys):
        config_dir = tmp_path / ".hatter"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("hats:\n  colors: [purple]\n", encoding="utf-8")
        assert run(tmp_path, "show", str(source_file)) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_commands_registered(self, tmp_path):
        run(tmp_path)
        assert get_registered_commands() == ["show", "stats", "config"]
