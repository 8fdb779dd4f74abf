"""
Test suite for the command-line interface.
"""

import io
from unittest.mock import patch

import pytest

from terminal_intel.cli import handle_cli_command, has_action, parse_args
from terminal_intel.core.history import InMemoryStore
from terminal_intel.main import main
from terminal_intel.session import TerminalSession
from terminal_intel.tests.fixtures.fakes import FakeProvider
from terminal_intel.utils.error_handling import ConfigurationError


@pytest.fixture
def cli_config(test_config):
    """Patch config loading and logging setup for handler tests."""
    with patch("terminal_intel.cli.handlers.load_config", return_value=test_config), \
            patch("terminal_intel.cli.handlers.setup_logging"):
        yield test_config


def offline_session(config):
    return TerminalSession(
        config,
        store=InMemoryStore(),
        providers=(FakeProvider(healthy=False), FakeProvider("cloud", healthy=False)),
    )


@pytest.mark.unit
class TestParseArgs:
    """Test argument parsing."""

    def test_redact_without_path_reads_stdin(self):
        args = parse_args(["--redact"])

        assert args.redact == "-"
        assert has_action(args)

    def test_workflows_without_query(self):
        assert parse_args(["--workflows"]).workflows == ""

    def test_no_action(self):
        assert has_action(parse_args(["-v"])) is False

    def test_actions_are_mutually_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["--suggest", "git", "--translate", "x"])

    def test_main_without_action_prints_help(self, capsys):
        assert main([]) == 0
        assert "terminal-intel" in capsys.readouterr().out


@pytest.mark.unit
class TestHandlers:
    """Test the command handlers."""

    def test_redact_file(self, cli_config, tmp_path, capsys):
        log = tmp_path / "build.log"
        log.write_text("connecting with password: hunter2222\n")

        assert handle_cli_command(parse_args(["--redact", str(log)])) == 0

        captured = capsys.readouterr()
        assert "hunter2222" not in captured.out
        assert "[Password: " in captured.out
        assert "1 secret(s) redacted" in captured.err

    def test_redact_stdin(self, cli_config, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("nothing secret here"))

        assert handle_cli_command(parse_args(["--redact"])) == 0
        assert capsys.readouterr().out == "nothing secret here"

    def test_redact_missing_file(self, cli_config, tmp_path, capsys):
        assert handle_cli_command(parse_args(["--redact", str(tmp_path / "nope.log")])) == 1
        assert "Cannot read" in capsys.readouterr().err

    def test_workflows_search(self, cli_config, capsys):
        assert handle_cli_command(parse_args(["--workflows", "docker"])) == 0

        out = capsys.readouterr().out
        assert "Docker PS [Docker]: docker ps" in out
        assert "Git Status" not in out

    def test_suggest_offline_uses_static_table(self, cli_config, capsys):
        with patch("terminal_intel.cli.handlers._session", offline_session):
            assert handle_cli_command(parse_args(["--suggest", "docker"])) == 0

        assert "docker ps" in capsys.readouterr().out

    def test_translate_with_rules(self, cli_config, capsys):
        with patch("terminal_intel.cli.handlers._session", offline_session):
            assert handle_cli_command(parse_args(["--translate", "delete file notes.txt"])) == 0

        out = capsys.readouterr().out
        assert out.startswith("rm {{file}}")
        assert "This will permanently delete the file" in out

    def test_check_llm_all_down(self, cli_config, capsys):
        with patch("terminal_intel.cli.handlers._session", offline_session):
            assert handle_cli_command(parse_args(["--check-llm"])) == 1

        assert "static table only" in capsys.readouterr().out

    def test_configuration_error(self, capsys):
        with patch("terminal_intel.cli.handlers.load_config", side_effect=ConfigurationError("bad yaml")):
            assert handle_cli_command(parse_args(["--workflows"])) == 1

        assert "Configuration error: bad yaml" in capsys.readouterr().err
