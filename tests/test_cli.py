"""Tests for the command-line interface (__main__.py)."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from meetstream_bridge.__main__ import build_parser, main
from meetstream_bridge.core.log_buffer import teardown_log_buffer
from meetstream_bridge.orchestrator import Orchestrator


@pytest.fixture
def cli_env(monkeypatch, fake_transport, small_catalog):
    """Environment and orchestrator wiring for CLI runs."""
    monkeypatch.setenv("MEETSTREAM_API_KEY", "ms_cli_key_0123456789")
    monkeypatch.setenv("MEETSTREAM_BASE_URL", "https://api.example.test")
    monkeypatch.delenv("MEETSTREAM_TIMEOUT", raising=False)
    monkeypatch.delenv("MEETSTREAM_CONCURRENCY", raising=False)

    def build(config):
        return Orchestrator(config, transport=fake_transport, catalog=small_catalog)

    package_logger = logging.getLogger("meetstream_bridge")
    level = package_logger.level
    with patch("meetstream_bridge.__main__.Orchestrator", side_effect=build):
        yield fake_transport
    package_logger.setLevel(level)
    teardown_log_buffer()


class TestParser:
    """Tests for argument parsing."""

    def test_command_required(self):
        """Test a subcommand is mandatory."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_sessions_flags(self):
        """Test sessions options parse."""
        args = build_parser().parse_args(["--json", "sessions", "--live", "--limit", "3"])
        assert args.command == "sessions"
        assert args.live is True
        assert args.limit == 3
        assert args.json is True


class TestMain:
    """Tests for main()."""

    def test_missing_key(self, monkeypatch, capsys):
        """Test a missing API key is reported with exit code 2."""
        monkeypatch.delenv("MEETSTREAM_API_KEY", raising=False)
        try:
            assert main(["sessions"]) == 2
        finally:
            teardown_log_buffer()
        assert "Missing API key" in capsys.readouterr().err

    def test_sessions_synthetic(self, cli_env, capsys):
        """Test the listing falls back to synthetic sessions."""
        assert main(["sessions"]) == 0
        out = capsys.readouterr().out
        assert out.count("[synthetic]") == 2
        assert "Weekly Team Standup (Demo)" in out

    def test_sessions_json(self, cli_env, capsys):
        """Test JSON listing of real sessions."""
        cli_env.ok("/a/bots", [{"bot_id": "x1", "bot_name": "Standup", "status": "done"}])
        assert main(["--json", "sessions", "--limit", "5"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [item["id"] for item in data] == ["x1"]
        assert data[0]["is_synthetic"] is False

    def test_live_empty(self, cli_env, capsys):
        """Test an empty live listing says so."""
        cli_env.ok("/a/bots", [{"bot_id": "x1", "status": "done"}])
        assert main(["sessions", "--live"]) == 0
        assert "No sessions." in capsys.readouterr().out

    def test_transcript(self, cli_env, capsys):
        """Test transcript text is printed."""
        cli_env.ok("/a/bots", [{"id": "m1", "status": "done"}])
        cli_env.ok("/a/bots/m1/transcript", {"text": "hello"})
        assert main(["transcript", "m1"]) == 0
        assert capsys.readouterr().out.strip() == "hello"

    def test_discover(self, cli_env, capsys):
        """Test the discovery report is printed."""
        cli_env.ok("/me", {"id": "acct"})
        assert main(["discover"]) == 0
        out = capsys.readouterr().out
        assert "status: connected_empty" in out
        assert "auth scheme: token" in out
        assert "/a/sessions" in out

    def test_search_json(self, cli_env, capsys):
        """Test search output as JSON."""
        assert main(["--json", "search", "strategy"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [item["display_name"] for item in data] == ["Product Strategy Review (Demo)"]

    def test_diagnostics(self, cli_env, capsys):
        """Test diagnostics JSON never contains the key."""
        assert main(["diagnostics"]) == 0
        out = capsys.readouterr().out
        data = json.loads(out)
        assert data["connection_status"] == "disconnected"
        assert "ms_cli_key_0123456789" not in out

    def test_verbose_enables_debug(self, cli_env):
        """Test -v lowers the package logger to DEBUG."""
        assert main(["-v", "sessions"]) == 0
        assert logging.getLogger("meetstream_bridge").level == logging.DEBUG

    @pytest.mark.parametrize("argv,level", [(["sessions"], logging.WARNING), (["-v", "sessions"], logging.DEBUG)])
    def test_console_handler_level(self, cli_env, argv, level):
        """Test stderr only shows INFO records when verbose."""
        with patch("meetstream_bridge.__main__.logging.basicConfig") as basic_config:
            assert main(argv) == 0

        handlers = basic_config.call_args.kwargs["handlers"]
        assert [handler.level for handler in handlers] == [level]
        # The package logger sits at INFO for the log buffer either way
        assert logging.getLogger("meetstream_bridge").getEffectiveLevel() <= logging.INFO

    def test_no_enrich(self, cli_env, capsys):
        """Test --no-enrich skips detail requests."""
        cli_env.ok("/a/bots", [{"bot_id": "x1", "status": "done"}])
        assert main(["--no-enrich", "discover"]) == 0
        assert "sessions: 1 (0 enriched)" in capsys.readouterr().out
        assert "/a/bots/x1" not in cli_env.paths_called()
