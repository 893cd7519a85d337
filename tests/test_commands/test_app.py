"""Tests for the root app, the ``cache`` and ``config`` command groups and ``main``."""

from __future__ import annotations

import json
import signal
from pathlib import Path

import pytest

from econops import __version__
from econops.app import app, main
from econops.cache import ResponseCache
from econops.config import load_global_config
from econops.exceptions import ConfigurationError
from econops.models import CacheEntry


def _seed(cache_dir: Path, count: int) -> None:
    cache = ResponseCache(cache_dir)
    for i in range(count):
        cache.put(f"/route{i}" + "0" * 64, CacheEntry(status_code=200, data={"i": i}))
    cache.close()


class TestCacheCommands:
    def test_info_empty(self, cli_runner, cache_dir: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "--json", "cache", "info"])
        assert result.exit_code == 0, result.output
        info = json.loads(result.stdout)
        assert info == {"directory": str(cache_dir), "count": 0, "total_bytes": 0}

    def test_info_counts_entries(self, cli_runner, cache_dir: Path) -> None:
        _seed(cache_dir, 3)
        result = cli_runner.invoke(app, ["--no-color", "--json", "cache", "info"])
        info = json.loads(result.stdout)
        assert info["count"] == 3
        assert info["total_bytes"] > 0

    def test_clear(self, cli_runner, cache_dir: Path) -> None:
        _seed(cache_dir, 2)
        result = cli_runner.invoke(app, ["--no-color", "cache", "clear"])
        assert result.exit_code == 0, result.output
        assert "Removed 2 cached response(s)." in result.output
        assert ResponseCache(cache_dir).stats().count == 0

    def test_clear_does_not_need_token(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "cache", "clear"])
        assert result.exit_code == 0, result.output


class TestConfigCommands:
    def test_show_defaults(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "--json", "--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["base_url"] == "https://econops.com:8000"

    def test_set_string(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "config", "set", "base_url", "https://staging.example.com"]
        )
        assert result.exit_code == 0, result.output
        assert load_global_config().base_url == "https://staging.example.com"

    def test_set_nested_bool(self, cli_runner) -> None:
        cli_runner.invoke(app, ["--no-color", "config", "set", "cache.enabled", "false"])
        assert load_global_config().cache.enabled is False

    def test_set_float(self, cli_runner) -> None:
        cli_runner.invoke(app, ["--no-color", "config", "set", "request.timeout", "60"])
        assert load_global_config().request.timeout == 60.0

    def test_set_bad_number(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "request.timeout", "soon"])
        assert result.exit_code == 2
        assert "Expected float" in result.output

    def test_set_bad_bool(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "cache.enabled", "maybe"])
        assert result.exit_code == 2
        assert "Expected true or false" in result.output

    def test_set_invalid_choice(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "output.format", "xml"])
        assert result.exit_code == 2
        assert "Validation error" in result.output
        assert load_global_config().output.format == "auto"

    def test_set_unknown_key(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "nope", "1"])
        assert result.exit_code == 2
        assert "Unknown config key" in result.output

    def test_set_section_rejected(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "cache", "off"])
        assert result.exit_code == 2

    def test_path(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "path"])
        assert result.stdout.strip() == str(isolated_config / "config" / "econops" / "config.json")


class TestRoot:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"econops {__version__}" in result.output

    def test_no_args_shows_help(self, cli_runner) -> None:
        result = cli_runner.invoke(app, [])
        assert "call" in result.output
        assert "interactive" in result.output


class TestMain:
    @pytest.fixture(autouse=True)
    def installed_handlers(self, monkeypatch: pytest.MonkeyPatch) -> dict:
        handlers: dict = {}
        monkeypatch.setattr(
            "econops.app.signal.signal", lambda signum, handler: handlers.__setitem__(signum, handler)
        )
        return handlers

    def test_unexpected_error_writes_crash_log(self, monkeypatch, isolated_config: Path, capsys) -> None:
        def _crash() -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr("econops.app.app", _crash)
        with pytest.raises(SystemExit) as excinfo:
            main()

        assert excinfo.value.code == 1
        logs = list((isolated_config / "data" / "econops").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text()
        assert "Debug log:" in capsys.readouterr().err

    def test_econops_error_exits_with_its_code(self, monkeypatch, capsys) -> None:
        def _fail() -> None:
            raise ConfigurationError("no token")

        monkeypatch.setattr("econops.app.app", _fail)
        with pytest.raises(SystemExit) as excinfo:
            main()

        assert excinfo.value.code == 3
        assert "no token" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_130(self, monkeypatch, capsys) -> None:
        def _interrupted() -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("econops.app.app", _interrupted)
        with pytest.raises(SystemExit) as excinfo:
            main()

        assert excinfo.value.code == 130
        assert "Cancelled." in capsys.readouterr().err

    def test_sigint_handler_installed_and_exits_130(self, monkeypatch, installed_handlers, capsys) -> None:
        monkeypatch.setattr("econops.app.app", lambda: None)
        main()

        handler = installed_handlers[signal.SIGINT]
        with pytest.raises(SystemExit) as excinfo:
            handler(signal.SIGINT, None)

        assert excinfo.value.code == 130
        assert "Cancelled." in capsys.readouterr().err
