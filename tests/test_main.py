"""Tests for CLI parsing and one-shot command dispatch."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from pullpal.app import PullPal
from pullpal.main import main, parse_args
from tests.conftest import FakeGitHub, make_pull_request


class TestParseArgs:
    def test_default_is_daemon(self) -> None:
        args = parse_args([])
        assert args.subcommand == "daemon"
        assert args.config == Path("config.yaml")
        assert args.days is None

    def test_subcommand_and_options(self) -> None:
        args = parse_args(["metrics", "-c", "custom.yaml", "--days", "14"])
        assert args.subcommand == "metrics"
        assert args.config == Path("custom.yaml")
        assert args.days == 14

    def test_check_flag(self) -> None:
        assert parse_args(["--check"]).check is True


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text("bot:\n  repository: octo/repo\nlogging:\n  level: WARNING\n")
    return path


def test_check_prints_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.delenv("BOT_REPOSITORY", raising=False)
    assert main(["--check", "-c", str(_write_config(tmp_path))]) == 0
    assert "Config OK: octo/repo" in capsys.readouterr().out


def test_sync_prints_result(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture,
    app: PullPal,
    github: FakeGitHub,
) -> None:
    monkeypatch.delenv("BOT_REPOSITORY", raising=False)
    github.open_prs = [make_pull_request(1), make_pull_request(2)]
    with patch("pullpal.app.build_app", return_value=app):
        code = main(["sync", "-c", str(_write_config(tmp_path))])

    assert code == 0
    result = json.loads(capsys.readouterr().out)
    assert result["open_count"] == 2
    assert result["tracked"] == 2
    assert app.store.numbers() == [1, 2]


def test_metrics_with_period(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture,
    app: PullPal,
) -> None:
    monkeypatch.delenv("BOT_REPOSITORY", raising=False)
    with patch("pullpal.app.build_app", return_value=app):
        code = main(["metrics", "--days", "3", "-c", str(_write_config(tmp_path))])

    assert code == 0
    result = json.loads(capsys.readouterr().out)
    assert result["metrics"]["average_review_time"] == "N/A"
    assert result["period"]["days"] == 3


def test_failed_command_returns_1(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, app: PullPal, github: FakeGitHub) -> None:
    monkeypatch.delenv("BOT_REPOSITORY", raising=False)
    github.fail_listing = True
    with patch("pullpal.app.build_app", return_value=app):
        assert main(["check-stale", "-c", str(_write_config(tmp_path))]) == 1


def test_daemon_dispatch(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BOT_REPOSITORY", raising=False)
    with patch("pullpal.daemon.run_daemon") as run_daemon:
        assert main(["-c", str(_write_config(tmp_path))]) == 0
    assert run_daemon.call_args[0][0].bot.repository == "octo/repo"
