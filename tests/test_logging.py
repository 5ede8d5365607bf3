"""Tests for fork-aware logging output."""

import json
import logging
from pathlib import Path

import pytest
from loguru import logger

from fork_sync.logging import bind_repo, get_logger, reset_logging, setup_logging

REPO = "fork-the-planet/requests"


@pytest.fixture(autouse=True)
def _fresh_logger(monkeypatch):
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    reset_logging()
    yield
    reset_logging()


def _file_text(path: Path) -> str:
    logger.complete()
    return path.read_text()


class TestConsoleFormat:
    """Lines written to stderr."""

    def test_sync_line_shows_fork(self, capsys):
        setup_logging()

        bind_repo(REPO).info("Synced (fast-forward)")

        err = capsys.readouterr().err
        assert f"| sync [{REPO}] - Synced (fast-forward)" in err
        assert "INFO" in err

    def test_workflow_sweep_line_shows_fork(self, capsys):
        setup_logging()

        bind_repo(REPO, name="workflows").warning("Disabled 2 workflow(s)")

        assert f"workflows [{REPO}] - Disabled 2 workflow(s)" in capsys.readouterr().err

    def test_module_line_has_no_fork(self, capsys):
        setup_logging()

        get_logger("fork_sync.github.sync.runner").info("Wrote sync.log")

        line = capsys.readouterr().err.strip()
        assert line.endswith("| fork_sync.github.sync.runner - Wrote sync.log")
        assert "[" not in line

    def test_exception_traceback_follows_line(self, capsys):
        setup_logging()

        try:
            raise RuntimeError("merge-upstream exploded")
        except RuntimeError:
            bind_repo(REPO).exception("Unexpected error")

        err = capsys.readouterr().err
        assert f"sync [{REPO}] - Unexpected error" in err
        assert "RuntimeError: merge-upstream exploded" in err


class TestConsoleLevel:
    """Console level from settings and CLI flags."""

    def test_quiet_hides_info(self, capsys):
        setup_logging(quiet=True)

        bind_repo(REPO).info("Synced")
        bind_repo(REPO).warning("Rate limited")

        err = capsys.readouterr().err
        assert "Synced" not in err
        assert "Rate limited" in err

    def test_verbose_wins_over_quiet(self, capsys):
        setup_logging(level="WARNING", verbose=True, quiet=True)

        get_logger("fork_sync.github.gh_cli").debug("Running command: gh repo sync")

        assert "Running command" in capsys.readouterr().err

    def test_level_name_is_case_insensitive(self, capsys):
        setup_logging(level="warning")

        get_logger("test").info("hidden")
        get_logger("test").error("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err


class TestStdlibInterception:
    """Records from the standard library (httpx under githubkit)."""

    def test_stdlib_record_reaches_console(self, capsys):
        setup_logging()

        logging.getLogger("githubkit").warning("Hello from stdlib")

        assert "Hello from stdlib" in capsys.readouterr().err

    def test_httpx_quiet_unless_debugging(self):
        setup_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_httpx_passes_through_when_verbose(self):
        setup_logging(verbose=True)

        assert logging.getLogger("httpx").level == logging.DEBUG
        assert logging.getLogger("httpcore").level == logging.DEBUG


class TestLogFile:
    """Optional rotating log file."""

    def test_file_records_fork_and_debug(self, tmp_path):
        log_file = tmp_path / "forksync.log"
        setup_logging(quiet=True, log_file=log_file)

        bind_repo(REPO).debug("merge_type=none")

        text = _file_text(log_file)
        assert f"| sync [{REPO}] | " in text
        assert "merge_type=none" in text

    def test_file_includes_stdlib_records(self, tmp_path):
        log_file = tmp_path / "forksync.log"
        setup_logging(log_file=log_file)

        logging.getLogger("httpx").warning("HTTP Request: POST merge-upstream 409")

        assert "merge-upstream 409" in _file_text(log_file)

    def test_serialized_file_keeps_fork_in_extra(self, tmp_path):
        log_file = tmp_path / "forksync.jsonl"
        setup_logging(log_file=log_file, serialize=True)

        bind_repo(REPO, name="workflows").info("Disabled CI")

        entry = json.loads(_file_text(log_file).splitlines()[0])
        assert entry["record"]["message"] == "Disabled CI"
        assert entry["record"]["extra"] == {"name": "workflows", "repo": REPO}


class TestResetLogging:
    def test_reset_removes_handlers(self, capsys):
        setup_logging()
        reset_logging()

        bind_repo(REPO).error("after reset")

        assert "after reset" not in capsys.readouterr().err
