"""Tests for reading diffs from git."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from nostradiffmus.config import Limits
from nostradiffmus.errors import CommandTimeoutError, DiffTooLargeError, DiffUnavailableError
from nostradiffmus.git.diff import DiffResult, DiffSource
from nostradiffmus.runner import CommandStatus


def test_reads_staged_changes_by_default(tmp_path: Path, fake_runner, make_outcome, make_section) -> None:
    diff = make_section("src/app.ts", ["+const a = 1;"])
    runner = fake_runner(lambda argv: make_outcome(argv, stdout=diff))

    result = DiffSource(cwd=tmp_path, runner=runner).read()

    assert isinstance(result, DiffResult)
    assert result.text == diff
    assert result.files == ["src/app.ts"]
    assert result.source == "staged changes"
    assert result.size_chars == len(diff)
    assert runner.calls == [
        {
            "args": ["git", "diff", "--staged", "--no-color"],
            "timeout": 30.0,
            "cwd": tmp_path,
            "env": None,
        }
    ]


def test_reads_single_commit(fake_runner, make_outcome) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, stdout=""))

    result = DiffSource(runner=runner).read("abc123")

    assert runner.calls[0]["args"] == ["git", "show", "--format=", "--no-color", "abc123"]
    assert result.source == "commit abc123"
    assert result.files == []


def test_git_failure_surfaces_stderr(fake_runner, make_outcome) -> None:
    runner = fake_runner(
        lambda argv: make_outcome(
            argv, status=CommandStatus.FAILED, stderr="fatal: bad revision 'nope'\n"
        )
    )

    with pytest.raises(DiffUnavailableError, match="bad revision"):
        DiffSource(runner=runner).read("nope")


def test_git_failure_without_stderr(fake_runner, make_outcome) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, status=CommandStatus.FAILED))

    with pytest.raises(DiffUnavailableError, match="Unknown git error"):
        DiffSource(runner=runner).read()


def test_missing_git_executable(fake_runner, make_outcome) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, status=CommandStatus.MISSING))

    with pytest.raises(DiffUnavailableError, match="executable not found"):
        DiffSource(runner=runner).read()


def test_git_timeout(fake_runner, make_outcome) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, status=CommandStatus.TIMED_OUT))
    limits = Limits(git_timeout=2.0)

    with pytest.raises(CommandTimeoutError, match="2s"):
        DiffSource(limits, runner=runner).read()
    assert runner.calls[0]["timeout"] == 2.0


def test_rejects_diff_over_hard_limit(fake_runner, make_outcome) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, stdout="+" * 101))
    limits = Limits(max_diff_chars=100, warn_threshold=50)

    with pytest.raises(DiffTooLargeError, match="101 chars"):
        DiffSource(limits, runner=runner).read()


def test_warns_on_large_diff(fake_runner, make_outcome, caplog) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, stdout="+" * 80))
    limits = Limits(max_diff_chars=100, warn_threshold=50)

    with caplog.at_level(logging.WARNING, logger="nostradiffmus"):
        result = DiffSource(limits, runner=runner).read()

    assert result.size_chars == 80
    assert "Large diff detected (80 chars)" in caplog.text


def test_clip_lines_limits_processed_lines() -> None:
    source = DiffSource(Limits(max_lines_processed=3))

    assert source.clip_lines("a\nb\nc\nd\ne") == "a\nb\nc"
    assert source.clip_lines("a\nb") == "a\nb"
