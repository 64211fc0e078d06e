"""Diff acquisition from git."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..analyzers.changeset import diff_files
from ..config import Limits
from ..errors import CommandTimeoutError, DiffTooLargeError, DiffUnavailableError
from ..logging import get_logger
from ..runner import CommandRunner, CommandStatus, run_command


@dataclass(frozen=True)
class DiffResult:
    """Raw diff text plus the files it touches."""

    text: str
    files: Sequence[str]
    source: str

    @property
    def size_chars(self) -> int:
        return len(self.text)


class DiffSource:
    """Reads staged changes or a single commit from git."""

    def __init__(
        self,
        limits: Limits | None = None,
        *,
        cwd: Path | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.limits = limits or Limits()
        self.cwd = cwd
        self._runner = runner or run_command
        self.logger = get_logger("git.diff")

    def read(self, commit: Optional[str] = None) -> DiffResult:
        """Return the staged diff, or the diff introduced by ``commit``."""
        if commit:
            args = ["git", "show", "--format=", "--no-color", commit]
            source = f"commit {commit}"
        else:
            args = ["git", "diff", "--staged", "--no-color"]
            source = "staged changes"

        text = self._git(args)
        size = len(text)
        if size > self.limits.max_diff_chars:
            raise DiffTooLargeError(
                f"Diff is too large to analyze ({size} chars, limit {self.limits.max_diff_chars}). "
                "Set NOSTRADIFFMUS_MAX_DIFF_CHARS to raise the limit."
            )
        if size > self.limits.warn_threshold:
            self.logger.warning(
                "Large diff detected (%d chars); analysis may be slow", size
            )

        return DiffResult(text=text, files=diff_files(text), source=source)

    def clip_lines(self, text: str) -> str:
        """Drop lines past ``max_lines_processed`` before signal extraction."""
        lines = text.split("\n")
        limit = self.limits.max_lines_processed
        if len(lines) <= limit:
            return text
        self.logger.debug("Clipping diff from %d to %d lines", len(lines), limit)
        return "\n".join(lines[:limit])

    def _git(self, args: List[str]) -> str:
        outcome = self._runner(args, timeout=self.limits.git_timeout, cwd=self.cwd)
        if outcome.status is CommandStatus.TIMED_OUT:
            raise CommandTimeoutError(
                f"git timed out after {self.limits.git_timeout:g}s. Check your repository status."
            )
        if outcome.status is CommandStatus.MISSING:
            raise DiffUnavailableError("Failed to run git: executable not found")
        if outcome.status is CommandStatus.FAILED:
            message = outcome.stderr.strip() or "Unknown git error"
            raise DiffUnavailableError(message)
        return outcome.stdout


__all__ = ["DiffResult", "DiffSource"]
