"""Blocking subprocess execution with a timeout and a tagged outcome."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence


class CommandStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    TIMED_OUT = "timed-out"
    MISSING = "missing"


@dataclass(frozen=True)
class CommandOutcome:
    """Result of a single external command invocation."""

    args: tuple[str, ...]
    status: CommandStatus
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is CommandStatus.SUCCESS

    @property
    def text(self) -> str:
        """Combined stdout and stderr, stripped."""
        return f"{self.stdout}\n{self.stderr}".strip()


CommandRunner = Callable[..., CommandOutcome]


def run_command(
    args: Sequence[str],
    *,
    timeout: float | None,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandOutcome:
    """Run ``args`` and classify the result instead of raising.

    ``subprocess.run`` kills the child when ``timeout`` expires.
    """
    argv = tuple(str(arg) for arg in args)
    try:
        completed = subprocess.run(
            list(argv),
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        return CommandOutcome(args=argv, status=CommandStatus.MISSING, stderr=str(exc))
    except subprocess.TimeoutExpired as exc:
        return CommandOutcome(
            args=argv,
            status=CommandStatus.TIMED_OUT,
            stdout=_decode(exc.stdout),
            stderr=_decode(exc.stderr),
        )

    status = CommandStatus.SUCCESS if completed.returncode == 0 else CommandStatus.FAILED
    return CommandOutcome(
        args=argv,
        status=status,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
    )


def _decode(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


__all__ = ["CommandOutcome", "CommandRunner", "CommandStatus", "run_command"]
