from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, List

import pytest

from nostradiffmus.runner import CommandOutcome, CommandStatus


@pytest.fixture(autouse=True)
def _reset_nostradiffmus_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog sees records between tests."""
    yield
    logger = logging.getLogger("nostradiffmus")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def file_section(
    path: str,
    lines: Iterable[str] = (),
    *,
    deleted: bool = False,
) -> str:
    """Render one ``diff --git`` section with the usual five header lines."""
    header: List[str] = [f"diff --git a/{path} b/{path}"]
    if deleted:
        header.append("deleted file mode 100644")
        header.append("index 1234567..0000000")
        header.append(f"--- a/{path}")
        header.append("+++ /dev/null")
    else:
        header.append("index 1234567..abcdefg 100644")
        header.append(f"--- a/{path}")
        header.append(f"+++ b/{path}")
    header.append("@@ -1,5 +1,5 @@")
    return "\n".join([*header, *lines])


@pytest.fixture
def make_section() -> Callable[..., str]:
    """Provide the diff section builder to tests."""
    return file_section


class FakeRunner:
    """Records command invocations and replays scripted outcomes."""

    def __init__(self, handler: Callable[[List[str]], CommandOutcome]) -> None:
        self.calls: List[dict[str, object]] = []
        self._handler = handler

    def __call__(self, args, *, timeout=None, cwd=None, env=None) -> CommandOutcome:  # type: ignore[no-untyped-def]
        argv = list(args)
        self.calls.append({"args": argv, "timeout": timeout, "cwd": cwd, "env": env})
        return self._handler(argv)


def outcome(
    args: Iterable[str] = (),
    *,
    status: CommandStatus = CommandStatus.SUCCESS,
    stdout: str = "",
    stderr: str = "",
) -> CommandOutcome:
    return CommandOutcome(
        args=tuple(args),
        status=status,
        stdout=stdout,
        stderr=stderr,
        returncode=0 if status is CommandStatus.SUCCESS else 1,
    )


@pytest.fixture
def fake_runner() -> type[FakeRunner]:
    """Provide the scripted command runner double."""
    return FakeRunner


@pytest.fixture
def make_outcome() -> Callable[..., CommandOutcome]:
    """Provide a factory for canned command outcomes."""
    return outcome
