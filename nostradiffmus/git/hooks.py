"""Install and remove the nostradiffmus pre-commit / pre-push hooks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from jinja2 import DictLoader, Environment

from ..errors import CommandTimeoutError, HookError
from ..logging import get_logger
from ..runner import CommandRunner, CommandStatus, run_command

HOOK_TYPES: tuple[str, ...] = ("pre-commit", "pre-push")
HOOK_MARKER = "Nostradiffmus"
GIT_DIR_TIMEOUT = 5.0

_TEMPLATES = {
    "pre-commit": """#!/bin/sh
# {{ marker }} Pre-Commit Hook
# Automatically installed by: nostradiffmus install-hook

echo "Consulting the sacred diff scrolls..."
echo ""

if ! {{ command }} predict --staged --quiet; then
  echo ""
  echo "{{ marker }} detected potential issues."
  echo "You can still commit, but consider reviewing the advice above."
  echo ""
fi

# Always allow commit to proceed
exit 0
""",
    "pre-push": """#!/bin/sh
# {{ marker }} Pre-Push Hook
# Automatically installed by: nostradiffmus install-hook

echo "Analyzing recent commits before push..."
echo ""

REMOTE_BRANCH=$(git rev-parse --abbrev-ref --symbolic-full-name @{u} 2>/dev/null || echo "origin/main")

STATUS=0
for COMMIT in $(git rev-list "$REMOTE_BRANCH"..HEAD); do
  if ! {{ command }} predict --commit "$COMMIT" --quiet 2>/dev/null; then
    STATUS=1
  fi
done

if [ "$STATUS" -ne 0 ]; then
  echo ""
  echo "High-risk changes detected in commits being pushed."
  echo "Consider reviewing the prophecy above."
  echo ""
fi

# Always allow push to proceed
exit 0
""",
}

_ENV = Environment(loader=DictLoader(_TEMPLATES), keep_trailing_newline=True, autoescape=False)


class HookStatus(str, Enum):
    INSTALLED = "installed"
    ALREADY_INSTALLED = "already-installed"
    UNINSTALLED = "uninstalled"
    NOT_FOUND = "not-found"


@dataclass(frozen=True)
class HookResult:
    kind: str
    status: HookStatus
    path: Path

    @property
    def message(self) -> str:
        action = "commit" if self.kind == "pre-commit" else "push"
        if self.status is HookStatus.INSTALLED:
            return (
                f"Successfully installed {HOOK_MARKER} {self.kind} hook at {self.path}\n"
                f"It will analyze your changes whenever you run: git {action}\n"
                f"To uninstall: nostradiffmus uninstall-hook {self.kind}"
            )
        if self.status is HookStatus.ALREADY_INSTALLED:
            return f"{HOOK_MARKER} {self.kind} hook is already installed"
        if self.status is HookStatus.UNINSTALLED:
            return f"Successfully uninstalled {HOOK_MARKER} {self.kind} hook"
        return f"No {self.kind} hook found - nothing to uninstall"


def render_hook_script(kind: str, *, command: str = "nostradiffmus") -> str:
    """Render the shell script for a hook type."""
    _check_kind(kind)
    return _ENV.get_template(kind).render(marker=HOOK_MARKER, command=command)


class HookManager:
    """Writes and removes hook scripts inside the current repository's git dir."""

    def __init__(
        self,
        *,
        cwd: Path | None = None,
        runner: CommandRunner | None = None,
        remove: Callable[[Path], None] | None = None,
    ) -> None:
        self.cwd = cwd
        self._runner = runner or run_command
        self._remove = remove or os.unlink
        self.logger = get_logger("git.hooks")

    def install(self, kind: str = "pre-commit") -> HookResult:
        _check_kind(kind)
        hook_path = self._hook_path(kind)

        if hook_path.exists():
            existing = _read_hook(hook_path)
            if HOOK_MARKER in existing:
                return HookResult(kind=kind, status=HookStatus.ALREADY_INSTALLED, path=hook_path)
            raise HookError(
                f"A {kind} hook already exists at {hook_path}. "
                "Add nostradiffmus to it manually or back it up and rerun. "
                "Hook installation aborted - existing hook found"
            )

        try:
            hook_path.parent.mkdir(parents=True, exist_ok=True)
            hook_path.write_text(render_hook_script(kind), encoding="utf-8")
            hook_path.chmod(0o755)
        except OSError as exc:
            raise HookError(f"Failed to install hook: {exc}") from exc
        self.logger.debug("Wrote %s hook to %s", kind, hook_path)
        return HookResult(kind=kind, status=HookStatus.INSTALLED, path=hook_path)

    def uninstall(self, kind: str = "pre-commit") -> HookResult:
        _check_kind(kind)
        hook_path = self._hook_path(kind)

        if not hook_path.exists():
            return HookResult(kind=kind, status=HookStatus.NOT_FOUND, path=hook_path)

        existing = _read_hook(hook_path)
        if HOOK_MARKER not in existing:
            raise HookError(
                f"The {kind} hook at {hook_path} wasn't installed by {HOOK_MARKER}. "
                f"Uninstall aborted - hook not managed by {HOOK_MARKER}"
            )

        try:
            self._remove(hook_path)
        except OSError as exc:
            raise HookError(f"Failed to remove hook file: {exc}") from exc
        return HookResult(kind=kind, status=HookStatus.UNINSTALLED, path=hook_path)

    def _hook_path(self, kind: str) -> Path:
        return self._git_dir() / "hooks" / kind

    def _git_dir(self) -> Path:
        outcome = self._runner(
            ["git", "rev-parse", "--git-dir"], timeout=GIT_DIR_TIMEOUT, cwd=self.cwd
        )
        if outcome.status is CommandStatus.TIMED_OUT:
            raise CommandTimeoutError("Git command timed out. Check your git repository status.")
        if not outcome.ok:
            raise HookError("Not in a git repository. Run this command from inside a git repo.")
        git_dir = Path(outcome.stdout.strip())
        if not git_dir.is_absolute() and self.cwd is not None:
            git_dir = self.cwd / git_dir
        return git_dir


def install_hook(kind: str = "pre-commit", *, cwd: Path | None = None) -> HookResult:
    """Install the nostradiffmus hook of type ``kind`` in the repository at ``cwd``."""
    return HookManager(cwd=cwd).install(kind)


def uninstall_hook(kind: str = "pre-commit", *, cwd: Path | None = None) -> HookResult:
    """Remove a nostradiffmus-managed hook of type ``kind``."""
    return HookManager(cwd=cwd).uninstall(kind)


def _read_hook(hook_path: Path) -> str:
    try:
        return hook_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise HookError(f"Failed to read existing hook at {hook_path}: {exc}") from exc


def _check_kind(kind: str) -> None:
    if kind not in HOOK_TYPES:
        raise HookError(f"Unknown hook type: {kind}. Must be one of: {', '.join(HOOK_TYPES)}")


__all__ = [
    "HOOK_TYPES",
    "HookManager",
    "HookResult",
    "HookStatus",
    "install_hook",
    "render_hook_script",
    "uninstall_hook",
]
