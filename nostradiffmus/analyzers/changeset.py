"""Split unified diff text into added lines, removed lines and touched files."""

from __future__ import annotations

import re
from typing import List, Sequence

from ..models import ChangeSet

_FILE_HEADER_RE = re.compile(r"^diff --git a/([^\r\n]+?) b/([^\r\n]+)\r?$", re.MULTILINE)


def diff_files(diff: str) -> List[str]:
    """Return the new-path side of every ``diff --git`` header, first-seen order."""
    files: List[str] = []
    for match in _FILE_HEADER_RE.finditer(diff):
        path = match.group(2)
        if path not in files:
            files.append(path)
    return files


def build_changeset(diff: str, files: Sequence[str] | None = None) -> ChangeSet:
    """Collect added/removed line content, skipping the ``+++``/``---`` file markers."""
    added: List[str] = []
    removed: List[str] = []
    for line in diff.split("\n"):
        if line.startswith("+++") or line.startswith("---"):
            continue
        if line.startswith("+"):
            added.append(line[1:])
        elif line.startswith("-"):
            removed.append(line[1:])

    touched = diff_files(diff) if files is None else list(dict.fromkeys(files))
    return ChangeSet(added=tuple(added), removed=tuple(removed), files=tuple(touched))


__all__ = ["build_changeset", "diff_files"]
