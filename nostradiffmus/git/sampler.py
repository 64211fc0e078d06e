"""Budget-constrained diff sampling that keeps per-file headers intact."""

from __future__ import annotations

from typing import List

from ..models import SamplingResult

FILE_HEADER_PREFIX = "diff --git "
HEADER_LINES = 5
TRUNCATION_MARKER = "... [{count} lines truncated] ..."


def split_sections(diff: str) -> List[List[str]]:
    """Split diff text into per-file line groups, each starting at its header.

    Lines that precede the first ``diff --git`` header are not part of any
    section.
    """
    sections: List[List[str]] = []
    for line in diff.split("\n"):
        if line.startswith(FILE_HEADER_PREFIX):
            sections.append([line])
        elif sections:
            sections[-1].append(line)
    return sections


def _sample_section(lines: List[str], budget: int) -> str:
    kept = list(lines[:HEADER_LINES])
    size = len("\n".join(kept))
    index = HEADER_LINES
    while index < len(lines):
        line = lines[index]
        if size + 1 + len(line) > budget:
            break
        kept.append(line)
        size += 1 + len(line)
        index += 1
    omitted = len(lines) - index
    if omitted > 0:
        kept.append(TRUNCATION_MARKER.format(count=omitted))
    return "\n".join(kept)


def sample_diff(diff: str, max_chars: int) -> SamplingResult:
    """Fit ``diff`` into roughly ``max_chars`` characters.

    Every sampled section keeps its first five lines (diff marker, index line,
    old/new file markers and first hunk header) even when that exceeds its
    share of the budget. Sections after the point where the output reaches
    ``max_chars`` are dropped entirely.
    """
    original_size = len(diff)
    if original_size <= max_chars:
        return SamplingResult(
            truncated=diff,
            was_truncated=False,
            original_size=original_size,
            truncated_size=original_size,
        )

    budget = max(max_chars, 0)
    sections = split_sections(diff)
    if not sections:
        return _prefix(diff, budget)

    per_section = budget // len(sections)
    chunks: List[str] = []
    total = 0
    for lines in sections:
        if total >= budget:
            break
        chunk = _sample_section(lines, per_section)
        total += len(chunk) + (1 if chunks else 0)
        chunks.append(chunk)

    sampled = "\n".join(chunks)
    if len(sampled) >= original_size:
        # Markers on nearly-whole sections can outgrow the input.
        return _prefix(diff, budget)
    return SamplingResult(
        truncated=sampled,
        was_truncated=True,
        original_size=original_size,
        truncated_size=len(sampled),
    )


def _prefix(diff: str, budget: int) -> SamplingResult:
    truncated = diff[:budget]
    return SamplingResult(
        truncated=truncated,
        was_truncated=True,
        original_size=len(diff),
        truncated_size=len(truncated),
    )


__all__ = ["TRUNCATION_MARKER", "sample_diff", "split_sections"]
