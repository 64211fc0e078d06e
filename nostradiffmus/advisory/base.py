"""Shared pieces for optional advisory enrichment."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Optional, Protocol

from ..models import SamplingResult

PROMPT_HEADER = "Analyze this git diff and provide a concise bug-risk advisory in 1-2 sentences:"
TRUNCATION_NOTE = "[Note: Diff truncated for size]"

_TAG_RE = re.compile(r"<[^>]+>")
_BULLET_RE = re.compile(r"^\s*[•●*-]\s*", re.MULTILINE)
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class AdvisoryResult:
    """Advisory text (if any) and the sampling applied to the prompt diff."""

    text: Optional[str]
    sampling: SamplingResult


class Advisor(Protocol):
    def advise(self, diff: str) -> AdvisoryResult:
        """Return an advisory sentence for ``diff``; never raises."""


def build_prompt(sampling: SamplingResult) -> str:
    parts = [PROMPT_HEADER]
    if sampling.was_truncated:
        parts.append(TRUNCATION_NOTE)
    parts.append(sampling.truncated)
    return "\n\n".join(part for part in parts if part)


def normalize_advice_text(raw: str) -> str:
    """Strip markup from model output and collapse it onto one line."""
    text = _TAG_RE.sub(" ", raw)
    text = _BULLET_RE.sub("", text)
    text = _INLINE_CODE_RE.sub(r"\1", text)
    text = _BOLD_RE.sub(r"\1", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return html.unescape(text).replace("\xa0", " ")


__all__ = [
    "AdvisoryResult",
    "Advisor",
    "PROMPT_HEADER",
    "TRUNCATION_NOTE",
    "build_prompt",
    "normalize_advice_text",
]
