"""Structured and plain-text reports for a finished analysis."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import AnalysisOutcome, DiffMetadata
from .prophecy import render_prophecy


class MetadataReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    diff_size_chars: int = Field(alias="diffSizeChars")
    diff_size_kb: float = Field(alias="diffSizeKB")
    was_truncated_for_advisory: bool = Field(alias="wasTruncatedForCopilot")
    files_changed: int = Field(alias="filesChanged")

    @classmethod
    def from_metadata(cls, metadata: DiffMetadata) -> "MetadataReport":
        return cls(
            diff_size_chars=metadata.diff_size_chars,
            diff_size_kb=metadata.diff_size_kb,
            was_truncated_for_advisory=metadata.was_truncated_for_advisory,
            files_changed=metadata.files_changed,
        )


class PredictionReport(BaseModel):
    """JSON shape consumed by CI pipelines."""

    model_config = ConfigDict(populate_by_name=True)

    predicted_bug_category: str = Field(alias="predictedBugCategory")
    category_label: str = Field(alias="categoryLabel")
    confidence: float
    signals: List[str]
    advice: str
    metadata: Optional[MetadataReport] = None

    @classmethod
    def from_outcome(cls, outcome: AnalysisOutcome) -> "PredictionReport":
        return cls(
            predicted_bug_category=outcome.prediction.category.value,
            category_label=outcome.prediction.label,
            confidence=outcome.prediction.confidence,
            signals=[signal.description for signal in outcome.signals],
            advice=outcome.advice,
            metadata=(
                MetadataReport.from_metadata(outcome.metadata)
                if outcome.metadata is not None
                else None
            ),
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def render_text(outcome: AnalysisOutcome, *, tone: str = "tragic", quiet: bool = False) -> str:
    """Human-readable report; ``quiet`` drops the prophecy and confidence lines."""
    lines: List[str] = []
    if not quiet:
        lines.append(render_prophecy(tone, outcome.prediction.category))
        lines.append("")
    lines.append(f"⚠ Likely Bug Category: {outcome.prediction.label}")
    lines.append(f"🧠 Advice: {outcome.advice}")
    if not quiet:
        lines.append(f"📊 Confidence: {round(outcome.prediction.confidence * 100)}%")
    return "\n".join(lines)


__all__ = ["MetadataReport", "PredictionReport", "render_text"]
