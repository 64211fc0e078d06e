"""Core data models shared across nostradiffmus components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple


class Category(str, Enum):
    """Defect kinds a diff can be predicted to introduce.

    Declaration order is the tie-break priority used by the classifier.
    """

    ASYNC_RACE = "AsyncRace"
    STATE_DRIFT = "StateDrift"
    NULL_ACCESS = "NullAccess"
    VALIDATION_EDGE = "ValidationEdge"
    OFF_BY_ONE = "OffByOne"
    INCOMPLETE_REFACTOR = "IncompleteRefactor"
    TEST_GAPS = "TestGaps"
    CONFIG_REGRESSION = "ConfigRegression"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[Category, str] = {
    Category.ASYNC_RACE: "Async Race Conditions",
    Category.STATE_DRIFT: "State Drift",
    Category.NULL_ACCESS: "Null/Undefined Access",
    Category.VALIDATION_EDGE: "Validation Edge Cases",
    Category.OFF_BY_ONE: "Off-By-One Errors",
    Category.INCOMPLETE_REFACTOR: "Incomplete Refactors",
    Category.TEST_GAPS: "Test Coverage Gaps",
    Category.CONFIG_REGRESSION: "Configuration Regressions",
}


@dataclass(frozen=True)
class ChangeSet:
    """Added and removed line content plus the files a diff touches."""

    added: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()
    files: Tuple[str, ...] = ()

    @property
    def changed_line_count(self) -> int:
        return len(self.added) + len(self.removed)


@dataclass(frozen=True)
class Signal:
    """Weighted piece of evidence pointing at likely defect categories."""

    id: str
    description: str
    weights: Mapping[Category, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Prediction:
    """Top-ranked category for a set of signals."""

    category: Category
    confidence: float
    label: str


@dataclass(frozen=True)
class SamplingResult:
    """Size-bounded rendition of a diff."""

    truncated: str
    was_truncated: bool
    original_size: int
    truncated_size: int


@dataclass(frozen=True)
class DiffMetadata:
    """Size facts about the analysed diff, echoed in structured output."""

    diff_size_chars: int
    diff_size_kb: float
    was_truncated_for_advisory: bool
    files_changed: int


@dataclass(frozen=True)
class AnalysisOutcome:
    """Everything the presentation layer needs to report one analysis."""

    prediction: Prediction
    signals: Tuple[Signal, ...]
    advice: str
    enrichment: Optional[str] = None
    metadata: Optional[DiffMetadata] = None


__all__ = [
    "AnalysisOutcome",
    "CATEGORY_LABELS",
    "Category",
    "ChangeSet",
    "DiffMetadata",
    "Prediction",
    "SamplingResult",
    "Signal",
]
