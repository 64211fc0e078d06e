"""Heuristic signal extraction from diff text.

Each rule in :data:`SIGNAL_RULES` is a declarative descriptor: a predicate over
:class:`DiffFacts` plus the weights it contributes when it fires. The catalog is
evaluated in order and in full on every run; :data:`FALLBACK_RULE` fires only
when nothing else did, so extraction always yields at least one signal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Pattern, Sequence

from ..models import Category, ChangeSet, Signal
from .changeset import build_changeset

ASYNC_PATTERN = re.compile(r"\b(async\s+function|await\s+|Promise\.)\b")
STATE_PATTERN = re.compile(
    r"\b(setState\(|dispatch\(|useState\(|state\.|store\.|\.push\(|\.splice\()\b"
)
ERROR_PATTERN = re.compile(r"\b(catch\s*\(|throw\s+|reject\(|console\.error)\b")
VALIDATION_PATTERN = re.compile(r"\b(validate|schema|zod|yup|if\s*\(|switch\s*\()\b")
BOUNDARY_PATTERN = re.compile(r"\b(length\s*[-+]|<=|>=|index|cursor|offset|slice\()\b")
NULLABLE_PATTERN = re.compile(r"\b(null|undefined|\?\.|!\.)\b")

TEST_FILE_PATTERN = re.compile(r"(test|spec)\.(ts|tsx|js|jsx)$")
CONFIG_FILE_PATTERN = re.compile(r"(package\.json|tsconfig\.json|\.env|config)")

DELETED_FILE_MARKER = "deleted file mode"

NO_TEST_COMPANION_LINES = 80
BROAD_REFACTOR_LINES = 220
BROAD_REFACTOR_FILES = 7


def count_matches(lines: Iterable[str], pattern: Pattern[str]) -> int:
    """Number of lines containing at least one match of ``pattern``."""
    return sum(1 for line in lines if pattern.search(line))


def is_test_file(path: str) -> bool:
    normalized = path.replace("\\", "/")
    return TEST_FILE_PATTERN.search(normalized) is not None


@dataclass(frozen=True)
class DiffFacts:
    """Counts and flags derived once from a diff for rule predicates."""

    changeset: ChangeSet
    added_async: int
    added_state_mutations: int
    removed_error_handling: int
    nullable_changes: int
    validation_changes: int
    boundary_changes: int
    test_file_touched: bool
    file_deleted: bool
    config_touched: bool

    @property
    def changed_lines(self) -> int:
        return self.changeset.changed_line_count

    @property
    def file_count(self) -> int:
        return len(self.changeset.files)

    @classmethod
    def from_diff(cls, diff: str, files: Sequence[str]) -> "DiffFacts":
        changeset = build_changeset(diff, files)
        added, removed = changeset.added, changeset.removed
        both = added + removed
        return cls(
            changeset=changeset,
            added_async=count_matches(added, ASYNC_PATTERN),
            added_state_mutations=count_matches(added, STATE_PATTERN),
            removed_error_handling=count_matches(removed, ERROR_PATTERN),
            nullable_changes=count_matches(both, NULLABLE_PATTERN),
            validation_changes=count_matches(both, VALIDATION_PATTERN),
            boundary_changes=count_matches(both, BOUNDARY_PATTERN),
            test_file_touched=any(is_test_file(path) for path in changeset.files),
            file_deleted=any(
                line.startswith(DELETED_FILE_MARKER) for line in diff.split("\n")
            ),
            config_touched=any(CONFIG_FILE_PATTERN.search(path) for path in changeset.files),
        )


@dataclass(frozen=True)
class SignalRule:
    """Predicate plus the weights emitted when it holds."""

    id: str
    description: str
    weights: Mapping[Category, float]
    predicate: Callable[[DiffFacts], bool]

    def evaluate(self, facts: DiffFacts) -> Signal | None:
        if not self.predicate(facts):
            return None
        return self.to_signal()

    def to_signal(self) -> Signal:
        return Signal(id=self.id, description=self.description, weights=dict(self.weights))


SIGNAL_RULES: Sequence[SignalRule] = (
    SignalRule(
        id="async-flow-shift",
        description="Async flow changed alongside shared state or error path edits",
        weights={Category.ASYNC_RACE: 4, Category.STATE_DRIFT: 2},
        predicate=lambda facts: facts.added_async > 0
        and (facts.added_state_mutations > 0 or facts.removed_error_handling > 0),
    ),
    SignalRule(
        id="state-mutation",
        description="State mutation patterns changed",
        weights={Category.STATE_DRIFT: 4, Category.ASYNC_RACE: 1},
        predicate=lambda facts: facts.added_state_mutations > 0,
    ),
    SignalRule(
        id="null-guard-drift",
        description="Null/undefined guard behavior changed",
        weights={Category.NULL_ACCESS: 4, Category.VALIDATION_EDGE: 1},
        predicate=lambda facts: facts.nullable_changes > 0,
    ),
    SignalRule(
        id="validation-logic-shift",
        description="Validation or branching logic changed",
        weights={Category.VALIDATION_EDGE: 4, Category.OFF_BY_ONE: 1},
        predicate=lambda facts: facts.validation_changes > 0,
    ),
    SignalRule(
        id="boundary-math-shift",
        description="Boundary-sensitive indexing or range logic changed",
        weights={Category.OFF_BY_ONE: 4},
        predicate=lambda facts: facts.boundary_changes > 0,
    ),
    SignalRule(
        id="deleted-tests",
        description="Test file removal detected",
        weights={Category.TEST_GAPS: 5, Category.INCOMPLETE_REFACTOR: 2},
        predicate=lambda facts: facts.file_deleted and facts.test_file_touched,
    ),
    SignalRule(
        id="no-test-companion",
        description="Large code change landed without matching test file edits",
        weights={Category.TEST_GAPS: 4},
        predicate=lambda facts: not facts.test_file_touched
        and facts.changed_lines > NO_TEST_COMPANION_LINES,
    ),
    SignalRule(
        id="config-edits",
        description="Configuration-related files changed",
        weights={Category.CONFIG_REGRESSION: 4},
        predicate=lambda facts: facts.config_touched,
    ),
    SignalRule(
        id="broad-refactor",
        description="Broad structural change detected",
        weights={Category.INCOMPLETE_REFACTOR: 4, Category.TEST_GAPS: 2},
        predicate=lambda facts: facts.changed_lines > BROAD_REFACTOR_LINES
        or facts.file_count >= BROAD_REFACTOR_FILES,
    ),
)

FALLBACK_RULE = SignalRule(
    id="low-signal",
    description="Only subtle structural shifts detected",
    weights={Category.INCOMPLETE_REFACTOR: 2},
    predicate=lambda facts: True,
)


def extract_signals(
    diff: str,
    files: Sequence[str],
    *,
    rules: Sequence[SignalRule] = SIGNAL_RULES,
) -> List[Signal]:
    """Evaluate every rule against the diff, in catalog order."""
    facts = DiffFacts.from_diff(diff, files)
    signals: List[Signal] = []
    for rule in rules:
        signal = rule.evaluate(facts)
        if signal is not None:
            signals.append(signal)
    if not signals:
        signals.append(FALLBACK_RULE.to_signal())
    return signals


__all__ = [
    "DiffFacts",
    "FALLBACK_RULE",
    "SIGNAL_RULES",
    "SignalRule",
    "count_matches",
    "extract_signals",
    "is_test_file",
]
