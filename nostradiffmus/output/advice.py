"""Fixed remediation advice per defect category."""

from __future__ import annotations

from ..models import Category

ADVICE: dict[Category, str] = {
    Category.ASYNC_RACE: (
        "You modified async flow near shared state. "
        "Verify await sequencing, cancellation, and error propagation."
    ),
    Category.STATE_DRIFT: (
        "State mutation behavior changed. "
        "Audit writes for ordering, immutability assumptions, and stale closure usage."
    ),
    Category.NULL_ACCESS: (
        "Guard behavior changed. "
        "Re-check nullable paths, optional chaining, and default fallback values."
    ),
    Category.VALIDATION_EDGE: (
        "Validation logic shifted. "
        "Add tests for boundary inputs, empty payloads, and malformed data."
    ),
    Category.OFF_BY_ONE: (
        "Indexing/range edits detected. "
        "Verify loop bounds, slice ranges, and length-based conditions."
    ),
    Category.INCOMPLETE_REFACTOR: (
        "Broad structural edits suggest partial migration risk. "
        "Search for old call sites and stale invariants."
    ),
    Category.TEST_GAPS: (
        "Code changed without proportional test movement. "
        "Add or update tests around affected branches."
    ),
    Category.CONFIG_REGRESSION: (
        "Configuration files changed. "
        "Validate env defaults, script behavior, and runtime assumptions."
    ),
}


def build_advice(category: Category, enrichment: str | None = None) -> str:
    """Return the advice sentence for ``category``, with any advisory note appended."""
    advice = ADVICE[category]
    if enrichment:
        return f"{advice} Copilot note: {enrichment}"
    return advice


__all__ = ["ADVICE", "build_advice"]
