"""Themed narrative rendering around a prediction."""

from __future__ import annotations

from typing import Callable, Dict, List

from jinja2 import Environment

from ..config import TONES
from ..models import Category

CATEGORY_OMENS: Dict[Category, List[str]] = {
    Category.ASYNC_RACE: [
        "A race condition hides in asynchronous shadows.",
        "Promises entwine before state can settle.",
        "An error path fades when timing turns chaotic.",
    ],
    Category.STATE_DRIFT: [
        "State diverges quietly before it fractures loudly.",
        "Mutations gather where invariants once stood.",
        "A stale value lingers past its rightful era.",
    ],
    Category.NULL_ACCESS: [
        "A nullable path slips beyond the guards.",
        "An undefined whisper becomes a runtime shout.",
        "A missing branch opens where certainty was assumed.",
    ],
    Category.VALIDATION_EDGE: [
        "A strange input reaches the throne unchallenged.",
        "Validation bends for common paths and breaks for rare ones.",
        "An edge case waits where assumptions are thin.",
    ],
    Category.OFF_BY_ONE: [
        "A boundary is crossed by one fateful step.",
        "Indices drift near the edge of certainty.",
        "A loop closes too soon or one turn too late.",
    ],
    Category.INCOMPLETE_REFACTOR: [
        "Old and new structures now share an uneasy border.",
        "A renamed path leaves echoes in forgotten call sites.",
        "Refactor winds moved faster than invariants could follow.",
    ],
    Category.TEST_GAPS: [
        "CI trembles where coverage has grown thin.",
        "A changed path walks untested into production.",
        "Behavior shifts without a corresponding oracle.",
    ],
    Category.CONFIG_REGRESSION: [
        "Configuration runes have been rewritten.",
        "An environment key changes fate at runtime.",
        "Defaults move, and deployment follows blindly.",
    ],
}

TONE_PREFIXES: Dict[str, str] = {
    "tragic": "🔮 Consulting the sacred diff scrolls...",
    "cryptic": "🔮 Patterns emerge in fractured symbols...",
    "sarcastic": "🔮 Excellent. Another harmless little change, surely...",
    "biblical": "🔮 And lo, the diff was opened, and signs were many.",
    "clinical": "🔮 Differential risk analysis in progress.",
}

_LINE_TRANSFORMS: Dict[str, Callable[[str], str]] = {
    "tragic": lambda line: line,
    "cryptic": lambda line: line.replace(" ", " ... ", 1),
    "sarcastic": lambda line: f"{line[:-1]}. Obviously.",
    "biblical": lambda line: f"Behold: {line}",
    "clinical": lambda line: line.replace(".", "", 1),
}

_TEMPLATE = Environment(autoescape=False).from_string(
    "{{ prefix }}\n\nI foresee:\n"
    "{% for line in lines %}• {{ line }}{% if not loop.last %}\n{% endif %}{% endfor %}"
)


def render_prophecy(tone: str, category: Category) -> str:
    """Render the omen block for ``category`` in the requested tone."""
    if tone not in TONES:
        raise ValueError(f"Invalid tone: {tone}")
    transform = _LINE_TRANSFORMS[tone]
    lines = [transform(line) for line in CATEGORY_OMENS[category]]
    return _TEMPLATE.render(prefix=TONE_PREFIXES[tone], lines=lines)


__all__ = ["CATEGORY_OMENS", "TONE_PREFIXES", "render_prophecy"]
