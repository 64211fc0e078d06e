"""Fold signal weights into a ranked category prediction."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Tuple

from ..models import Category, Prediction, Signal

_CONFIDENCE_QUANTUM = Decimal("0.01")


def score_categories(signals: Iterable[Signal]) -> Dict[Category, float]:
    """Sum signal weights per category; every category starts at zero."""
    scores: Dict[Category, float] = {category: 0 for category in Category}
    for signal in signals:
        for category, weight in signal.weights.items():
            scores[Category(category)] += weight or 0
    return scores


def rank_categories(scores: Dict[Category, float]) -> List[Tuple[Category, float]]:
    """Order categories by descending score; ties keep enum declaration order."""
    # sorted() is stable, so equal scores stay in Category order.
    return sorted(
        ((category, scores[category]) for category in Category),
        key=lambda item: item[1],
        reverse=True,
    )


def classify(signals: Iterable[Signal]) -> Prediction:
    """Predict the top category and its share of the total weight."""
    ranked = rank_categories(score_categories(signals))
    top_category, top_score = ranked[0]
    total = sum(score for _, score in ranked) or 1
    confidence = (Decimal(top_score) / Decimal(total)).quantize(
        _CONFIDENCE_QUANTUM, rounding=ROUND_HALF_UP
    )
    return Prediction(
        category=top_category,
        confidence=float(confidence),
        label=top_category.label,
    )


__all__ = ["classify", "rank_categories", "score_categories"]
