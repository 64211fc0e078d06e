"""Diff analysis pipeline: change sets, signals and classification."""

from .changeset import build_changeset, diff_files
from .classify import classify, rank_categories, score_categories
from .signals import FALLBACK_RULE, SIGNAL_RULES, DiffFacts, SignalRule, extract_signals

__all__ = [
    "DiffFacts",
    "FALLBACK_RULE",
    "SIGNAL_RULES",
    "SignalRule",
    "build_changeset",
    "classify",
    "diff_files",
    "extract_signals",
    "rank_categories",
    "score_categories",
]
