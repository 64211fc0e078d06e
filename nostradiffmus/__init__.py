"""Heuristic bug-category prediction from git diffs."""

from .analyzers import build_changeset, classify, diff_files, extract_signals
from .git.sampler import sample_diff
from .models import Category, ChangeSet, Prediction, SamplingResult, Signal

__version__ = "0.1.0"

__all__ = [
    "Category",
    "ChangeSet",
    "Prediction",
    "SamplingResult",
    "Signal",
    "build_changeset",
    "classify",
    "diff_files",
    "extract_signals",
    "sample_diff",
]
