"""Presentation helpers: advice, prophecy and reports."""

from .advice import ADVICE, build_advice
from .prophecy import render_prophecy
from .report import MetadataReport, PredictionReport, render_text

__all__ = [
    "ADVICE",
    "MetadataReport",
    "PredictionReport",
    "build_advice",
    "render_prophecy",
    "render_text",
]
