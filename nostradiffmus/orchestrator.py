"""Pipeline orchestration: acquire a diff, score it, and enrich the advice."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from .advisory import Advisor, create_advisor
from .analyzers import classify, diff_files, extract_signals
from .config import NostradiffmusConfig, resolve_config
from .errors import DiffUnavailableError
from .git.diff import DiffSource
from .git.sampler import sample_diff
from .logging import get_logger
from .models import AnalysisOutcome, DiffMetadata, SamplingResult
from .output.advice import build_advice

_NO_ADVISOR = object()


class Orchestrator:
    """Coordinates diff acquisition, classification and optional enrichment."""

    def __init__(
        self,
        config: NostradiffmusConfig | None = None,
        *,
        diff_source: DiffSource | None = None,
        advisor: Advisor | None | object = _NO_ADVISOR,
    ) -> None:
        self.config = config or resolve_config(Path.cwd())
        self.diff_source = diff_source or DiffSource(self.config.limits, cwd=self.config.root)
        if advisor is _NO_ADVISOR:
            self.advisor = create_advisor(self.config)
        else:
            self.advisor = advisor  # type: ignore[assignment]
        self.logger = get_logger("orchestrator")

    def run(self, commit: Optional[str] = None, *, use_advisory: bool = True) -> AnalysisOutcome:
        """Analyze the staged changes, or ``commit`` when given."""
        diff = self.diff_source.read(commit)
        self.logger.debug("Read %d chars from %s", diff.size_chars, diff.source)
        if not diff.text.strip():
            raise DiffUnavailableError(
                "No diff content found. Stage changes or choose a commit to analyze."
            )
        return self.analyze_text(diff.text, diff.files, use_advisory=use_advisory)

    def analyze_text(
        self,
        diff: str,
        files: Sequence[str] | None = None,
        *,
        use_advisory: bool = True,
    ) -> AnalysisOutcome:
        """Run signal extraction, classification and enrichment on raw diff text."""
        changed_files = list(files) if files is not None else diff_files(diff)
        clipped = self.diff_source.clip_lines(diff)
        signals = extract_signals(clipped, changed_files)
        prediction = classify(signals)
        self.logger.debug(
            "Signals fired: %s -> %s (%.2f)",
            ", ".join(signal.id for signal in signals),
            prediction.category.value,
            prediction.confidence,
        )

        enrichment: Optional[str] = None
        sampling: Optional[SamplingResult] = None
        if use_advisory and self.advisor is not None:
            try:
                result = self.advisor.advise(diff)
            except (OSError, RuntimeError) as exc:
                self.logger.debug("Advisory enrichment failed: %s", exc)
            else:
                enrichment = result.text
                sampling = result.sampling
        if sampling is None:
            sampling = sample_diff(diff, self.config.limits.max_advisory_chars)

        metadata = DiffMetadata(
            diff_size_chars=len(diff),
            diff_size_kb=round(len(diff) / 1024, 2),
            was_truncated_for_advisory=sampling.was_truncated,
            files_changed=len(changed_files),
        )
        return AnalysisOutcome(
            prediction=prediction,
            signals=tuple(signals),
            advice=build_advice(prediction.category, enrichment),
            enrichment=enrichment,
            metadata=metadata,
        )


__all__ = ["Orchestrator"]
