"""Optional advisory enrichment backends."""

from __future__ import annotations

from ..config import NostradiffmusConfig
from .base import AdvisoryResult, Advisor, build_prompt, normalize_advice_text
from .copilot import CopilotAdvisor
from .local import LocalModelAdvisor


def create_advisor(config: NostradiffmusConfig) -> Advisor | None:
    """Return the configured advisor, or None when enrichment is disabled."""
    if not config.use_advisory:
        return None
    if config.advisor == "local":
        return LocalModelAdvisor(
            config.limits,
            model=config.advisory_model,
            base_url=config.advisory_base_url,
        )
    return CopilotAdvisor(config.limits)


__all__ = [
    "AdvisoryResult",
    "Advisor",
    "CopilotAdvisor",
    "LocalModelAdvisor",
    "build_prompt",
    "create_advisor",
    "normalize_advice_text",
]
