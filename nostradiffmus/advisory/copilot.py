"""Advisory enrichment through the GitHub Copilot CLI."""

from __future__ import annotations

import os
from typing import List, Mapping, Optional, Sequence

from ..config import Limits
from ..git.sampler import sample_diff
from ..logging import get_logger
from ..runner import CommandOutcome, CommandRunner, run_command
from .base import AdvisoryResult, build_prompt, normalize_advice_text

PROBE_TIMEOUT = 10.0


class CopilotAdvisor:
    """Asks a standalone ``copilot`` binary, or ``gh copilot``, for a short advisory."""

    def __init__(
        self,
        limits: Limits | None = None,
        *,
        runner: CommandRunner | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.limits = limits or Limits()
        self._runner = runner or run_command
        self._environ = environ
        self.logger = get_logger("advisory.copilot")

    def advise(self, diff: str) -> AdvisoryResult:
        sampling = sample_diff(diff, self.limits.max_advisory_chars)
        prompt = build_prompt(sampling)
        prompt_args = [
            "-p",
            prompt,
            "--allow-all-tools",
            "--no-ask-user",
            "--stream",
            "off",
            "--no-color",
            "-s",
        ]
        self.logger.debug("using timeout=%gs", self.limits.advisory_timeout)

        command = self._resolve_command()
        if command is None:
            self.logger.debug("no copilot command available")
            return AdvisoryResult(text=None, sampling=sampling)

        variants = (prompt_args, [arg for arg in prompt_args if arg != "-s"])
        for attempt, args in enumerate(variants, start=1):
            outcome = self._run([*command, *args], timeout=self.limits.advisory_timeout)
            self.logger.debug(
                "attempt %d: status=%s returncode=%s text=%s",
                attempt,
                outcome.status.value,
                outcome.returncode,
                bool(outcome.text),
            )
            if outcome.ok and outcome.text:
                return AdvisoryResult(text=normalize_advice_text(outcome.text), sampling=sampling)

        self.logger.debug("all copilot attempts failed; falling back to heuristics")
        return AdvisoryResult(text=None, sampling=sampling)

    def _resolve_command(self) -> Optional[List[str]]:
        if self._probe(["copilot", "--help"]):
            self.logger.debug("trying standalone copilot binary")
            return ["copilot"]
        if self._probe(["gh", "copilot", "--help"]):
            self.logger.debug("trying gh copilot wrapper")
            return ["gh", "copilot", "--"]
        return None

    def _probe(self, args: Sequence[str]) -> bool:
        return self._run(args, timeout=PROBE_TIMEOUT).ok

    def _run(self, args: Sequence[str], *, timeout: float) -> CommandOutcome:
        return self._runner(list(args), timeout=timeout, env=self._child_env())

    def _child_env(self) -> dict[str, str]:
        env = dict(os.environ if self._environ is None else self._environ)
        env.setdefault("COPILOT_ALLOW_ALL", "1")
        return env


__all__ = ["CopilotAdvisor"]
