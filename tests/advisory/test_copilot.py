"""Tests for the Copilot CLI advisory backend."""

from __future__ import annotations

from nostradiffmus.advisory.base import TRUNCATION_NOTE, build_prompt, normalize_advice_text
from nostradiffmus.advisory.copilot import CopilotAdvisor
from nostradiffmus.config import Limits
from nostradiffmus.models import SamplingResult
from nostradiffmus.runner import CommandStatus


def _gh_only_handler(make_outcome, *, silent_ok: bool = False, answer: str = ""):  # type: ignore[no-untyped-def]
    def handler(argv):  # type: ignore[no-untyped-def]
        if argv == ["copilot", "--help"]:
            return make_outcome(argv, status=CommandStatus.MISSING)
        if argv == ["gh", "copilot", "--help"]:
            return make_outcome(argv, stdout="usage")
        if "-s" in argv and not silent_ok:
            return make_outcome(argv, status=CommandStatus.FAILED, stderr="unknown flag: -s")
        return make_outcome(argv, stdout=answer)

    return handler


def test_falls_back_to_gh_wrapper_and_retries_without_silent_flag(
    fake_runner, make_outcome, make_section
) -> None:
    runner = fake_runner(
        _gh_only_handler(make_outcome, answer="- Check `await` ordering and **error** paths.\n")
    )
    advisor = CopilotAdvisor(runner=runner, environ={})

    result = advisor.advise(make_section("src/a.ts", ["+await x()"]))

    assert result.text == "Check await ordering and error paths."
    assert result.sampling.was_truncated is False
    argvs = [call["args"] for call in runner.calls]
    assert argvs[0] == ["copilot", "--help"]
    assert argvs[1] == ["gh", "copilot", "--help"]
    assert argvs[2][:4] == ["gh", "copilot", "--", "-p"]
    assert argvs[2][-1] == "-s"
    assert "-s" not in argvs[3]
    assert [call["timeout"] for call in runner.calls] == [10.0, 10.0, 35.0, 35.0]
    assert runner.calls[2]["env"] == {"COPILOT_ALLOW_ALL": "1"}


def test_prefers_standalone_binary(fake_runner, make_outcome) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, stdout="Looks fine."))

    result = CopilotAdvisor(runner=runner, environ={"COPILOT_ALLOW_ALL": "0"}).advise("+x")

    assert result.text == "Looks fine."
    assert len(runner.calls) == 2
    assert runner.calls[1]["args"][0] == "copilot"
    assert runner.calls[1]["env"] == {"COPILOT_ALLOW_ALL": "0"}


def test_returns_no_text_when_copilot_is_unavailable(fake_runner, make_outcome) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, status=CommandStatus.MISSING))

    result = CopilotAdvisor(runner=runner, environ={}).advise("+x")

    assert result.text is None
    assert result.sampling.original_size == 2
    assert len(runner.calls) == 2


def test_returns_no_text_when_every_attempt_fails(fake_runner, make_outcome) -> None:
    def handler(argv):  # type: ignore[no-untyped-def]
        if argv[-1] == "--help":
            return make_outcome(argv)
        return make_outcome(argv, status=CommandStatus.TIMED_OUT)

    runner = fake_runner(handler)

    result = CopilotAdvisor(runner=runner, environ={}).advise("+x")

    assert result.text is None
    assert len(runner.calls) == 3


def test_empty_output_counts_as_failure(fake_runner, make_outcome) -> None:
    runner = fake_runner(_gh_only_handler(make_outcome, silent_ok=True, answer="   "))

    result = CopilotAdvisor(runner=runner, environ={}).advise("+x")

    assert result.text is None


def test_large_diff_is_sampled_before_prompting(fake_runner, make_outcome, make_section) -> None:
    runner = fake_runner(lambda argv: make_outcome(argv, stdout="ok"))
    diff = make_section("src/a.ts", ["+const value = 1;"] * 50)
    advisor = CopilotAdvisor(Limits(max_advisory_chars=200), runner=runner, environ={})

    result = advisor.advise(diff)

    assert result.sampling.was_truncated is True
    prompt = runner.calls[1]["args"][2]
    assert TRUNCATION_NOTE in prompt
    assert result.sampling.truncated in prompt


def test_build_prompt_omits_note_for_whole_diff() -> None:
    sampling = SamplingResult(truncated="+x", was_truncated=False, original_size=2, truncated_size=2)

    prompt = build_prompt(sampling)

    assert prompt.endswith("\n\n+x")
    assert TRUNCATION_NOTE not in prompt


def test_normalize_advice_text_strips_markup() -> None:
    raw = "<p>• Watch the &quot;retry&quot; loop &amp; its&nbsp;cursor.</p>\n* Second line"

    assert normalize_advice_text(raw) == 'Watch the "retry" loop & its cursor. Second line'
