"""Tests for the heuristic signal catalog."""

from __future__ import annotations

import pytest

from nostradiffmus.analyzers.changeset import diff_files
from nostradiffmus.analyzers.signals import (
    FALLBACK_RULE,
    SIGNAL_RULES,
    DiffFacts,
    SignalRule,
    extract_signals,
    is_test_file,
)
from nostradiffmus.models import Category


def _ids(diff: str, files=None) -> list[str]:  # type: ignore[no-untyped-def]
    files = diff_files(diff) if files is None else files
    return [signal.id for signal in extract_signals(diff, files)]


def test_catalog_is_ordered() -> None:
    assert [rule.id for rule in SIGNAL_RULES] == [
        "async-flow-shift",
        "state-mutation",
        "null-guard-drift",
        "validation-logic-shift",
        "boundary-math-shift",
        "deleted-tests",
        "no-test-companion",
        "config-edits",
        "broad-refactor",
    ]
    assert FALLBACK_RULE.id == "low-signal"


def test_detects_async_flow_shift_with_state_mutation() -> None:
    diff = "\n".join(
        [
            "diff --git a/src/a.ts b/src/a.ts",
            "--- a/src/a.ts",
            "+++ b/src/a.ts",
            "+async function syncState() {",
            "+  await queue.flush()",
            "+  setState(next)",
            "-  catch (error) {",
            "-    console.error(error)",
            "-  }",
        ]
    )

    signals = extract_signals(diff, ["src/a.ts"])

    assert [signal.id for signal in signals] == ["async-flow-shift", "state-mutation"]
    assert signals[0].weights == {Category.ASYNC_RACE: 4, Category.STATE_DRIFT: 2}
    assert signals[1].weights == {Category.STATE_DRIFT: 4, Category.ASYNC_RACE: 1}


def test_async_flow_shift_fires_on_removed_error_handling_alone(make_section) -> None:
    diff = make_section("src/a.ts", ["+  await queue.flush()", "-  } catch (error) {"])

    assert _ids(diff) == ["async-flow-shift"]


def test_async_without_state_or_error_edits_is_low_signal(make_section) -> None:
    diff = make_section("src/a.ts", ["+  await queue.flush()"])

    assert _ids(diff) == ["low-signal"]


def test_null_guard_drift(make_section) -> None:
    diff = make_section("src/user.ts", ["+  const name = user?.name;"])

    signals = extract_signals(diff, diff_files(diff))

    assert [signal.id for signal in signals] == ["null-guard-drift"]
    assert signals[0].weights == {Category.NULL_ACCESS: 4, Category.VALIDATION_EDGE: 1}


def test_null_guard_drift_counts_removed_lines(make_section) -> None:
    diff = make_section("src/user.ts", ["-  if (value === undefined) return;"])

    assert _ids(diff) == ["null-guard-drift", "validation-logic-shift"]


def test_validation_logic_shift(make_section) -> None:
    diff = make_section("src/kind.ts", ["+  switch (kind) {"])

    assert _ids(diff) == ["validation-logic-shift"]


def test_boundary_math_shift(make_section) -> None:
    diff = make_section("src/page.ts", ["+  const offset = page * size;"])

    assert _ids(diff) == ["boundary-math-shift"]


def test_deleted_tests(make_section) -> None:
    diff = make_section(
        "src/app.test.ts", ["-describe('app', () => {});"], deleted=True
    )

    signals = extract_signals(diff, diff_files(diff))

    assert [signal.id for signal in signals] == ["deleted-tests"]
    assert signals[0].weights == {Category.TEST_GAPS: 5, Category.INCOMPLETE_REFACTOR: 2}


def test_deleting_non_test_file_does_not_flag_tests(make_section) -> None:
    diff = make_section("src/app.ts", ["-const a = 1;"], deleted=True)

    assert _ids(diff) == ["low-signal"]


def test_no_test_companion_threshold(make_section) -> None:
    at_threshold = make_section("src/big.ts", ["+const x = 1;"] * 80)
    over_threshold = make_section("src/big.ts", ["+const x = 1;"] * 81)

    assert _ids(at_threshold) == ["low-signal"]
    assert _ids(over_threshold) == ["no-test-companion"]


def test_large_change_with_test_companion_is_not_flagged(make_section) -> None:
    diff = "\n".join(
        [
            make_section("src/big.ts", ["+const x = 1;"] * 81),
            make_section("src/big.test.ts", ["+const y = 2;"]),
        ]
    )

    assert _ids(diff) == ["low-signal"]


def test_broad_refactor_by_line_count(make_section) -> None:
    diff = make_section("src/big.ts", ["+const x = 1;"] * 221)

    assert _ids(diff) == ["no-test-companion", "broad-refactor"]


def test_broad_refactor_by_file_count() -> None:
    files = [f"src/module{index}.ts" for index in range(7)]

    assert _ids("", files) == ["broad-refactor"]
    assert _ids("", files[:6]) == ["low-signal"]


@pytest.mark.parametrize("path", ["package.json", "tsconfig.json", ".env.local", "src/config/app.ts"])
def test_config_edits(path: str, make_section) -> None:
    diff = make_section(path, ['+  "version": "1.2.0",'])

    signals = extract_signals(diff, [path])

    assert [signal.id for signal in signals] == ["config-edits"]
    assert signals[0].weights == {Category.CONFIG_REGRESSION: 4}


def test_empty_diff_yields_only_fallback() -> None:
    signals = extract_signals("", [])

    assert len(signals) == 1
    assert signals[0].id == "low-signal"
    assert signals[0].weights == {Category.INCOMPLETE_REFACTOR: 2}


def test_rules_are_evaluated_independently(make_section) -> None:
    diff = make_section(
        "package.json",
        [
            "+  await queue.flush()",
            "+  store.dispatch(action)",
            "+  const name = user?.name;",
            "+  if (ready) {",
            "+  const cursor = 0;",
        ],
    )

    assert _ids(diff) == [
        "async-flow-shift",
        "state-mutation",
        "null-guard-drift",
        "validation-logic-shift",
        "boundary-math-shift",
        "config-edits",
    ]


def test_custom_rule_catalog(make_section) -> None:
    always = SignalRule(
        id="always",
        description="Always fires",
        weights={Category.OFF_BY_ONE: 1},
        predicate=lambda facts: True,
    )

    signals = extract_signals(make_section("a.ts"), ["a.ts"], rules=[always])

    assert [signal.id for signal in signals] == ["always"]


def test_single_rule_can_be_evaluated_against_facts(make_section) -> None:
    facts = DiffFacts.from_diff(make_section("src/a.ts", ["+  items.push(next)"]), ["src/a.ts"])
    state_rule = SIGNAL_RULES[1]

    assert facts.added_state_mutations == 1
    signal = state_rule.evaluate(facts)
    assert signal is not None and signal.id == "state-mutation"
    assert SIGNAL_RULES[0].evaluate(facts) is None


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/app.test.ts", True),
        ("src/app.spec.tsx", True),
        ("src/user.test.jsx", True),
        ("tests/test_api.py", False),
        ("pkg/api_test.py", False),
        ("src\\app.test.ts", True),
        ("src/api.py", False),
        ("src/testing.ts", False),
    ],
)
def test_is_test_file(path: str, expected: bool) -> None:
    assert is_test_file(path) is expected


def test_python_test_files_do_not_count_as_test_companions(make_section) -> None:
    diff = "\n".join(
        [
            make_section("pkg/api.py", ["+value = 1"] * 81),
            make_section("tests/test_api.py", ["+assert value == 1"]),
        ]
    )

    assert _ids(diff) == ["no-test-companion"]
