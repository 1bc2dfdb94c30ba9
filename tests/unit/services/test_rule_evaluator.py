"""Tests for calibration and threshold rule evaluation."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from factory_telemetry.services.rule_evaluator import calibrate, is_violated


def _rule(operator: str, min_value=None, max_value=None, threshold_value=None) -> SimpleNamespace:
    return SimpleNamespace(
        operator=operator, min_value=min_value, max_value=max_value, threshold_value=threshold_value,
    )


def test_calibrate_applies_scale_then_offset() -> None:
    assert calibrate(10, 0.5, 2) == pytest.approx(7.0)
    assert calibrate(-4, 2.0, -1.0) == pytest.approx(-9.0)


def test_calibrate_defaults_to_identity() -> None:
    assert calibrate(3.25) == 3.25
    assert calibrate(3.25, None, None) == 3.25


@pytest.mark.parametrize("value", [0.0, 5.0, 10.0])
def test_range_bounds_are_safe(value: float) -> None:
    assert is_violated(_rule("range", min_value=0, max_value=10), value) is False


@pytest.mark.parametrize("value", [-0.0001, 10.0001])
def test_range_violates_outside_bounds(value: float) -> None:
    assert is_violated(_rule("range", min_value=0, max_value=10), value) is True


def test_range_with_single_bound() -> None:
    upper_only = _rule("range", max_value=80)
    lower_only = _rule("range", min_value=15)

    assert is_violated(upper_only, -1000) is False
    assert is_violated(upper_only, 80.5) is True
    assert is_violated(lower_only, 1000) is False
    assert is_violated(lower_only, 14.9) is True


def test_range_without_bounds_never_violates() -> None:
    assert is_violated(_rule("range"), 1e9) is False


def test_gt_and_lt_are_strict() -> None:
    assert is_violated(_rule("gt", threshold_value=50), 50) is False
    assert is_violated(_rule("gt", threshold_value=50), 50.01) is True
    assert is_violated(_rule("lt", threshold_value=50), 50) is False
    assert is_violated(_rule("lt", threshold_value=50), 49.99) is True


def test_eq_is_exact_comparison() -> None:
    rule = _rule("eq", threshold_value=0.3)

    assert is_violated(rule, 0.3) is True
    # 0.1 + 0.2 != 0.3 in binary floating point; no tolerance is applied
    assert is_violated(rule, 0.1 + 0.2) is False


def test_threshold_operator_without_threshold_never_violates() -> None:
    for operator in ("gt", "lt", "eq"):
        assert is_violated(_rule(operator), 0.0) is False


def test_unknown_operator_never_violates() -> None:
    assert is_violated(_rule("between", threshold_value=1), 1) is False
