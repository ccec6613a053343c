"""Tests for solver result interpretation."""

import pytest

from npk_blend.interpret import interpret
from npk_blend.models import DecisionVariables, ErrorKind, Nutrient, Solution, SolverStatus


@pytest.fixture
def decision():
    return [DecisionVariables.for_index(i) for i in range(3)]


@pytest.mark.parametrize("status", [SolverStatus.OPTIMAL, SolverStatus.FEASIBLE])
def test_recipe_and_actual_percentages(urea, dap, potash, decision, status):
    values = {"amount_0": 200.0, "amount_1": 0.0, "amount_2": 300.0}
    result = interpret(Solution(status, values), [urea, dap, potash], decision)

    assert result.ok
    assert [(i.ingredient, i.amount) for i in result.recipe] == [(urea, 200.0), (potash, 300.0)]
    assert result.actual_weight == pytest.approx(500)
    assert result.actual[Nutrient.N] == pytest.approx(200 * 0.46 / 500 * 100)
    assert result.actual[Nutrient.P] == 0
    assert result.actual[Nutrient.K] == pytest.approx(36)


def test_noise_below_threshold_dropped(urea, dap, potash, decision):
    values = {"amount_0": 1000.0, "amount_1": 0.0005, "amount_2": -1e-9}
    result = interpret(Solution(SolverStatus.OPTIMAL, values), [urea, dap, potash], decision)

    assert [i.ingredient for i in result.recipe] == [urea]
    assert all(item.amount > 0.001 for item in result.recipe)


def test_threshold_is_configurable(urea, dap, potash, decision):
    values = {"amount_0": 995.0, "amount_1": 5.0, "amount_2": 0.0}
    result = interpret(
        Solution(SolverStatus.OPTIMAL, values), [urea, dap, potash], decision, threshold=10
    )

    assert [i.ingredient for i in result.recipe] == [urea]
    assert result.actual_weight == 995.0


def test_empty_recipe_is_success(urea, dap, potash, decision):
    values = {"amount_0": 0.0, "amount_1": 0.0, "amount_2": 0.0}
    result = interpret(Solution(SolverStatus.OPTIMAL, values), [urea, dap, potash], decision)

    assert result.ok
    assert result.recipe == ()
    assert result.actual_weight == 0
    assert result.actual == {Nutrient.N: 0.0, Nutrient.P: 0.0, Nutrient.K: 0.0}


@pytest.mark.parametrize(
    "status,kind",
    [
        (SolverStatus.INFEASIBLE, ErrorKind.INFEASIBLE),
        (SolverStatus.UNBOUNDED, ErrorKind.UNBOUNDED),
        (SolverStatus.UNDEFINED, ErrorKind.UNDEFINED),
        (SolverStatus.SOLVER_ERROR, ErrorKind.SOLVER_FAULT),
    ],
)
def test_failure_statuses(urea, decision, status, kind):
    result = interpret(Solution(status), [urea], decision[:1])

    assert not result.ok
    assert result.error is kind
    assert result.recipe is None


def test_infeasible_message_suggests_relaxing(urea, decision):
    result = interpret(Solution(SolverStatus.INFEASIBLE), [urea], decision[:1])
    assert "tolerance" in result.message


@pytest.mark.parametrize("raw", ["time_limit_reached", 7])
def test_unknown_status_reports_raw_value(urea, decision, raw):
    result = interpret(Solution(raw), [urea], decision[:1])

    assert result.error is ErrorKind.UNKNOWN_STATUS
    assert str(raw) in result.message


def test_raw_recognized_string_is_accepted(urea, decision):
    result = interpret(Solution("optimal", {"amount_0": 10.0}), [urea], decision[:1])
    assert result.ok
