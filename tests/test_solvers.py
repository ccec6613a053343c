"""Tests for the solver backends."""

import cvxpy as cp
import pytest

from npk_blend.config import Settings
from npk_blend.exceptions import UnknownSolverError
from npk_blend.models import (
    BoundKind,
    LinearConstraint,
    Model,
    Objective,
    SolverStatus,
    VariableDeclaration,
    VariableKind,
)
from npk_blend.problem import build_model
from npk_blend.solvers import CvxpySolver, ScipyMilpSolver, Solver, get_solver


def make_solver(name):
    return get_solver(Settings(solver=name))


def small_model(lower=3.5):
    """Minimize y subject to x - 2 z == 0, x >= lower, x <= 10 y."""
    return Model(
        name="small",
        objective=Objective([("y", 1.0), ("x", 0.01)]),
        constraints=[
            LinearConstraint("link", [("x", 1.0), ("z", -2.0)], BoundKind.FIXED, 0.0, 0.0),
            LinearConstraint("floor", [("x", 1.0)], BoundKind.LOWER, lower=lower),
            LinearConstraint("big_m", [("x", 1.0), ("y", -10.0)], BoundKind.UPPER, upper=0.0),
        ],
        variables=[
            VariableDeclaration("x", 0, 10, VariableKind.CONTINUOUS),
            VariableDeclaration("z", 0, 5, VariableKind.INTEGER),
            VariableDeclaration("y", 0, 1, VariableKind.BINARY),
        ],
        decision=[],
    )


def test_small_model_optimal(backend):
    solution = make_solver(backend).solve(small_model())

    assert solution.status is SolverStatus.OPTIMAL
    assert solution.values["x"] == pytest.approx(4, abs=1e-6)
    assert solution.values["z"] == pytest.approx(2, abs=1e-6)
    assert solution.values["y"] == pytest.approx(1, abs=1e-6)


def test_small_model_infeasible(backend):
    solution = make_solver(backend).solve(small_model(lower=11))

    assert solution.status is SolverStatus.INFEASIBLE
    assert solution.values == {}


def test_blend_model_values_cover_every_variable(backend, urea, dap, potash, filler, make_request):
    ingredients = [urea, dap, potash, filler]
    model = build_model(ingredients, make_request(ingredients))
    solution = make_solver(backend).solve(model)

    assert solution.has_values
    assert set(solution.values) == set(model.variable_names)


def test_cvxpy_problem_is_mixed_integer(urea, make_request):
    problem, blocks = CvxpySolver().build_problem(build_model([urea], make_request([urea])))

    assert isinstance(problem, cp.Problem)
    assert problem.is_mixed_integer()
    assert set(blocks) == {VariableKind.CONTINUOUS, VariableKind.INTEGER, VariableKind.BINARY}
    assert list(blocks[VariableKind.BINARY].index) == ["used_0"]


def test_cvxpy_time_limit_forwarded_to_scipy():
    options = CvxpySolver("SCIPY", time_limit=5)._options()
    assert options["scipy_options"]["time_limit"] == 5


def test_cvxpy_status_passthrough():
    assert CvxpySolver.STATUS_MAP.get("something_new", "something_new") == "something_new"


def test_get_solver_backends():
    assert isinstance(get_solver(), CvxpySolver)
    assert isinstance(make_solver("SciPy"), ScipyMilpSolver)
    assert get_solver(Settings(cvxpy_solver="HIGHS")).solver == "HIGHS"
    assert isinstance(get_solver(), Solver)


def test_get_solver_unknown():
    with pytest.raises(UnknownSolverError, match="Unknown solver backend"):
        make_solver("gurobi")
