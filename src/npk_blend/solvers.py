"""Solver backends.

The formulation never talks to a solver library directly: it hands a
:class:`~npk_blend.models.Model` to any object implementing
:class:`Solver` and gets a :class:`~npk_blend.models.Solution` back.
Two backends ship with the package:

* :class:`CvxpySolver` builds a ``cvxpy.Problem`` and lets CVXPY dispatch
  to one of its mixed-integer solvers (SciPy/HiGHS by default).
* :class:`ScipyMilpSolver` calls :func:`scipy.optimize.milp` directly.

A backend may raise; :func:`npk_blend.core.calculate_mix` reports that as
a ``SolverFault``.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np
from scipy.optimize import Bounds, milp
from scipy.optimize import LinearConstraint as ScipyLinearConstraint

import cvxpy as cp
import cvxpy.settings as cvxpy_settings

from npk_blend.config import Settings
from npk_blend.exceptions import UnknownSolverError
from npk_blend.indexing import Set, Variable, coefficient_matrix
from npk_blend.models import Model, Solution, SolverStatus, VariableKind

_logger = logging.getLogger(__name__)


@runtime_checkable
class Solver(Protocol):
    """Anything that can solve a :class:`Model`."""

    def solve(self, model: Model) -> Solution:
        ...


def _bound_vectors(constraints) -> tuple[np.ndarray, np.ndarray]:
    lower = np.array([-np.inf if c.lower is None else c.lower for c in constraints])
    upper = np.array([np.inf if c.upper is None else c.upper for c in constraints])
    return lower, upper


class CvxpySolver:
    """Solve models through CVXPY.

    Parameters
    ----------
    solver : str, optional
        CVXPY solver name. Must be mixed-integer capable; ``"SCIPY"``
        (HiGHS through SciPy) is always installed with CVXPY.
    time_limit : float, optional
        Seconds the backend may spend. Only forwarded to SCIPY and HIGHS.
    verbose : bool, optional
        Show solver output.
    **solver_options
        Extra keyword arguments for ``cp.Problem.solve``.

    Examples
    --------
    >>> solution = CvxpySolver("HIGHS").solve(model)
    >>> solution.status
    <SolverStatus.OPTIMAL: 'optimal'>
    """

    STATUS_MAP = {
        cvxpy_settings.OPTIMAL: SolverStatus.OPTIMAL,
        cvxpy_settings.OPTIMAL_INACCURATE: SolverStatus.FEASIBLE,
        cvxpy_settings.USER_LIMIT: SolverStatus.FEASIBLE,
        cvxpy_settings.INFEASIBLE: SolverStatus.INFEASIBLE,
        cvxpy_settings.INFEASIBLE_INACCURATE: SolverStatus.INFEASIBLE,
        cvxpy_settings.UNBOUNDED: SolverStatus.UNBOUNDED,
        cvxpy_settings.UNBOUNDED_INACCURATE: SolverStatus.UNBOUNDED,
        cvxpy_settings.INFEASIBLE_OR_UNBOUNDED: SolverStatus.UNDEFINED,
        cvxpy_settings.SOLVER_ERROR: SolverStatus.SOLVER_ERROR,
    }

    def __init__(
        self,
        solver: str = "SCIPY",
        time_limit: float | None = None,
        verbose: bool = False,
        **solver_options,
    ):
        self.solver = solver
        self.time_limit = time_limit
        self.verbose = verbose
        self.solver_options = solver_options

    def __repr__(self) -> str:
        return f"CvxpySolver(solver={self.solver!r})"

    def _variables(self, model: Model) -> dict[VariableKind, Variable]:
        attrs = {
            VariableKind.CONTINUOUS: {},
            VariableKind.INTEGER: {"integer": True},
            VariableKind.BINARY: {"boolean": True},
        }
        blocks = {}
        for kind, kwargs in attrs.items():
            names = [v.name for v in model.variables if v.kind is kind]
            if names:
                blocks[kind] = Variable(Set(names, name=kind.value), name=kind.value, **kwargs)
        return blocks

    def build_problem(self, model: Model) -> tuple[cp.Problem, dict[VariableKind, Variable]]:
        """Translate ``model`` into a ``cp.Problem``.

        Returns
        -------
        tuple
            The problem and the variable blocks keyed by kind.
        """
        blocks = self._variables(model)

        def linear(rows) -> cp.Expression:
            return sum(coefficient_matrix(rows, var.index) @ var for var in blocks.values())

        constraints = []
        for kind, var in blocks.items():
            declared = [v for v in model.variables if v.kind is kind]
            constraints.append(var >= np.array([v.lower for v in declared], dtype=float))
            constraints.append(var <= np.array([v.upper for v in declared], dtype=float))

        lower_rows = [c for c in model.constraints if c.lower is not None]
        upper_rows = [c for c in model.constraints if c.upper is not None]
        if lower_rows:
            lower, _ = _bound_vectors(lower_rows)
            constraints.append(linear([c.terms for c in lower_rows]) >= lower)
        if upper_rows:
            _, upper = _bound_vectors(upper_rows)
            constraints.append(linear([c.terms for c in upper_rows]) <= upper)

        objective_expr = cp.sum(linear([model.objective.terms]))
        if model.objective.sense == "minimize":
            objective = cp.Minimize(objective_expr)
        else:
            objective = cp.Maximize(objective_expr)
        return cp.Problem(objective, constraints), blocks

    def _options(self) -> dict:
        options = dict(self.solver_options)
        if self.time_limit is not None:
            if self.solver == cvxpy_settings.SCIPY:
                scipy_options = dict(options.get("scipy_options", {}))
                scipy_options.setdefault("time_limit", self.time_limit)
                options["scipy_options"] = scipy_options
            elif self.solver == cvxpy_settings.HIGHS:
                options.setdefault("time_limit", self.time_limit)
            else:
                _logger.warning(
                    "time_limit is not forwarded to CVXPY solver %s", self.solver
                )
        return options

    def solve(self, model: Model) -> Solution:
        problem, blocks = self.build_problem(model)
        problem.solve(solver=self.solver, verbose=self.verbose, **self._options())
        _logger.debug("CVXPY (%s) finished with status %r", self.solver, problem.status)

        status = self.STATUS_MAP.get(problem.status, problem.status)
        if status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            if any(var.value is None for var in blocks.values()):
                return Solution(SolverStatus.UNDEFINED, message=f"{problem.status} without a point")
            values = {}
            for var in blocks.values():
                values.update(var.values_by_key())
            return Solution(status, values)
        return Solution(status, message=str(problem.status))


class ScipyMilpSolver:
    """Solve models with :func:`scipy.optimize.milp` (HiGHS).

    Parameters
    ----------
    time_limit : float, optional
        Seconds HiGHS may spend before returning its incumbent.
    verbose : bool, optional
        Show HiGHS output.
    """

    STATUS_MAP = {
        0: SolverStatus.OPTIMAL,
        1: SolverStatus.FEASIBLE,
        2: SolverStatus.INFEASIBLE,
        3: SolverStatus.UNBOUNDED,
        4: SolverStatus.UNDEFINED,
    }

    _INTEGRALITY = {
        VariableKind.CONTINUOUS: 0,
        VariableKind.INTEGER: 1,
        VariableKind.BINARY: 1,
    }

    def __init__(self, time_limit: float | None = None, verbose: bool = False):
        self.time_limit = time_limit
        self.verbose = verbose

    def __repr__(self) -> str:
        return "ScipyMilpSolver()"

    def solve(self, model: Model) -> Solution:
        index = Set(model.variable_names, name="variables")

        c = coefficient_matrix([model.objective.terms], index).toarray().ravel()
        if model.objective.sense == "maximize":
            c = -c

        constraints = []
        if model.constraints:
            A = coefficient_matrix([con.terms for con in model.constraints], index).toarray()
            lower, upper = _bound_vectors(model.constraints)
            constraints.append(ScipyLinearConstraint(A, lower, upper))

        bounds = Bounds(
            np.array([v.lower for v in model.variables], dtype=float),
            np.array([v.upper for v in model.variables], dtype=float),
        )
        integrality = np.array([self._INTEGRALITY[v.kind] for v in model.variables])

        options = {"disp": self.verbose}
        if self.time_limit is not None:
            options["time_limit"] = self.time_limit

        res = milp(
            c,
            constraints=constraints,
            integrality=integrality,
            bounds=bounds,
            options=options,
        )
        _logger.debug("scipy.optimize.milp finished with status %r: %s", res.status, res.message)

        status = self.STATUS_MAP.get(res.status, res.status)
        if status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            if res.x is None:
                return Solution(SolverStatus.UNDEFINED, message=res.message)
            return Solution(status, {name: float(x) for name, x in zip(index, res.x)})
        return Solution(status, message=res.message)


SOLVERS = {
    "cvxpy": CvxpySolver,
    "scipy": ScipyMilpSolver,
}


def get_solver(settings: Settings | None = None) -> Solver:
    """Instantiate the backend named by ``settings.solver``.

    Raises
    ------
    UnknownSolverError
        If the name is not one of :data:`SOLVERS`.
    """
    settings = settings or Settings()
    name = settings.solver.lower()
    if name not in SOLVERS:
        raise UnknownSolverError(
            f"Unknown solver backend {settings.solver!r}. "
            f"Available backends: {sorted(SOLVERS)}"
        )
    if name == "cvxpy":
        return CvxpySolver(
            settings.cvxpy_solver, time_limit=settings.time_limit, verbose=settings.verbose
        )
    return ScipyMilpSolver(time_limit=settings.time_limit, verbose=settings.verbose)
