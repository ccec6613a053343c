"""Turn a solver :class:`~npk_blend.models.Solution` into a :class:`Result`."""

from __future__ import annotations

import logging
from typing import Sequence

from npk_blend.config import RECIPE_THRESHOLD
from npk_blend.models import (
    NUTRIENTS,
    DecisionVariables,
    ErrorKind,
    Ingredient,
    RecipeItem,
    Result,
    Solution,
    SolverStatus,
)

_logger = logging.getLogger(__name__)

STATUS_ERRORS = {
    SolverStatus.INFEASIBLE: (
        ErrorKind.INFEASIBLE,
        "No feasible blend could be found for the given parameters. Try relaxing "
        "the tolerance or adjusting the NPK targets or available ingredients.",
    ),
    SolverStatus.UNBOUNDED: (
        ErrorKind.UNBOUNDED,
        "The problem is unbounded (variables can increase indefinitely without "
        "violating constraints).",
    ),
    SolverStatus.UNDEFINED: (
        ErrorKind.UNDEFINED,
        "The problem is undefined (e.g., due to contradictory constraints or "
        "numerical instability).",
    ),
    SolverStatus.SOLVER_ERROR: (
        ErrorKind.SOLVER_FAULT,
        "An unexpected error occurred during calculation: the solver reported an error.",
    ),
}


def normalize_status(status) -> SolverStatus | None:
    """Return the :class:`SolverStatus` for ``status``, or None if unrecognized."""
    try:
        return SolverStatus(status)
    except ValueError:
        return None


def build_recipe(
    values,
    ingredients: Sequence[Ingredient],
    decision: Sequence[DecisionVariables],
    threshold: float = RECIPE_THRESHOLD,
) -> Result:
    """Read the amounts of a solved model and compute the actual blend.

    Ingredients whose amount is at or below ``threshold`` are left out.
    Actual percentages are 0 when nothing is left.
    """
    recipe = []
    totals = {nutrient: 0.0 for nutrient in NUTRIENTS}
    actual_weight = 0.0

    for ingredient, triple in zip(ingredients, decision):
        amount = values.get(triple.amount)
        if amount is None or not amount > threshold:
            continue
        recipe.append(RecipeItem(ingredient, float(amount)))
        for nutrient in NUTRIENTS:
            totals[nutrient] += amount * ingredient.percentage(nutrient) / 100
        actual_weight += amount

    if actual_weight > 0:
        actual = {n: totals[n] / actual_weight * 100 for n in NUTRIENTS}
    else:
        actual = {n: 0.0 for n in NUTRIENTS}
    return Result.success(recipe, actual, actual_weight)


def interpret(
    solution: Solution,
    ingredients: Sequence[Ingredient],
    decision: Sequence[DecisionVariables],
    threshold: float = RECIPE_THRESHOLD,
) -> Result:
    """Classify ``solution`` and build the corresponding :class:`Result`.

    Parameters
    ----------
    solution : Solution
        What the solver returned.
    ingredients : Sequence[Ingredient]
        The filtered candidates the model was built from.
    decision : Sequence[DecisionVariables]
        The model's variable triples, aligned with ``ingredients``.
    threshold : float, optional
        Recipe inclusion threshold in grams.

    Returns
    -------
    Result
        A success for optimal and feasible solutions, otherwise a failure
        whose kind reflects the status.
    """
    status = normalize_status(solution.status)
    if status is None:
        _logger.warning("Solver returned unrecognized status %r", solution.status)
        return Result.failure(
            ErrorKind.UNKNOWN_STATUS, f"Solver finished with status: {solution.status}"
        )
    if status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
        result = build_recipe(solution.values, ingredients, decision, threshold)
        if not result.recipe:
            _logger.warning("Solver returned a %s solution with an empty recipe", status.value)
        return result

    kind, message = STATUS_ERRORS[status]
    _logger.warning("Blend calculation failed with solver status %s", status.value)
    return Result.failure(kind, message)
