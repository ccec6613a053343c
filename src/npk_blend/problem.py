"""Decision variable allocation and model assembly."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from npk_blend.config import Settings
from npk_blend.constraints import generate_constraints, usage_objective
from npk_blend.exceptions import InvalidParametersError
from npk_blend.models import (
    BlendRequest,
    DecisionVariables,
    Ingredient,
    Model,
    VariableDeclaration,
    VariableKind,
)

_logger = logging.getLogger(__name__)

INVALID_PARAMETERS_MESSAGE = "Total weight and increment must be positive and finite."


def check_parameters(total_weight: float, increment: float) -> None:
    """Raise :class:`InvalidParametersError` unless both values are positive.

    Infinite values, and ratios too large to count in increments, are
    rejected as well.
    """
    if not (total_weight > 0 and increment > 0):
        raise InvalidParametersError(INVALID_PARAMETERS_MESSAGE)
    if not (math.isfinite(total_weight) and math.isfinite(total_weight / increment)):
        raise InvalidParametersError(INVALID_PARAMETERS_MESSAGE)


def max_doses(total_weight: float, increment: float) -> int:
    """Largest number of increments that fits into ``total_weight``."""
    return math.floor(total_weight / increment)


def build_variables(
    ingredients: Sequence[Ingredient],
    total_weight: float,
    increment: float,
) -> tuple[tuple[DecisionVariables, ...], tuple[VariableDeclaration, ...]]:
    """Allocate one variable triple per ingredient.

    Triple ``i`` belongs to ``ingredients[i]``. Declarations are returned
    in the same order, ``amount``, ``doses``, ``used`` per ingredient.

    Parameters
    ----------
    ingredients : Sequence[Ingredient]
        Filtered candidates.
    total_weight : float
        Blend weight in grams, must be positive.
    increment : float
        Dosing increment in grams, must be positive.

    Returns
    -------
    tuple
        ``(decision, declarations)``.

    Raises
    ------
    InvalidParametersError
        If ``total_weight`` or ``increment`` is not positive and finite.
    """
    check_parameters(total_weight, increment)
    dose_limit = max_doses(total_weight, increment)

    decision = []
    declarations = []
    for i in range(len(ingredients)):
        triple = DecisionVariables.for_index(i)
        decision.append(triple)
        declarations.extend(
            [
                VariableDeclaration(triple.amount, 0.0, total_weight, VariableKind.CONTINUOUS),
                VariableDeclaration(triple.doses, 0, dose_limit, VariableKind.INTEGER),
                VariableDeclaration(triple.used, 0, 1, VariableKind.BINARY),
            ]
        )
    return tuple(decision), tuple(declarations)


def build_model(
    ingredients: Sequence[Ingredient],
    request: BlendRequest,
    settings: Settings | None = None,
) -> Model:
    """Formulate the minimum-ingredient blend MILP for ``request``.

    ``ingredients`` are the already filtered candidates; their order fixes
    the variable indices.
    """
    settings = settings or Settings()
    decision, declarations = build_variables(
        ingredients, request.total_weight, request.increment
    )
    constraints = generate_constraints(
        ingredients,
        decision,
        request,
        linking_epsilon=settings.linking_epsilon,
        big_m_factor=settings.big_m_factor,
    )
    model = Model(
        name="Fertilizer-Mix",
        objective=usage_objective(decision),
        constraints=constraints,
        variables=declarations,
        decision=decision,
    )
    _logger.debug("Built %r", model)
    return model
