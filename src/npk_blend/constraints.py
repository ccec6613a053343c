"""Constraint generation for the blend MILP.

For ingredient ``i`` with variables ``amount_i``, ``doses_i`` and
``used_i``:

* dosing linkage      ``amount_i - increment * doses_i == 0``
* usage upper (Big-M) ``amount_i - M * used_i <= 0``
* usage lower         ``amount_i - eps * used_i >= 0``

and globally

* total weight        ``sum(amount_i) == total_weight``
* nutrient tolerance  ``lo <= sum(amount_i * pct_i / 100) <= hi``

The objective minimizes the number of used ingredients.
"""

from __future__ import annotations

from typing import Sequence

from npk_blend.config import BIG_M_FACTOR, LINKING_EPSILON
from npk_blend.models import (
    NUTRIENTS,
    BlendRequest,
    BoundKind,
    DecisionVariables,
    Ingredient,
    LinearConstraint,
    Nutrient,
    Objective,
)


def linking_constraints(
    triple: DecisionVariables,
    increment: float,
    big_m: float,
    epsilon: float,
) -> list[LinearConstraint]:
    """The three constraints tying one ingredient's variables together."""
    i = triple.index
    return [
        LinearConstraint(
            f"increment_{i}",
            [(triple.amount, 1.0), (triple.doses, -increment)],
            BoundKind.FIXED,
            lower=0.0,
            upper=0.0,
        ),
        LinearConstraint(
            f"usage_upper_{i}",
            [(triple.amount, 1.0), (triple.used, -big_m)],
            BoundKind.UPPER,
            upper=0.0,
        ),
        LinearConstraint(
            f"usage_lower_{i}",
            [(triple.amount, 1.0), (triple.used, -epsilon)],
            BoundKind.LOWER,
            lower=0.0,
        ),
    ]


def total_weight_constraint(
    decision: Sequence[DecisionVariables], total_weight: float
) -> LinearConstraint:
    return LinearConstraint(
        "total_weight",
        [(triple.amount, 1.0) for triple in decision],
        BoundKind.FIXED,
        lower=total_weight,
        upper=total_weight,
    )


def needs_nutrient_constraint(
    nutrient: Nutrient, target: float, ingredients: Sequence[Ingredient]
) -> bool:
    """False only when the target is zero and no ingredient has the nutrient.

    Such a constraint would read ``0 <= 0 <= 0``, which some solvers reject.
    """
    return not (target == 0 and all(ing.percentage(nutrient) == 0 for ing in ingredients))


def nutrient_constraint(
    nutrient: Nutrient,
    target: float,
    ingredients: Sequence[Ingredient],
    decision: Sequence[DecisionVariables],
    total_weight: float,
    tolerance: float,
) -> LinearConstraint:
    """Keep the nutrient mass within ``tolerance`` percent of its target."""
    target_amount = total_weight * target / 100
    band = tolerance / 100
    return LinearConstraint(
        f"{nutrient.name}_tolerance",
        [
            (triple.amount, ing.percentage(nutrient) / 100)
            for ing, triple in zip(ingredients, decision)
        ],
        BoundKind.DOUBLE,
        lower=target_amount * (1 - band),
        upper=target_amount * (1 + band),
    )


def generate_constraints(
    ingredients: Sequence[Ingredient],
    decision: Sequence[DecisionVariables],
    request: BlendRequest,
    linking_epsilon: float = LINKING_EPSILON,
    big_m_factor: float = BIG_M_FACTOR,
) -> tuple[LinearConstraint, ...]:
    """Emit every constraint of the model in a fixed order.

    Parameters
    ----------
    ingredients : Sequence[Ingredient]
        Filtered candidates, aligned with ``decision``.
    decision : Sequence[DecisionVariables]
        Variable triples from :func:`npk_blend.problem.build_variables`.
    request : BlendRequest
        Targets, weight, tolerance and increment.
    linking_epsilon : float, optional
        Coefficient of ``used_i`` in the usage-lower constraint.
    big_m_factor : float, optional
        Big-M as a multiple of the total weight.

    Returns
    -------
    tuple[LinearConstraint, ...]
        Per-ingredient constraints, then total weight, then the N, P, K
        tolerance constraints that are needed.
    """
    if len(ingredients) != len(decision):
        raise ValueError(
            f"Got {len(decision)} variable triples for {len(ingredients)} ingredients"
        )
    big_m = big_m_factor * request.total_weight

    constraints: list[LinearConstraint] = []
    for triple in decision:
        constraints.extend(
            linking_constraints(triple, request.increment, big_m, linking_epsilon)
        )
    constraints.append(total_weight_constraint(decision, request.total_weight))

    targets = request.targets
    for nutrient in NUTRIENTS:
        if needs_nutrient_constraint(nutrient, targets[nutrient], ingredients):
            constraints.append(
                nutrient_constraint(
                    nutrient,
                    targets[nutrient],
                    ingredients,
                    decision,
                    request.total_weight,
                    request.tolerance,
                )
            )
    return tuple(constraints)


def usage_objective(decision: Sequence[DecisionVariables]) -> Objective:
    """Minimize the number of distinct ingredients used."""
    return Objective([(triple.used, 1.0) for triple in decision], sense="minimize")
