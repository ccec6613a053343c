"""Zero-target pre-filter.

An ingredient that contains a nutrient the user wants entirely absent can
never be part of a valid blend, so it is dropped before the model is built.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from npk_blend.exceptions import NoCandidatesError
from npk_blend.models import NUTRIENTS, Ingredient, Nutrient

_logger = logging.getLogger(__name__)

NO_CANDIDATES_MESSAGE = (
    "No ingredients available for mixing after excluding those that contain "
    "nutrients with a zero target."
)


def is_compatible(ingredient: Ingredient, targets: Mapping[Nutrient, float]) -> bool:
    """Whether ``ingredient`` is free of every nutrient whose target is zero."""
    return all(
        ingredient.percentage(nutrient) == 0
        for nutrient in NUTRIENTS
        if targets[nutrient] == 0
    )


def filter_candidates(
    ingredients: Iterable[Ingredient],
    targets: Mapping[Nutrient, float],
) -> list[Ingredient]:
    """Return the ingredients compatible with ``targets``, in input order.

    Parameters
    ----------
    ingredients : Iterable[Ingredient]
        The candidate ingredients.
    targets : Mapping[Nutrient, float]
        Target percentage per nutrient.

    Returns
    -------
    list[Ingredient]
        The surviving candidates.

    Raises
    ------
    NoCandidatesError
        If no ingredient survives (including an empty input).
    """
    ingredients = list(ingredients)
    kept = [ing for ing in ingredients if is_compatible(ing, targets)]
    if len(kept) < len(ingredients):
        _logger.debug(
            "Excluded %d of %d ingredients containing zero-target nutrients",
            len(ingredients) - len(kept),
            len(ingredients),
        )
    if not kept:
        raise NoCandidatesError(NO_CANDIDATES_MESSAGE)
    return kept
