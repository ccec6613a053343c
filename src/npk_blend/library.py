"""Stock fertilizer library."""

from __future__ import annotations

from npk_blend.models import Ingredient

DEFAULT_INGREDIENTS: tuple[Ingredient, ...] = (
    Ingredient("4d0f7f3a", "Blood Meal", 12, 0, 0),
    Ingredient("4d0f7f3b", "Bone Meal", 3, 15, 0),
    Ingredient("4d0f7f3c", "Kelp Meal", 1, 0, 2),
    Ingredient("4d0f7f3d", "Fish Emulsion", 5, 1, 1),
    Ingredient("4d0f7f3e", "Greensand", 0, 1, 5),
    Ingredient("4d0f7f3f", "Bat Guano", 10, 3, 1),
    Ingredient("4d0f7f40", "Compost", 2, 1, 1),
    Ingredient("4d0f7f41", "Urea", 46, 0, 0),
    Ingredient("4d0f7f42", "Ammonium Sulfate", 21, 0, 0),
    Ingredient("4d0f7f43", "Diammonium Phosphate", 18, 46, 0),
    Ingredient("4d0f7f44", "Potassium Chloride", 0, 0, 60),
    Ingredient("4d0f7f45", "Sulfate of Potash", 0, 0, 50),
)


def find_ingredient(name: str, library=DEFAULT_INGREDIENTS) -> Ingredient:
    """Look up an ingredient by name, ignoring case.

    Raises
    ------
    KeyError
        If no ingredient has that name.
    """
    wanted = name.strip().lower()
    for ingredient in library:
        if ingredient.name.lower() == wanted:
            return ingredient
    raise KeyError(f"No ingredient named {name!r} in library")
