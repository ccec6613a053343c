"""Tests for the value objects and the stock library."""

import attrs
import pytest

from npk_blend.library import DEFAULT_INGREDIENTS, find_ingredient
from npk_blend.models import (
    BlendRequest,
    BoundKind,
    ErrorKind,
    Ingredient,
    LinearConstraint,
    Nutrient,
    RecipeItem,
    Result,
)


def test_ingredient_percentages():
    dap = Ingredient("dap", "DAP", 18, 46, 0)

    assert dap.percentage(Nutrient.P) == 46.0
    assert dap.percentage("k") == 0.0
    assert dap.grade == "18-46-0"


def test_numeric_fields_are_floats(urea):
    ingredient = Ingredient("x", "Text", "12.5", 3, 0)
    request = BlendRequest(
        target_n="10", target_p=10, target_k=10,
        total_weight="1000", tolerance=5, increment=10, ingredients=[urea],
    )

    assert ingredient.n == 12.5 and type(ingredient.p) is float
    assert type(request.target_n) is float and request.total_weight == 1000.0


def test_ingredient_rejects_negative_percentage():
    with pytest.raises(ValueError):
        Ingredient("x", "Bad", -1, 0, 0)


def test_ingredient_is_frozen(urea):
    with pytest.raises(attrs.exceptions.FrozenInstanceError):
        urea.n = 10


def test_request_accepts_non_positive_weight(urea):
    # reported as InvalidParameters by calculate_mix, not raised here
    request = BlendRequest(
        target_n=1, target_p=0, target_k=0,
        total_weight=0, tolerance=5, increment=-1, ingredients=[urea],
    )
    assert request.ingredients == (urea,)


def test_request_rejects_foreign_ingredients():
    with pytest.raises(TypeError, match="Ingredient objects"):
        BlendRequest(
            target_n=1, target_p=0, target_k=0,
            total_weight=10, tolerance=5, increment=1, ingredients=[("Urea", 46, 0, 0)],
        )


def test_constraint_bound_checks():
    with pytest.raises(ValueError, match="needs an upper bound"):
        LinearConstraint("c", [("x", 1.0)], BoundKind.DOUBLE, lower=0.0)
    with pytest.raises(ValueError, match="lower != upper"):
        LinearConstraint("c", [("x", 1.0)], BoundKind.FIXED, lower=0.0, upper=1.0)

    con = LinearConstraint("c", [("x", 2.0), ("y", -1.0)], "upper", upper=0.0)
    assert con.kind is BoundKind.UPPER
    assert con.evaluate({"x": 3.0, "y": 1.0}) == 5.0


def test_result_is_exactly_one_of_recipe_or_error(urea):
    with pytest.raises(ValueError):
        Result()
    with pytest.raises(ValueError):
        Result(recipe=(), error=ErrorKind.INFEASIBLE)

    ok = Result.success([RecipeItem(urea, 10.0)], {n: 0.0 for n in Nutrient}, 10.0)
    assert ok.ok and ok.error is None
    failed = Result.failure("Infeasible", "no")
    assert not failed.ok and failed.error is ErrorKind.INFEASIBLE


def test_default_library():
    assert len(DEFAULT_INGREDIENTS) == 12
    assert len({i.id for i in DEFAULT_INGREDIENTS}) == 12
    assert find_ingredient("  urea ").grade == "46-0-0"
    with pytest.raises(KeyError):
        find_ingredient("Unobtainium")
