"""I/O utilities for npk-blend.

This module provides functions for loading ingredient libraries from
pandas DataFrames and exporting recipes and models back to DataFrames.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from npk_blend.models import NUTRIENTS, Ingredient

if TYPE_CHECKING:
    import pandas as pd

    from npk_blend.models import Model, Result

INGREDIENT_COLUMNS = ("id", "name", "n", "p", "k")


def _check_pandas():
    """Check that pandas is available."""
    try:
        import pandas  # noqa: F401

        return True
    except ImportError:
        raise ImportError(
            "pandas is required for I/O operations. "
            "Install it with: pip install npk-blend[pandas]"
        )


def ingredients_from_dataframe(
    df: pd.DataFrame,
    id_col: str = "id",
    name_col: str = "name",
) -> list[Ingredient]:
    """Create Ingredients from the rows of a DataFrame.

    Parameters
    ----------
    df : pd.DataFrame
        One row per ingredient with ``n``, ``p`` and ``k`` percentage
        columns. Missing percentages count as 0.
    id_col : str, optional
        Column holding the ingredient id. If absent, the row index is used.
    name_col : str, optional
        Column holding the display name.

    Returns
    -------
    list[Ingredient]
        Ingredients in row order.

    Examples
    --------
    >>> df = pd.DataFrame({
    ...     'name': ['Urea', 'Potash'],
    ...     'n': [46, 0], 'p': [0, 0], 'k': [0, 60],
    ... })
    >>> [i.grade for i in ingredients_from_dataframe(df)]
    ['46-0-0', '0-0-60']
    """
    _check_pandas()
    import pandas as pd

    missing = [c for c in (name_col, "n", "p", "k") if c not in df.columns]
    if missing:
        raise ValueError(f"DataFrame is missing columns: {missing}")

    percentages = df[["n", "p", "k"]].apply(pd.to_numeric, errors="coerce").fillna(0)
    ids = df[id_col] if id_col in df.columns else df.index
    return [
        Ingredient(str(ident), str(name), n, p, k)
        for ident, name, (n, p, k) in zip(
            ids, df[name_col], percentages.itertuples(index=False, name=None)
        )
    ]


def ingredients_to_dataframe(ingredients: Iterable[Ingredient]) -> pd.DataFrame:
    """Convert ingredients to a DataFrame with columns id, name, n, p, k."""
    _check_pandas()
    import pandas as pd

    rows = [[i.id, i.name, i.n, i.p, i.k] for i in ingredients]
    return pd.DataFrame(rows, columns=list(INGREDIENT_COLUMNS))


def recipe_to_dataframe(result: Result, amount_col: str = "amount") -> pd.DataFrame:
    """Convert a successful Result's recipe to a DataFrame.

    Parameters
    ----------
    result : Result
        A successful calculation result.
    amount_col : str, optional
        Name for the grams column. Default "amount".

    Returns
    -------
    pd.DataFrame
        One row per recipe item with ingredient id, name, grams and share
        of the blend in percent.

    Raises
    ------
    ValueError
        If the Result is a failure.

    Examples
    --------
    >>> recipe_to_dataframe(calculate_mix(request))
             id                  name  amount  share
    0  4d0f7f41                  Urea   120.0   12.0
    ...
    """
    _check_pandas()
    import pandas as pd

    if not result.ok:
        raise ValueError(f"Result has no recipe: {result.message}")

    rows = []
    for item in result.recipe:
        share = item.amount / result.actual_weight * 100 if result.actual_weight else 0.0
        rows.append([item.ingredient.id, item.ingredient.name, item.amount, share])
    return pd.DataFrame(rows, columns=["id", "name", amount_col, "share"])


def model_to_dataframe(model: Model) -> pd.DataFrame:
    """List the constraints of a Model, one row per constraint.

    Columns are ``name``, ``kind``, ``lower``, ``upper`` and one column per
    variable holding its coefficient (0 where the variable does not
    appear). Useful for inspecting a formulation before solving it.
    """
    _check_pandas()
    import pandas as pd

    names = model.variable_names
    rows = []
    for con in model.constraints:
        coefs = dict.fromkeys(names, 0.0)
        for var, coef in con.terms:
            coefs[var] += coef
        rows.append([con.name, con.kind.value, con.lower, con.upper] + [coefs[n] for n in names])
    return pd.DataFrame(rows, columns=["name", "kind", "lower", "upper"] + names)


def actual_to_series(result: Result) -> pd.Series:
    """Actual nutrient percentages of a successful Result as a Series."""
    _check_pandas()
    import pandas as pd

    if not result.ok:
        raise ValueError(f"Result has no recipe: {result.message}")
    return pd.Series(
        {n.name: result.actual[n] for n in NUTRIENTS}, name="actual_percent"
    )
