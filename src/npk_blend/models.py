"""Value objects for blend calculations.

Every object in this module is created fresh for a single calculation and
is frozen, so a :class:`Model` handed to a solver cannot change under it.

Example
-------
>>> from npk_blend.models import BlendRequest, Ingredient
>>> urea = Ingredient("urea", "Urea", n=46, p=0, k=0)
>>> request = BlendRequest(
...     target_n=10, target_p=10, target_k=10,
...     total_weight=1000, tolerance=5, increment=10,
...     ingredients=[urea],
... )
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Sequence

from attrs import define, field
from attrs.validators import ge, in_


class Nutrient(str, Enum):
    """The three primary plant nutrients."""

    N = "n"
    P = "p"
    K = "k"


NUTRIENTS: tuple[Nutrient, ...] = (Nutrient.N, Nutrient.P, Nutrient.K)


@define(frozen=True)
class Ingredient:
    """A raw ingredient with fixed nutrient percentages.

    Percentages are expected to be in ``[0, 100]``; only the lower bound
    is enforced.
    """

    id: str = field(converter=str)
    name: str = field(converter=str)
    n: float = field(default=0.0, converter=float, validator=ge(0))
    p: float = field(default=0.0, converter=float, validator=ge(0))
    k: float = field(default=0.0, converter=float, validator=ge(0))

    def percentage(self, nutrient: Nutrient) -> float:
        """Return the percentage of ``nutrient`` in this ingredient."""
        return getattr(self, Nutrient(nutrient).value)

    @property
    def grade(self) -> str:
        return f"{self.n:g}-{self.p:g}-{self.k:g}"


@define(frozen=True, kw_only=True)
class BlendRequest:
    """A request to blend ``ingredients`` into ``total_weight`` grams.

    ``total_weight`` and ``increment`` are not validated here: a
    non-positive or non-finite value is reported as an ``InvalidParameters`` result by
    :func:`npk_blend.core.calculate_mix` rather than raised.
    """

    target_n: float = field(converter=float, validator=ge(0))
    target_p: float = field(converter=float, validator=ge(0))
    target_k: float = field(converter=float, validator=ge(0))
    total_weight: float = field(converter=float)
    tolerance: float = field(converter=float, validator=ge(0))
    increment: float = field(converter=float)
    ingredients: tuple[Ingredient, ...] = field(converter=tuple)

    @ingredients.validator
    def _validate_ingredients(self, _, value):
        for item in value:
            if not isinstance(item, Ingredient):
                raise TypeError(
                    f"ingredients must contain Ingredient objects, got {type(item)!r}"
                )

    @property
    def targets(self) -> dict[Nutrient, float]:
        return {
            Nutrient.N: self.target_n,
            Nutrient.P: self.target_p,
            Nutrient.K: self.target_k,
        }


@define(frozen=True)
class DecisionVariables:
    """Names of the variable triple allocated for one candidate ingredient.

    ``amount`` is the grams of the ingredient, ``doses`` the number of
    increments and ``used`` the binary usage indicator.
    """

    index: int
    amount: str
    doses: str
    used: str

    @classmethod
    def for_index(cls, index: int) -> DecisionVariables:
        return cls(index, f"amount_{index}", f"doses_{index}", f"used_{index}")


class VariableKind(str, Enum):
    CONTINUOUS = "continuous"
    INTEGER = "integer"
    BINARY = "binary"


@define(frozen=True)
class VariableDeclaration:
    name: str
    lower: float
    upper: float
    kind: VariableKind = field(default=VariableKind.CONTINUOUS, converter=VariableKind)


class BoundKind(str, Enum):
    """How the bounds of a :class:`LinearConstraint` apply."""

    FIXED = "fixed"  # lower == upper
    UPPER = "upper"  # <= upper
    LOWER = "lower"  # >= lower
    DOUBLE = "double"  # lower <= . <= upper


@define(frozen=True)
class LinearConstraint:
    """``lower <= sum(coef * var) <= upper`` with one side possibly open.

    ``terms`` is an ordered tuple of ``(variable name, coefficient)`` pairs.
    Open sides are stored as ``None``.
    """

    name: str
    terms: tuple[tuple[str, float], ...] = field(converter=tuple)
    kind: BoundKind = field(converter=BoundKind)
    lower: float | None = None
    upper: float | None = None

    def __attrs_post_init__(self):
        if self.kind in (BoundKind.FIXED, BoundKind.LOWER, BoundKind.DOUBLE):
            if self.lower is None:
                raise ValueError(f"Constraint '{self.name}' needs a lower bound")
        if self.kind in (BoundKind.FIXED, BoundKind.UPPER, BoundKind.DOUBLE):
            if self.upper is None:
                raise ValueError(f"Constraint '{self.name}' needs an upper bound")
        if self.kind is BoundKind.FIXED and self.lower != self.upper:
            raise ValueError(f"Fixed constraint '{self.name}' has lower != upper")

    def evaluate(self, values: Mapping[str, float]) -> float:
        """Return the left-hand side for the given variable values."""
        return sum(coef * values[name] for name, coef in self.terms)


@define(frozen=True)
class Objective:
    terms: tuple[tuple[str, float], ...] = field(converter=tuple)
    sense: str = field(default="minimize", validator=in_(("minimize", "maximize")))


@define(frozen=True)
class Model:
    """A solver-neutral mixed-integer linear program.

    The ``variables`` tuple is positionally aligned with ``decision``:
    the three declarations of ``decision[i]`` describe candidate ``i``.
    """

    name: str
    objective: Objective
    constraints: tuple[LinearConstraint, ...] = field(converter=tuple)
    variables: tuple[VariableDeclaration, ...] = field(converter=tuple)
    decision: tuple[DecisionVariables, ...] = field(converter=tuple)

    @property
    def variable_names(self) -> list[str]:
        return [v.name for v in self.variables]

    def constraint(self, name: str) -> LinearConstraint:
        """Return the constraint called ``name``.

        Raises
        ------
        KeyError
            If no constraint has that name.
        """
        for con in self.constraints:
            if con.name == name:
                return con
        raise KeyError(f"No constraint named {name!r} in model '{self.name}'")

    def __repr__(self) -> str:
        return (
            f"Model({self.name!r}, variables={len(self.variables)}, "
            f"constraints={len(self.constraints)})"
        )


class SolverStatus(str, Enum):
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    UNDEFINED = "undefined"
    SOLVER_ERROR = "solver-error"


@define(frozen=True)
class Solution:
    """Raw outcome of a solver run.

    ``status`` is a :class:`SolverStatus` for every recognized outcome. A
    backend status the adapter could not classify is kept as its raw value
    so the interpreter can report it.
    """

    status: SolverStatus | str | int
    values: Mapping[str, float] = field(factory=dict)
    message: str | None = None

    @property
    def has_values(self) -> bool:
        return self.status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE)


@define(frozen=True)
class RecipeItem:
    ingredient: Ingredient
    amount: float


Recipe = Sequence[RecipeItem]


class ErrorKind(str, Enum):
    INVALID_PARAMETERS = "InvalidParameters"
    NO_CANDIDATES = "NoCandidates"
    INFEASIBLE = "Infeasible"
    UNBOUNDED = "Unbounded"
    UNDEFINED = "Undefined"
    UNKNOWN_STATUS = "UnknownStatus"
    SOLVER_FAULT = "SolverFault"


@define(frozen=True)
class Result:
    """Outcome of :func:`npk_blend.core.calculate_mix`.

    Either ``recipe`` (with ``actual`` percentages and ``actual_weight``)
    or ``error`` is populated, never both. Use :meth:`success` and
    :meth:`failure` to build one.
    """

    recipe: tuple[RecipeItem, ...] | None = None
    actual: dict[Nutrient, float] | None = None
    actual_weight: float | None = None
    error: ErrorKind | None = None
    message: str | None = None

    def __attrs_post_init__(self):
        if (self.recipe is None) == (self.error is None):
            raise ValueError("Result needs exactly one of recipe or error")

    @classmethod
    def success(
        cls,
        recipe: Sequence[RecipeItem],
        actual: Mapping[Nutrient, float],
        actual_weight: float,
    ) -> Result:
        return cls(recipe=tuple(recipe), actual=dict(actual), actual_weight=actual_weight)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> Result:
        return cls(error=ErrorKind(kind), message=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def summary(self) -> str:
        """Render the result the way a user would read it.

        >>> print(result.summary())
        Actual NPK: 10.0-10.1-9.9 | Actual Weight: 1000.0g
          217.4g of Urea
          ...
        """
        if not self.ok:
            return f"Error ({self.error.value}): {self.message}"
        npk = "-".join(f"{self.actual[n]:.1f}" for n in NUTRIENTS)
        lines = [f"Actual NPK: {npk} | Actual Weight: {self.actual_weight:.1f}g"]
        for item in self.recipe:
            lines.append(f"  {item.amount:.1f}g of {item.ingredient.name}")
        return "\n".join(lines)
