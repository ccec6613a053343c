"""Calculation settings.

Defaults can be overridden per process through ``NPK_BLEND_<FIELD>``
environment variables, e.g. ``NPK_BLEND_CVXPY_SOLVER=HIGHS``, which are
read by :meth:`Settings.from_env`.
"""

from __future__ import annotations

import os
from typing import Any

from attrs import define, evolve, field, fields
from attrs.validators import ge, gt, instance_of, optional

LINKING_EPSILON = 0.001
"""Smallest amount (grams) that forces a usage indicator to 1."""

RECIPE_THRESHOLD = 0.001
"""Amounts at or below this (grams) are dropped from a recipe as solver noise."""

BIG_M_FACTOR = 2.0
"""Big-M of the usage constraints, as a multiple of the total weight."""

ENV_PREFIX = "NPK_BLEND_"


def _to_bool(value: Any) -> bool:
    """Convert Booleans and strings representing Booleans to actual Booleans."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("y", "yes", "t", "true", "on", "1"):
            return True
        if lowered in ("n", "no", "f", "false", "off", "0"):
            return False
        raise ValueError(f"Invalid truth value: {value!r}")
    raise TypeError(f"Cannot convert value of type '{type(value)}' to Boolean.")


def _to_optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


@define(frozen=True, kw_only=True)
class Settings:
    """Tunable constants of the formulation and the solver backend."""

    linking_epsilon: float = field(default=LINKING_EPSILON, converter=float, validator=gt(0))
    recipe_threshold: float = field(default=RECIPE_THRESHOLD, converter=float, validator=ge(0))
    big_m_factor: float = field(default=BIG_M_FACTOR, converter=float, validator=ge(1))
    solver: str = field(default="cvxpy", validator=instance_of(str))
    cvxpy_solver: str = field(default="SCIPY", validator=instance_of(str))
    time_limit: float | None = field(
        default=None, converter=_to_optional_float, validator=optional(gt(0))
    )
    verbose: bool = field(default=False, converter=_to_bool)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> Settings:
        """Build settings from ``NPK_BLEND_*`` variables.

        Keyword arguments take precedence over the environment.
        """
        environ = os.environ if environ is None else environ
        kwargs = {}
        for fld in fields(cls):
            env_name = f"{ENV_PREFIX}{fld.name.upper()}"
            if env_name in environ:
                kwargs[fld.name] = environ[env_name]
        kwargs.update(overrides)
        return cls(**kwargs)

    def replace(self, **changes) -> Settings:
        return evolve(self, **changes)
