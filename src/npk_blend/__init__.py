"""npk-blend: fewest-ingredient fertilizer blending as a MILP.

This package formulates the blending of raw fertilizers into a target
N-P-K ratio as a mixed-integer linear program, solves it through a
pluggable backend (CVXPY or SciPy), and turns the answer into a recipe.

Example
-------
>>> from npk_blend import BlendRequest, Ingredient, calculate_mix
>>>
>>> request = BlendRequest(
...     target_n=10, target_p=10, target_k=10,
...     total_weight=1000, tolerance=5, increment=10,
...     ingredients=[
...         Ingredient('urea', 'Urea', 46, 0, 0),
...         Ingredient('dap', 'DAP', 18, 46, 0),
...         Ingredient('potash', 'Potash', 0, 0, 60),
...         Ingredient('sand', 'Sand', 0, 0, 0),
...     ],
... )
>>> result = calculate_mix(request)
>>> result.ok
True
>>> round(sum(item.amount for item in result.recipe))
1000
"""

from npk_blend.config import Settings
from npk_blend.core import calculate_mix, calculate_mix_async
from npk_blend.models import (
    BlendRequest,
    ErrorKind,
    Ingredient,
    Model,
    Nutrient,
    RecipeItem,
    Result,
    Solution,
    SolverStatus,
)
from npk_blend.problem import build_model
from npk_blend.solvers import CvxpySolver, ScipyMilpSolver, Solver, get_solver

__all__ = [
    "BlendRequest",
    "CvxpySolver",
    "ErrorKind",
    "Ingredient",
    "Model",
    "Nutrient",
    "RecipeItem",
    "Result",
    "ScipyMilpSolver",
    "Settings",
    "Solution",
    "Solver",
    "SolverStatus",
    "build_model",
    "calculate_mix",
    "calculate_mix_async",
    "get_solver",
]
__version__ = "0.1.0"
