"""Entry points of a blend calculation.

Example
-------
>>> from npk_blend import BlendRequest, calculate_mix
>>> from npk_blend.library import DEFAULT_INGREDIENTS
>>> request = BlendRequest(
...     target_n=10, target_p=10, target_k=10,
...     total_weight=1000, tolerance=5, increment=10,
...     ingredients=DEFAULT_INGREDIENTS,
... )
>>> result = calculate_mix(request)
>>> result.ok
True
"""

from __future__ import annotations

import asyncio
import functools
import logging

from npk_blend.config import Settings
from npk_blend.exceptions import BlendError
from npk_blend.filtering import filter_candidates
from npk_blend.interpret import interpret
from npk_blend.models import BlendRequest, ErrorKind, Result
from npk_blend.problem import build_model
from npk_blend.solvers import Solver, get_solver

_logger = logging.getLogger(__name__)


def calculate_mix(
    request: BlendRequest,
    solver: Solver | None = None,
    settings: Settings | None = None,
) -> Result:
    """Find the blend of fewest ingredients that meets ``request``.

    Parameters
    ----------
    request : BlendRequest
        Targets, weight, tolerance, increment and candidate ingredients.
    solver : Solver, optional
        Backend to use. Defaults to :func:`npk_blend.solvers.get_solver`
        for ``settings``.
    settings : Settings, optional
        Formulation constants and backend selection.

    Returns
    -------
    Result
        Never raises for calculation failures; they are returned as
        :meth:`Result.failure`.
    """
    settings = settings or Settings()
    try:
        candidates = filter_candidates(request.ingredients, request.targets)
        model = build_model(candidates, request, settings)
        solver = solver or get_solver(settings)
    except BlendError as exc:
        _logger.info("Blend calculation rejected: %s", exc)
        return Result.failure(exc.kind, str(exc))

    _logger.debug("Solving %r with %r", model, solver)
    try:
        solution = solver.solve(model)
    except Exception as exc:
        _logger.exception("Error solving blend problem")
        return Result.failure(
            ErrorKind.SOLVER_FAULT,
            f"An unexpected error occurred during calculation: {exc}",
        )
    try:
        return interpret(solution, candidates, model.decision, settings.recipe_threshold)
    except Exception as exc:
        _logger.exception("Error reading solver output")
        return Result.failure(
            ErrorKind.SOLVER_FAULT,
            f"An unexpected error occurred during calculation: {exc}",
        )


async def calculate_mix_async(
    request: BlendRequest,
    solver: Solver | None = None,
    settings: Settings | None = None,
) -> Result:
    """Awaitable :func:`calculate_mix`.

    The solve runs in the event loop's default executor. No timeout or
    cancellation is applied; wrap the call in :func:`asyncio.wait_for` if
    one is needed.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None, functools.partial(calculate_mix, request, solver, settings)
    )
