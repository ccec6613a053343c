#!/usr/bin/env python3
"""Zero-target blending and backend selection.

A 0-0-50 potassium supplement must contain no nitrogen or phosphorus, so
every fertilizer with any N or P is excluded before the model is built.
The same request is then solved with both bundled backends.
"""

from npk_blend import BlendRequest, CvxpySolver, ScipyMilpSolver, calculate_mix
from npk_blend.filtering import filter_candidates
from npk_blend.library import DEFAULT_INGREDIENTS

request = BlendRequest(
    target_n=0.0,
    target_p=0.0,
    target_k=55.0,
    total_weight=500.0,
    tolerance=2.0,
    increment=5.0,
    ingredients=DEFAULT_INGREDIENTS,
)

# =============================================================================
# PRE-FILTER
# =============================================================================

candidates = filter_candidates(request.ingredients, request.targets)
print("Candidates after excluding N and P carriers:")
for ingredient in candidates:
    print(f"  {ingredient.name:20} {ingredient.grade}")
print()

# =============================================================================
# SOLVE WITH EACH BACKEND
# =============================================================================

for solver in (CvxpySolver("SCIPY"), ScipyMilpSolver()):
    result = calculate_mix(request, solver=solver)
    print(f"--- {solver!r} ---")
    print(result.summary())
    print()

# An impossible request comes back as data, not as an exception.
strict = BlendRequest(
    target_n=0.0,
    target_p=0.0,
    target_k=100.0,
    total_weight=100.0,
    tolerance=0.0,
    increment=1000.0,
    ingredients=candidates,
)
print(calculate_mix(strict).summary())
