#!/usr/bin/env python3
"""Fertilizer Blending using npk-blend.

This example demonstrates the fewest-ingredient blending problem:
mix stock fertilizers into a fixed weight of product whose N-P-K
percentages stay within a tolerance band around a target, using as few
distinct fertilizers as possible and only whole dosing increments.

Problem: A gardener wants 1 kg of a balanced 10-10-10 fertilizer from
what is on the shelf, measured in 10 g scoops.
"""

import logging

from npk_blend import BlendRequest, calculate_mix
from npk_blend.library import DEFAULT_INGREDIENTS
from npk_blend.problem import build_model

logging.basicConfig(level=logging.INFO)

# =============================================================================
# REQUEST
# =============================================================================

request = BlendRequest(
    target_n=10.0,
    target_p=10.0,
    target_k=10.0,
    total_weight=1000.0,  # grams
    tolerance=5.0,        # +/- 5% of each target
    increment=10.0,       # grams per scoop
    ingredients=DEFAULT_INGREDIENTS,
)

print(f"Target: {request.target_n:g}-{request.target_p:g}-{request.target_k:g}")
print(f"Candidates: {len(request.ingredients)}")
print()

# =============================================================================
# MODEL
# =============================================================================

# Three variables per candidate (amount, scoops, used) and three linking
# constraints each, plus total weight and one tolerance band per nutrient.
model = build_model(list(request.ingredients), request)
print(model)
print()

# =============================================================================
# SOLVE
# =============================================================================

result = calculate_mix(request)

if not result.ok:
    print(f"No blend: {result.message}")
    raise SystemExit(1)

print("=== Blend Recipe ===")
print(result.summary())
print()
print(f"Ingredients used: {len(result.recipe)}")
