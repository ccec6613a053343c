"""PyTest configuration."""

from __future__ import annotations

import pytest

from npk_blend.models import BlendRequest, Ingredient


@pytest.fixture
def urea():
    return Ingredient("urea", "Urea", 46, 0, 0)


@pytest.fixture
def dap():
    return Ingredient("dap", "DAP", 18, 46, 0)


@pytest.fixture
def potash():
    return Ingredient("potash", "Potash", 0, 0, 60)


@pytest.fixture
def filler():
    return Ingredient("sand", "Sand", 0, 0, 0)


@pytest.fixture
def make_request():
    """Factory for requests with sensible defaults."""

    def _make(ingredients, **kwargs):
        params = dict(
            target_n=10,
            target_p=10,
            target_k=10,
            total_weight=1000,
            tolerance=5,
            increment=10,
        )
        params.update(kwargs)
        return BlendRequest(ingredients=ingredients, **params)

    return _make


@pytest.fixture(params=["cvxpy", "scipy"])
def backend(request):
    """Run a test once per bundled solver backend."""
    return request.param
