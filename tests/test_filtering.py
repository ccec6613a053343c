"""Tests for the zero-target pre-filter."""

import pytest

from npk_blend.exceptions import NoCandidatesError
from npk_blend.filtering import filter_candidates, is_compatible
from npk_blend.models import Nutrient


def targets(n, p, k):
    return {Nutrient.N: n, Nutrient.P: p, Nutrient.K: k}


def test_all_nonzero_targets_keep_everything(urea, dap, potash):
    assert filter_candidates([urea, dap, potash], targets(10, 10, 10)) == [urea, dap, potash]


def test_zero_target_excludes_carriers(urea, dap, potash):
    kept = filter_candidates([urea, dap, potash], targets(10, 0, 10))
    assert kept == [urea, potash]


def test_order_is_preserved(urea, dap, potash, filler):
    kept = filter_candidates([potash, filler, urea], targets(0, 0, 10))
    assert kept == [potash, filler]


def test_empty_input_raises():
    with pytest.raises(NoCandidatesError, match="No ingredients"):
        filter_candidates([], targets(10, 10, 10))


def test_everything_filtered_raises(urea, dap, potash):
    with pytest.raises(NoCandidatesError):
        filter_candidates([urea, dap, potash], targets(0, 0, 0))


def test_zero_nutrient_ingredient_always_compatible(filler):
    assert is_compatible(filler, targets(0, 0, 0))
