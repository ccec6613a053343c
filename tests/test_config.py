"""Tests for settings."""

import pytest

from npk_blend.config import BIG_M_FACTOR, LINKING_EPSILON, RECIPE_THRESHOLD, Settings


def test_defaults():
    settings = Settings()

    assert settings.linking_epsilon == LINKING_EPSILON == 0.001
    assert settings.recipe_threshold == RECIPE_THRESHOLD == 0.001
    assert settings.big_m_factor == BIG_M_FACTOR == 2.0
    assert settings.solver == "cvxpy"
    assert settings.cvxpy_solver == "SCIPY"
    assert settings.time_limit is None
    assert settings.verbose is False


def test_from_env():
    env = {
        "NPK_BLEND_BIG_M_FACTOR": "4",
        "NPK_BLEND_RECIPE_THRESHOLD": "0.5",
        "NPK_BLEND_TIME_LIMIT": "30",
        "NPK_BLEND_VERBOSE": "yes",
        "NPK_BLEND_SOLVER": "scipy",
        "UNRELATED": "1",
    }
    settings = Settings.from_env(env)

    assert settings.big_m_factor == 4.0
    assert settings.recipe_threshold == 0.5
    assert settings.time_limit == 30.0
    assert settings.verbose is True
    assert settings.solver == "scipy"
    assert settings.linking_epsilon == LINKING_EPSILON


def test_overrides_beat_environment():
    settings = Settings.from_env({"NPK_BLEND_SOLVER": "scipy"}, solver="cvxpy")
    assert settings.solver == "cvxpy"


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("NPK_BLEND_CVXPY_SOLVER", "HIGHS")
    assert Settings.from_env().cvxpy_solver == "HIGHS"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"linking_epsilon": 0},
        {"recipe_threshold": -1},
        {"big_m_factor": 0.5},
        {"time_limit": 0},
        {"verbose": "maybe"},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises((ValueError, TypeError)):
        Settings(**kwargs)


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.big_m_factor = 3
    assert settings.replace(big_m_factor=3).big_m_factor == 3
