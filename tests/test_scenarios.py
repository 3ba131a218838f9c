import numpy as np
import pytest

from metapop_sir.config import MetapopConfig, ScalarConfig
from metapop_sir.scenarios import (
    apply_scenario,
    get_scenario,
    get_scenario_description,
    list_scenarios,
)


def test_list_scenarios():
    names = list_scenarios()
    assert "baseline" in names
    assert "travel_restriction" in names


def test_unknown_scenario():
    with pytest.raises(ValueError, match="Unknown scenario"):
        get_scenario("lockdown_forever")


def test_get_scenario_returns_copy():
    scenario = get_scenario("baseline")
    scenario["beta_reduction"] = 99.0
    assert get_scenario("baseline")["beta_reduction"] == 0.0


def test_description():
    assert get_scenario_description("mild_distancing") == "Reduce beta by 25%"
    with pytest.raises(ValueError):
        get_scenario_description("nope")


class TestApplyScenario:
    def test_baseline_leaves_config_unchanged(self):
        config = MetapopConfig()
        applied = apply_scenario(config, "baseline")
        assert applied.beta == config.beta
        assert applied.mobility == config.mobility

    def test_distancing_reduces_scalar_beta(self):
        config = ScalarConfig(beta=0.4)
        applied = apply_scenario(config, "moderate_distancing")
        assert applied.beta == pytest.approx(0.2)
        assert config.beta == 0.4

    def test_distancing_reduces_every_location(self):
        config = MetapopConfig(beta=[0.4, 0.8])
        applied = apply_scenario(config, "severe_distancing")
        assert np.allclose(applied.beta, [0.1, 0.2])

    def test_travel_restriction_halves_mobility(self):
        config = MetapopConfig(mobility=[[0.0, 1000.0], [600.0, 0.0]])
        applied = apply_scenario(config, "travel_restriction")
        assert np.allclose(applied.mobility, [[0.0, 500.0], [300.0, 0.0]])
        assert applied.beta == pytest.approx(config.beta)

    def test_unsupported_config(self):
        with pytest.raises(TypeError):
            apply_scenario({"beta": 0.5}, "baseline")
