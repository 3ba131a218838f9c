import logging

import numpy as np
import pytest

from metapop_sir.actions import InterventionAction
from metapop_sir.config import MetapopConfig, ScalarConfig, get_config
from metapop_sir.errors import InvariantViolation
from metapop_sir.simulation import Simulation, run_replicates


class TestRunSimulation:
    """Tests for the Simulation driver."""

    def test_scalar_simulation_basic(self):
        config = get_config("default")
        result = Simulation(config).run()

        assert len(result.t) == config.days
        assert result.S.shape == (config.days, 1)
        assert result.complete

    def test_metapop_simulation_basic(self):
        config = get_config("two_patch")
        result = Simulation(config).run()

        assert result.I.shape == (config.days, 2)
        totals = result.S + result.I + result.R
        assert np.all(totals == np.array(config.N))

    def test_uses_config_seed(self):
        config = get_config("two_patch")
        result_a = Simulation(config).run()
        result_b = Simulation(config).run()
        assert result_a.seed == config.seed
        assert np.array_equal(result_a.I, result_b.I)

    def test_result_properties(self):
        result = Simulation(get_config("chain")).run()
        network_I = result.I.sum(axis=1)

        assert result.peak_infected == network_I.max()
        assert result.peak_day == result.t[network_I.argmax()]
        assert result.total_infected == result.series.newI.sum()
        assert 0 <= result.attack_rate <= 1

    def test_summary_keys(self):
        summary = Simulation(get_config("two_patch")).run().summary()
        for key in ("name", "complete", "peak_infected", "total_infected", "attack_rate", "per_location"):
            assert key in summary
        assert len(summary["per_location"]["peak_infected"]) == 2

    def test_severe_intervention_reduces_infections(self):
        """Severe distancing from day 1 keeps the outbreak below the unmitigated one."""
        config = ScalarConfig(N=100_000, I0=100, beta=0.5, D=4.0, days=150, seed=7)

        result_no = Simulation(config).run()
        result_severe = Simulation(
            config, interventions={1: InterventionAction.SEVERE}
        ).run()

        assert (
            result_severe.peak_infected < result_no.peak_infected
        ), "Severe intervention should reduce peak infections"
        assert (
            result_severe.total_infected < result_no.total_infected
        ), "Severe intervention should reduce total infections"

    def test_scenario_applied(self):
        config = ScalarConfig(N=100_000, I0=100, beta=0.5, D=4.0, days=150, seed=7)
        baseline = Simulation(config).run()
        distanced = Simulation(config, scenario="severe_distancing").run()

        assert distanced.scenario == "severe_distancing"
        assert distanced.total_infected < baseline.total_infected
        assert distanced.name == "severe_distancing_seed7"

    def test_invariant_violation_propagates(self):
        config = MetapopConfig(
            N=[100, 100],
            I0=[0, 0],
            R0=[0, 0],
            beta=[0.0, 0.0],
            mobility=[[0.0, 0.0], [500.0, 0.0]],
            days=5,
        )
        with pytest.raises(InvariantViolation):
            Simulation(config).run()

    def test_invariant_violation_logged_once(self, caplog):
        config = MetapopConfig(
            N=[100, 100],
            I0=[0, 0],
            R0=[0, 0],
            beta=[0.0, 0.0],
            mobility=[[0.0, 0.0], [500.0, 0.0]],
            days=5,
        )
        with caplog.at_level(logging.INFO, logger="metapop_sir"):
            with pytest.raises(InvariantViolation):
                Simulation(config).run()
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "halting run" in errors[0].getMessage()


class TestReplicates:
    def test_one_result_per_seed(self):
        config = get_config("two_patch")
        config.days = 30
        results = run_replicates(config, [1, 2, 3])
        assert [r.seed for r in results] == [1, 2, 3]

    def test_replicates_differ(self):
        config = get_config("two_patch")
        config.days = 30
        results = run_replicates(config, [1, 2])
        assert not np.array_equal(results[0].I, results[1].I)
