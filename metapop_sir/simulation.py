import logging
from typing import Dict, List, Optional

import numpy as np

from .actions import InterventionAction
from .config import Config, ScalarConfig
from .integrator import IntegratorStatus, MetapopulationSIR
from .scenarios import apply_scenario
from .timeseries import TimeSeries

logger = logging.getLogger(__name__)


class SimulationResult:
    def __init__(
        self,
        series: TimeSeries,
        config: Config,
        scenario: Optional[str] = None,
        seed: Optional[int] = None,
        interventions: Optional[Dict[int, InterventionAction]] = None,
    ):
        self.series = series
        self.config = config
        self.scenario = scenario
        self.seed = seed
        self.interventions = dict(interventions or {})

    @property
    def t(self) -> np.ndarray:
        return self.series.days

    @property
    def S(self) -> np.ndarray:
        return self.series.S

    @property
    def I(self) -> np.ndarray:
        return self.series.I

    @property
    def R(self) -> np.ndarray:
        return self.series.R

    @property
    def complete(self) -> bool:
        return self.series.complete

    @property
    def peak_infected(self) -> int:
        """Largest network-wide number of simultaneously infected individuals."""
        if len(self.series) == 0:
            return 0
        return int(self.I.sum(axis=1).max())

    @property
    def peak_day(self) -> int:
        if len(self.series) == 0:
            return 0
        return int(self.t[self.I.sum(axis=1).argmax()])

    @property
    def total_infected(self) -> int:
        return int(self.series.total_infected.sum())

    @property
    def attack_rate(self) -> float:
        return self.total_infected / float(self.series.N.sum())

    @property
    def epidemic_duration(self) -> int:
        days_above_one = np.where(self.I.sum(axis=1) >= 1)[0]
        return int(self.t[days_above_one[-1]]) if len(days_above_one) > 0 else 0

    @property
    def name(self) -> str:
        parts = [self.scenario or "baseline"]
        if self.seed is not None:
            parts.append(f"seed{self.seed}")
        return "_".join(parts)

    def summary(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "complete": self.complete,
            "days": len(self.series),
            "peak_infected": self.peak_infected,
            "peak_day": self.peak_day,
            "total_infected": self.total_infected,
            "attack_rate": self.attack_rate,
            "epidemic_duration": self.epidemic_duration,
            "per_location": {
                "peak_infected": self.series.peak_infected.tolist(),
                "peak_day": self.series.peak_day.tolist(),
                "total_infected": self.series.total_infected.tolist(),
                "attack_rate": self.series.attack_rate.tolist(),
            },
        }


class Simulation:
    """
    Runs one configured simulation, optionally under a scenario.

    :param config: Scalar or metapopulation config
    :param scenario: Optional predefined scenario name
    :param interventions: Optional mapping day -> action, applied to the base
        beta before that day is simulated
    """

    def __init__(
        self,
        config: Config,
        scenario: Optional[str] = None,
        interventions: Optional[Dict[int, InterventionAction]] = None,
    ):
        self.config = config
        self.scenario = scenario
        self.interventions = dict(interventions or {})
        effective = apply_scenario(config, scenario) if scenario else config
        if isinstance(effective, ScalarConfig):
            effective = effective.to_metapop()
        self.effective_config = effective

    def build_model(self, seed: Optional[int] = None) -> MetapopulationSIR:
        c = self.effective_config
        return MetapopulationSIR(
            N=c.N,
            I0=c.I0,
            R0=c.R0,
            beta=c.beta,
            D=c.D,
            M=c.mobility,
            horizon=c.days,
            seed=seed,
            per_location_streams=c.per_location_streams,
            workers=c.workers,
        )

    def run(self, seed: Optional[int] = None) -> SimulationResult:
        seed = self.config.seed if seed is None else seed
        model = self.build_model(seed)
        logger.info(
            "Running %s (scenario=%s, seed=%s)",
            type(self.config).__name__,
            self.scenario or "baseline",
            seed,
        )

        while model.status is not IntegratorStatus.COMPLETED:
            action = self.interventions.get(model.day + 1)
            if action is not None:
                logger.info("Day %d: applying intervention %s", model.day + 1, action.name)
                model.apply_intervention(action)
            model.step()

        result = SimulationResult(
            series=model.result(),
            config=self.config,
            scenario=self.scenario,
            seed=seed,
            interventions=self.interventions,
        )
        logger.info(
            "Finished %s: peak %d infected on day %d, %d infections in total",
            result.name,
            result.peak_infected,
            result.peak_day,
            result.total_infected,
        )
        return result


def run_replicates(
    config: Config, seeds: List[int], scenario: Optional[str] = None
) -> List[SimulationResult]:
    """Runs independent replicates of one configuration, one per seed."""
    simulation = Simulation(config, scenario=scenario)
    return [simulation.run(seed=seed) for seed in seeds]
