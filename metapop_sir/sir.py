from typing import Optional, Tuple

import numpy as np

from .integrator import MetapopulationSIR
from .state import EpidemicState

__all__ = ["EpidemicState", "run_sir"]


def run_sir(
    state: EpidemicState,
    beta: float,
    D: float,
    days: int,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Simulates the stochastic SIR model for a single location.

    This is the metapopulation model with one location and no mobility, so
    a given generator produces exactly the draws the same location would get
    inside a larger network without movement.

    :param state: Initial epidemic state
    :param beta: Transmission rate
    :param D: Average infectious period in days
    :param days: Number of days to simulate
    :param rng: NumPy Generator; created from seed when omitted
    :param seed: Seed used when rng is omitted
    :return: Arrays of (S, I, R, newI) for each day (excluding initial state)
    """
    model = MetapopulationSIR(
        N=[state.N],
        S0=[state.S],
        I0=[state.I],
        R0=[state.R],
        beta=beta,
        D=D,
        horizon=days,
        rng=rng,
        seed=seed,
    )
    series = model.run()
    return series.S[:, 0], series.I[:, 0], series.R[:, 0], series.newI[:, 0]
