"""Stochastic metapopulation SIR simulation."""

from .actions import InterventionAction, reduce_beta  # noqa: F401
from .config import MetapopConfig, ScalarConfig, get_config, load_config  # noqa: F401
from .errors import (  # noqa: F401
    InvalidParameter,
    InvariantViolation,
    MetapopError,
    RandomSourceError,
    SimulationStateError,
)
from .integrator import IntegratorStatus, MetapopulationSIR  # noqa: F401
from .sampler import make_rng, sample_bounded_poisson, spawn_location_streams  # noqa: F401
from .simulation import Simulation, SimulationResult, run_replicates  # noqa: F401
from .sir import EpidemicState, run_sir  # noqa: F401
from .state import SimulationState  # noqa: F401
from .timeseries import TimeSeries  # noqa: F401
