import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .actions import InterventionAction
from .errors import InvalidParameter, InvariantViolation, SimulationStateError
from .mobility import as_mobility_matrix, mobility_terms, zero_mobility
from .sampler import make_rng, sample_bounded_poisson, spawn_location_streams
from .state import SimulationState
from .timeseries import TimeSeries

logger = logging.getLogger(__name__)


class IntegratorStatus(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _as_counts(values, n_locations: int, name: str) -> np.ndarray:
    array = np.atleast_1d(np.asarray(values, dtype=np.float64))
    if array.shape != (n_locations,):
        raise InvalidParameter(f"{name} must have {n_locations} entries, got shape {array.shape}")
    if not np.all(np.isfinite(array)) or np.any(array != np.floor(array)):
        raise InvalidParameter(f"{name} must contain whole numbers")
    if np.any(array < 0):
        raise InvalidParameter(f"{name} must be non-negative")
    return array.astype(np.int64)


def _as_rates(values, n_locations: int, name: str, strictly_positive: bool = False) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64)
    if array.ndim == 0:
        array = np.full(n_locations, float(array))
    if array.shape != (n_locations,):
        raise InvalidParameter(f"{name} must be a scalar or have {n_locations} entries, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise InvalidParameter(f"{name} must be finite")
    if strictly_positive and np.any(array <= 0):
        raise InvalidParameter(f"{name} must be positive")
    if np.any(array < 0):
        raise InvalidParameter(f"{name} must be non-negative")
    return array


class MetapopulationSIR:
    """
    Discrete-time stochastic SIR model over locations coupled by mobility.

    Each day, every location draws new infections and recoveries from
    bounded Poisson distributions and exchanges S and I with other locations
    according to the mobility matrix. All reads of a day come from one frozen
    snapshot; the next state is built in separate arrays and swapped in at
    the end of the day. R is always derived as N - S - I, so S + I + R = N
    holds exactly for every location.

    Randomness comes either from one generator (draws in location order:
    infection then recovery) or from one independent stream per location.
    Only with per-location streams may ``workers > 1`` spread the epidemic
    draws over a thread pool.

    Attributes:
        n_locations: Number of locations L.
        N: Population per location.
        M: Mobility matrix, M[i, j] = expected movers from j to i per day.
        D: Average infectious period per location.
        horizon: Number of days to simulate.
        status: Current IntegratorStatus.
    """

    def __init__(
        self,
        N: Sequence[int],
        I0: Sequence[int],
        beta,
        D,
        horizon: int,
        M=None,
        S0: Optional[Sequence[int]] = None,
        R0: Optional[Sequence[int]] = None,
        rng=None,
        seed: Optional[int] = None,
        per_location_streams: bool = False,
        workers: int = 1,
    ):
        N_array = np.atleast_1d(np.asarray(N))
        self.n_locations = len(N_array)
        if self.n_locations == 0:
            raise InvalidParameter("At least one location is required")

        self.N = _as_counts(N, self.n_locations, "N")
        if np.any(self.N <= 0):
            raise InvalidParameter("N must be positive for every location")
        I_init = _as_counts(I0, self.n_locations, "I0")
        R_init = (
            np.zeros(self.n_locations, dtype=np.int64)
            if R0 is None
            else _as_counts(R0, self.n_locations, "R0")
        )
        if S0 is None:
            S_init = self.N - I_init - R_init
            if np.any(S_init < 0):
                raise InvalidParameter("I0 + R0 exceeds N for at least one location")
        else:
            S_init = _as_counts(S0, self.n_locations, "S0")
        if np.any(S_init + I_init + R_init != self.N):
            raise InvalidParameter("S0 + I0 + R0 must equal N for every location")

        self.base_beta = _as_rates(beta, self.n_locations, "beta")
        self._beta = self.base_beta.copy()
        self.D = _as_rates(D, self.n_locations, "D", strictly_positive=True)
        self.M = zero_mobility(self.n_locations) if M is None else as_mobility_matrix(M, self.n_locations)

        if isinstance(horizon, bool) or int(horizon) != horizon or horizon < 1:
            raise InvalidParameter(f"horizon must be an integer >= 1, got {horizon}")
        self.horizon = int(horizon)

        if int(workers) < 1:
            raise InvalidParameter(f"workers must be >= 1, got {workers}")
        self.workers = int(workers)

        self._rng = None
        self._streams: Optional[List] = None
        if isinstance(rng, (list, tuple)):
            if len(rng) != self.n_locations:
                raise InvalidParameter(f"Expected {self.n_locations} location streams, got {len(rng)}")
            self._streams = list(rng)
        elif per_location_streams:
            self._streams = spawn_location_streams(seed, self.n_locations)
        else:
            self._rng = rng if rng is not None else make_rng(seed)

        if self.workers > 1 and self._streams is None:
            raise InvalidParameter("Parallel draws require per-location random streams")

        self._state = SimulationState(day=0, N=self.N, S=S_init, I=I_init, R=R_init)
        self._initial_state = self._state
        self._series: Optional[TimeSeries] = TimeSeries(self.N, self.horizon)
        self._pool: Optional[ThreadPoolExecutor] = None
        self._failure: Optional[str] = None
        self.status = IntegratorStatus.UNINITIALIZED

    @property
    def initial_state(self) -> SimulationState:
        return self._initial_state

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def day(self) -> int:
        return self._state.day

    @property
    def beta(self) -> np.ndarray:
        return self._beta.copy()

    def set_beta(self, beta) -> None:
        """Overrides transmission rates for the remaining days."""
        if self.status in (IntegratorStatus.COMPLETED, IntegratorStatus.FAILED):
            raise SimulationStateError(f"Cannot change beta of a {self.status.value} run")
        self._beta = _as_rates(beta, self.n_locations, "beta")
        logger.debug("Day %d: beta set to %s", self.day, self._beta)

    def apply_intervention(self, action: InterventionAction) -> None:
        self.set_beta(action.apply_to_beta(self.base_beta))

    def _validate(self) -> None:
        # Inputs are checked in __init__; beta may have been overridden since.
        _as_rates(self._beta, self.n_locations, "beta")
        if self.M.shape != (self.n_locations, self.n_locations):
            raise InvalidParameter("Mobility matrix does not match the number of locations")

    def _location_draws(self, snapshot: SimulationState, loc: int) -> Tuple[int, int]:
        rng = self._streams[loc] if self._streams is not None else self._rng
        S = int(snapshot.S[loc])
        I = int(snapshot.I[loc])
        N = int(snapshot.N[loc])

        infection_rate = self._beta[loc] * I * S / N
        recovery_rate = I / self.D[loc]

        new_infections = sample_bounded_poisson(infection_rate, S, rng)
        new_recoveries = sample_bounded_poisson(recovery_rate, I, rng)
        return new_infections, new_recoveries

    def _epidemic_draws(self, snapshot: SimulationState) -> Tuple[np.ndarray, np.ndarray]:
        locations = range(self.n_locations)
        if self.workers > 1:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(max_workers=self.workers)
            draws = list(self._pool.map(lambda loc: self._location_draws(snapshot, loc), locations))
        else:
            draws = [self._location_draws(snapshot, loc) for loc in locations]

        new_infections = np.array([d[0] for d in draws], dtype=np.int64)
        new_recoveries = np.array([d[1] for d in draws], dtype=np.int64)
        return new_infections, new_recoveries

    def _shutdown_pool(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def _halt(self, reason: str) -> TimeSeries:
        """Moves the run to FAILED and returns its series, finalized as incomplete."""
        self.status = IntegratorStatus.FAILED
        self._failure = reason
        self._shutdown_pool()
        partial = self._series.finalize(complete=False)
        self._series = None
        return partial

    def _fail(self, day: int, location: int, compartment: str, value: int) -> None:
        partial = self._halt(f"invariant violation on day {day}")
        logger.error(
            "Day %d: %s at location %d would be %d, halting run", day, compartment, location, value
        )
        raise InvariantViolation(day, location, compartment, value, partial=partial)

    def step(self) -> SimulationState:
        """
        Advances the simulation by one day.

        Any error raised while computing the day, including one from the
        random source, halts the run and propagates unchanged.

        :return: Snapshot of the new day
        :raises SimulationStateError: If the run is finished or failed
        :raises InvariantViolation: If a compartment would become negative
        """
        if self.status is IntegratorStatus.COMPLETED:
            raise SimulationStateError(f"Run already completed after {self.day} days")
        if self.status is IntegratorStatus.FAILED:
            raise SimulationStateError(f"Run halted after an {self._failure}")
        if self.status is IntegratorStatus.UNINITIALIZED:
            self._validate()
            self.status = IntegratorStatus.RUNNING
            logger.info(
                "Starting run: %d locations, %d days, total population %d",
                self.n_locations,
                self.horizon,
                int(self.N.sum()),
            )

        snapshot = self._state
        day = snapshot.day + 1

        try:
            new_infections, new_recoveries = self._epidemic_draws(snapshot)
            S_in, S_out = mobility_terms(self.M, snapshot.S, self.N)
            I_in, I_out = mobility_terms(self.M, snapshot.I, self.N)
        except Exception as exc:
            self._halt(f"error on day {day}: {exc!r}")
            logger.error("Day %d: %s, halting run", day, exc)
            raise

        S_next = snapshot.S - new_infections + S_in - S_out
        I_next = snapshot.I + new_infections - new_recoveries + I_in - I_out
        R_next = self.N - S_next - I_next

        for compartment, values in (("S", S_next), ("I", I_next), ("R", R_next)):
            negative = np.flatnonzero(values < 0)
            if len(negative) > 0:
                loc = int(negative[0])
                self._fail(day, loc, compartment, int(values[loc]))

        self._state = SimulationState(day=day, N=self.N, S=S_next, I=I_next, R=R_next)
        self._series.append(day, S_next, I_next, R_next, new_infections, new_recoveries)
        logger.debug(
            "Day %d: new infections %d, new recoveries %d, infected %d",
            day,
            int(new_infections.sum()),
            int(new_recoveries.sum()),
            int(I_next.sum()),
        )

        if day == self.horizon:
            self.status = IntegratorStatus.COMPLETED
            self._series.finalize(complete=True)
            self._shutdown_pool()
            logger.info("Run completed after %d days", day)

        return self._state

    def result(self) -> TimeSeries:
        """
        Hands the time series over to the caller.

        Taking the result of an unfinished run ends it; the series is then
        marked incomplete. The integrator keeps no reference afterwards.
        A failed run has no result; an InvariantViolation carries the
        partial series instead.
        """
        if self.status is IntegratorStatus.FAILED:
            raise SimulationStateError(f"Run failed after an {self._failure} and has no result")
        if self._series is None:
            raise SimulationStateError("Time series was already handed over")
        series = self._series
        self._series = None
        if not series.frozen:
            series.finalize(complete=False)
            self._shutdown_pool()
            logger.info("Run stopped after %d of %d days", self.day, self.horizon)
            self.status = IntegratorStatus.COMPLETED
        return series

    def run(self, stop_after: Optional[int] = None) -> TimeSeries:
        """
        Steps until the horizon (or for stop_after days) and returns the series.

        :param stop_after: Optional number of days after which to stop early
        :return: TimeSeries, marked incomplete when stopped before the horizon
        """
        if stop_after is not None and stop_after < 1:
            raise InvalidParameter(f"stop_after must be >= 1, got {stop_after}")

        steps = 0
        while self.status is not IntegratorStatus.COMPLETED:
            if stop_after is not None and steps >= stop_after:
                break
            self.step()
            steps += 1

        return self.result()
