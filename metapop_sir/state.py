from dataclasses import dataclass

import numpy as np


@dataclass
class EpidemicState:
    N: int  # Total population
    S: int  # Susceptible
    I: int  # Infected
    R: int  # Recovered


def _frozen_copy(values) -> np.ndarray:
    array = np.array(values, dtype=np.int64)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class SimulationState:
    """Snapshot of every location's compartments at the end of a day."""

    day: int
    N: np.ndarray
    S: np.ndarray
    I: np.ndarray
    R: np.ndarray

    def __post_init__(self):
        for name in ("N", "S", "I", "R"):
            object.__setattr__(self, name, _frozen_copy(getattr(self, name)))

    @property
    def n_locations(self) -> int:
        return len(self.N)

    def location(self, index: int) -> EpidemicState:
        return EpidemicState(
            N=int(self.N[index]),
            S=int(self.S[index]),
            I=int(self.I[index]),
            R=int(self.R[index]),
        )
