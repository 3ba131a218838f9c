from typing import Dict, List

import numpy as np
import pandas as pd

from .errors import SimulationStateError

FIELDS = ("S", "I", "R", "newI", "newR")
TABLE_COLUMNS = ["day", "location", "S", "I", "R", "newI"]


class TimeSeries:
    """
    Daily per-location records of a simulation run.

    Records are appended once per day (days 1..horizon) and the series is
    frozen once the run hands it over. Every array property has shape
    (days, n_locations).

    Attributes:
        n_locations: Number of locations.
        N: Population per location.
        complete: False when the run stopped before its horizon.
    """

    def __init__(self, N: np.ndarray, horizon: int):
        self.N = np.array(N, dtype=np.int64)
        self.n_locations = len(self.N)
        self.horizon = horizon
        self.complete = False
        self._days: List[int] = []
        self._records: Dict[str, List[np.ndarray]] = {name: [] for name in FIELDS}
        self._frozen = False

    def append(self, day: int, S, I, R, newI, newR) -> None:
        if self._frozen:
            raise SimulationStateError("Cannot append to a finalized time series")
        expected = len(self._days) + 1
        if day != expected:
            raise SimulationStateError(f"Expected record for day {expected}, got {day}")

        for name, values in zip(FIELDS, (S, I, R, newI, newR)):
            row = np.array(values, dtype=np.int64)
            row.setflags(write=False)
            self._records[name].append(row)
        self._days.append(day)

    def finalize(self, complete: bool) -> "TimeSeries":
        self.complete = complete
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._days)

    def _stack(self, name: str) -> np.ndarray:
        if not self._days:
            return np.zeros((0, self.n_locations), dtype=np.int64)
        return np.vstack(self._records[name])

    @property
    def days(self) -> np.ndarray:
        return np.array(self._days, dtype=np.int64)

    @property
    def S(self) -> np.ndarray:
        return self._stack("S")

    @property
    def I(self) -> np.ndarray:
        return self._stack("I")

    @property
    def R(self) -> np.ndarray:
        return self._stack("R")

    @property
    def newI(self) -> np.ndarray:
        return self._stack("newI")

    @property
    def newR(self) -> np.ndarray:
        return self._stack("newR")

    def location(self, index: int) -> Dict[str, np.ndarray]:
        """Per-day arrays for a single location."""
        if not 0 <= index < self.n_locations:
            raise IndexError(f"Location {index} out of range (0..{self.n_locations - 1})")
        return {name: self._stack(name)[:, index] for name in FIELDS}

    @property
    def peak_infected(self) -> np.ndarray:
        if not self._days:
            return np.zeros(self.n_locations, dtype=np.int64)
        return self.I.max(axis=0)

    @property
    def peak_day(self) -> np.ndarray:
        if not self._days:
            return np.zeros(self.n_locations, dtype=np.int64)
        return self.days[self.I.argmax(axis=0)]

    @property
    def total_infected(self) -> np.ndarray:
        """Cumulative new infections per location."""
        return self.newI.sum(axis=0)

    @property
    def attack_rate(self) -> np.ndarray:
        return self.total_infected / self.N

    @property
    def epidemic_duration(self) -> np.ndarray:
        """Last day with at least one infected individual, per location (0 if none)."""
        I = self.I
        durations = np.zeros(self.n_locations, dtype=np.int64)
        for loc in range(self.n_locations):
            days_above_one = np.where(I[:, loc] >= 1)[0]
            if len(days_above_one) > 0:
                durations[loc] = self.days[days_above_one[-1]]
        return durations

    def to_records(self) -> List[Dict[str, int]]:
        """Flat table rows (day, location, S, I, R, newI)."""
        S, I, R, newI = self.S, self.I, self.R, self.newI
        rows = []
        for t, day in enumerate(self._days):
            for loc in range(self.n_locations):
                rows.append(
                    {
                        "day": int(day),
                        "location": loc,
                        "S": int(S[t, loc]),
                        "I": int(I[t, loc]),
                        "R": int(R[t, loc]),
                        "newI": int(newI[t, loc]),
                    }
                )
        return rows

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_records(), columns=TABLE_COLUMNS)
