"""Tabular I/O for mobility matrices and simulation output."""

from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from .mobility import as_mobility_matrix
from .timeseries import TABLE_COLUMNS, TimeSeries


def load_mobility_csv(path: Union[str, Path], index_col: Union[int, None] = 0) -> np.ndarray:
    """
    Reads an L x L mobility matrix from CSV.

    By default the first column holds row labels (destinations) and the header
    holds column labels (sources). Pass ``index_col=None`` for a bare matrix
    with a header row only.
    """
    df = pd.read_csv(path, index_col=index_col)
    return as_mobility_matrix(df.to_numpy(dtype=np.float64), len(df))


def save_mobility_csv(path: Union[str, Path], M) -> None:
    matrix = np.asarray(M, dtype=np.float64)
    labels = list(range(matrix.shape[0]))
    pd.DataFrame(matrix, index=labels, columns=labels).to_csv(path)


def save_timeseries_csv(path: Union[str, Path], series: TimeSeries) -> None:
    """Writes the flat (day, location, S, I, R, newI) table."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    series.to_dataframe().to_csv(path, index=False)


def load_timeseries_csv(path: Union[str, Path]) -> pd.DataFrame:
    df = pd.read_csv(path)
    missing = [c for c in TABLE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Time series table is missing columns: {', '.join(missing)}")
    return df[TABLE_COLUMNS]
