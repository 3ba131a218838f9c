import numpy as np
import pytest

from metapop_sir.errors import InvalidParameter
from metapop_sir.integrator import MetapopulationSIR
from metapop_sir.io import (
    load_mobility_csv,
    load_timeseries_csv,
    save_mobility_csv,
    save_timeseries_csv,
)
from metapop_sir.timeseries import TABLE_COLUMNS


def test_mobility_csv_round_trip(tmp_path):
    M = np.array([[0.0, 120.5], [80.0, 0.0]])
    path = tmp_path / "mobility.csv"
    save_mobility_csv(path, M)
    assert np.allclose(load_mobility_csv(path), M)


def test_mobility_csv_without_labels(tmp_path):
    path = tmp_path / "bare.csv"
    path.write_text("a,b,c\n0,1,2\n3,0,4\n5,6,0\n", encoding="utf-8")
    M = load_mobility_csv(path, index_col=None)
    assert M.shape == (3, 3)
    assert M[2, 1] == 6.0


def test_non_square_mobility_csv_rejected(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("a,b\n0,1\n", encoding="utf-8")
    with pytest.raises(InvalidParameter):
        load_mobility_csv(path, index_col=None)


def test_timeseries_csv(tmp_path):
    series = MetapopulationSIR(N=[1000, 500], I0=[10, 0], beta=0.4, D=4.0, horizon=7, seed=1).run()
    path = tmp_path / "out" / "series.csv"
    save_timeseries_csv(path, series)

    df = load_timeseries_csv(path)
    assert list(df.columns) == TABLE_COLUMNS
    assert len(df) == 14
    assert df["day"].min() == 1
    assert df["day"].max() == 7


def test_timeseries_csv_missing_columns(tmp_path):
    path = tmp_path / "partial.csv"
    path.write_text("day,location,S\n1,0,10\n", encoding="utf-8")
    with pytest.raises(ValueError, match="missing columns"):
        load_timeseries_csv(path)
