import json

import pandas as pd

from metapop_sir.config import get_config
from metapop_sir.experiment import (
    ExperimentConfig,
    ExperimentDirectory,
    generate_seeds,
    load_summary,
)
from metapop_sir.simulation import run_replicates
from metapop_sir.timeseries import TABLE_COLUMNS


def test_generate_seeds_is_deterministic():
    assert generate_seeds(3) == [42, 123, 456]
    assert generate_seeds(15) == generate_seeds(15)
    assert len(generate_seeds(15)) == 15


def test_experiment_directory_layout(tmp_path):
    config = get_config("two_patch")
    config.days = 20
    exp_config = ExperimentConfig(base_config=config, scenario_name="baseline", seeds=[1, 2])
    exp_dir = ExperimentDirectory(exp_config, base_dir=str(tmp_path))

    assert exp_dir.root == tmp_path / "baseline" / exp_config.timestamp
    assert exp_dir.logs_dir.is_dir()
    assert exp_dir.timeseries_dir.is_dir()

    config_path = exp_dir.save_config()
    with open(config_path, encoding="utf-8") as f:
        saved = json.load(f)
    assert saved["seeds"] == [1, 2]
    assert saved["base_config"]["model"] == "metapop"


def test_results_and_summary_saved(tmp_path):
    config = get_config("two_patch")
    config.days = 20
    exp_config = ExperimentConfig(base_config=config, seeds=[1, 2])
    exp_dir = ExperimentDirectory(exp_config, base_dir=str(tmp_path))

    results = run_replicates(config, exp_config.seeds)
    for result in results:
        table_path = exp_dir.save_result(result)
        df = pd.read_csv(table_path)
        assert list(df.columns) == TABLE_COLUMNS
        assert len(df) == 20 * 2
        assert exp_dir.get_log_path(result.name).exists()

    summary = load_summary(exp_dir.save_summary(results))
    assert summary["num_runs"] == 2
    assert [run["name"] for run in summary["runs"]] == ["baseline_seed1", "baseline_seed2"]
    assert "total_infected_mean" in summary
