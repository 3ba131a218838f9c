"""
Experiment output management.

This module provides infrastructure for:
- Recording the configuration and seeds of a batch of runs
- Creating structured directory hierarchies for run outputs
- Saving metadata (config.json, summary.json) and time series tables
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

import numpy as np

from .config import Config
from .io import save_timeseries_csv
from .simulation import SimulationResult
from .utils import log_results

logger = logging.getLogger(__name__)


def generate_seeds(num_seeds: int) -> List[int]:
    """Generate a deterministic list of replicate seeds.

    Args:
        num_seeds: Number of seeds to generate.

    Returns:
        List of integer seeds.
    """
    base_seeds = [42, 123, 456, 789, 1024, 2048, 3141, 5555, 7777, 9999]
    if num_seeds <= len(base_seeds):
        return base_seeds[:num_seeds]
    rng = np.random.default_rng(42)
    extra = rng.integers(0, 10000, size=num_seeds - len(base_seeds)).tolist()
    return base_seeds + extra


@dataclass
class ExperimentConfig:
    """
    Configuration of a batch of runs.

    Attributes:
        base_config: Model configuration.
        scenario_name: Name of the applied scenario ("baseline" when none).
        seeds: Seeds of the replicates.
        timestamp: Timestamp of when the experiment was created.
    """
    base_config: Config
    scenario_name: str = "baseline"
    seeds: List[int] = field(default_factory=lambda: [42])
    timestamp: str = field(default_factory=lambda: datetime.now().strftime("%Y-%m-%d_%H-%M-%S"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario_name": self.scenario_name,
            "timestamp": self.timestamp,
            "base_config": self.base_config.to_dict(),
            "seeds": self.seeds,
        }


class ExperimentDirectory:
    """
    Manages experiment directory structure and file paths.

    Creates nested structure: experiments/{scenario_name}/{timestamp}/ with
    logs/ and timeseries/ subdirectories.
    """

    def __init__(self, exp_config: ExperimentConfig, base_dir: str = "experiments"):
        self.config = exp_config
        self.base_dir = Path(base_dir)
        self.root = self.base_dir / self.config.scenario_name / self.config.timestamp
        self.logs_dir = self.root / "logs"
        self.timeseries_dir = self.root / "timeseries"

        for dir_path in [self.root, self.logs_dir, self.timeseries_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

    def save_config(self) -> Path:
        config_path = self.root / "config.json"
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.config.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info("Experiment config saved to: %s", config_path)
        return config_path

    def save_result(self, result: SimulationResult) -> Path:
        """Writes the flat time series table and the text log of one run."""
        path = self.get_timeseries_path(result.name)
        save_timeseries_csv(path, result.series)
        log_results(result, log_dir=str(self.logs_dir))
        return path

    def save_summary(self, results: List[SimulationResult]) -> Path:
        summary_path = self.root / "summary.json"

        summary_data: Dict[str, Any] = {
            "scenario_name": self.config.scenario_name,
            "timestamp": self.config.timestamp,
            "num_runs": len(results),
            "runs": [result.summary() for result in results],
        }
        if results:
            totals = np.array([r.total_infected for r in results], dtype=np.float64)
            peaks = np.array([r.peak_infected for r in results], dtype=np.float64)
            summary_data["total_infected_mean"] = float(totals.mean())
            summary_data["total_infected_std"] = float(totals.std())
            summary_data["peak_infected_mean"] = float(peaks.mean())

        with open(summary_path, "w", encoding="utf-8") as f:
            json.dump(summary_data, f, indent=2, ensure_ascii=False)
        logger.info("Experiment summary saved to: %s", summary_path)
        return summary_path

    def get_timeseries_path(self, run_name: str) -> Path:
        return self.timeseries_dir / f"{run_name}.csv"

    def get_log_path(self, run_name: str) -> Path:
        return self.logs_dir / f"{run_name}.txt"

    def __str__(self) -> str:
        return str(self.root)


def load_summary(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
