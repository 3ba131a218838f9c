"""
Predefined intervention scenarios.

A scenario reduces transmission by a percentage and/or scales the mobility
matrix (travel restrictions). Scenarios never change the model itself, only
the inputs a run starts from.
"""

from dataclasses import replace
from typing import Any, Dict, List

import numpy as np

from .actions import InterventionAction, reduce_beta
from .config import Config, MetapopConfig, ScalarConfig
from .mobility import scale_mobility


PREDEFINED_SCENARIOS = {
    "baseline": {
        "description": "No intervention",
        "beta_reduction": 0.0,
        "mobility_scale": 1.0,
    },
    "mild_distancing": {
        "description": "Reduce beta by 25%",
        "beta_reduction": InterventionAction.MILD.reduction_percent,
        "mobility_scale": 1.0,
    },
    "moderate_distancing": {
        "description": "Reduce beta by 50%",
        "beta_reduction": InterventionAction.MODERATE.reduction_percent,
        "mobility_scale": 1.0,
    },
    "severe_distancing": {
        "description": "Reduce beta by 75%",
        "beta_reduction": InterventionAction.SEVERE.reduction_percent,
        "mobility_scale": 1.0,
    },
    "travel_restriction": {
        "description": "Halve movement between locations",
        "beta_reduction": 0.0,
        "mobility_scale": 0.5,
    },
}


def get_scenario(name: str) -> Dict[str, Any]:
    """
    Get configuration for a predefined scenario.

    Args:
        name: Scenario name (e.g., "baseline", "travel_restriction").

    Returns:
        Copy of the scenario dictionary.

    Raises:
        ValueError: If scenario name is not recognized.
    """
    if name not in PREDEFINED_SCENARIOS:
        available = ", ".join(PREDEFINED_SCENARIOS.keys())
        raise ValueError(
            f"Unknown scenario: '{name}'. Available scenarios: {available}"
        )

    return PREDEFINED_SCENARIOS[name].copy()


def list_scenarios() -> List[str]:
    return list(PREDEFINED_SCENARIOS.keys())


def get_scenario_description(name: str) -> str:
    if name not in PREDEFINED_SCENARIOS:
        raise ValueError(f"Unknown scenario: '{name}'")

    return PREDEFINED_SCENARIOS[name]["description"]


def apply_scenario(config: Config, name: str) -> Config:
    """
    Returns a copy of config with the scenario's interventions applied.

    Mobility scaling has no effect on a scalar (single-location) config.
    """
    scenario = get_scenario(name)
    percent = scenario["beta_reduction"]

    if isinstance(config, ScalarConfig):
        return replace(config, beta=float(reduce_beta(config.beta, percent)))

    if isinstance(config, MetapopConfig):
        beta = reduce_beta(config.beta, percent).tolist()
        mobility = scale_mobility(np.asarray(config.mobility), scenario["mobility_scale"]).tolist()
        return replace(config, beta=beta, mobility=mobility)

    raise TypeError(f"Unsupported config type: {type(config).__name__}")
