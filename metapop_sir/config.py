import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


@dataclass
class ScalarConfig:
    # Population and epidemic parameters
    N: int = 100_000  # Total population
    I0: int = 100  # Initial infected
    R0: int = 0  # Initial recovered

    # SIR model parameters
    beta: float = 0.5  # Transmission rate
    D: float = 4.0  # Average infectious period (days)

    # Simulation settings
    days: int = 120
    seed: Optional[int] = 42

    @property
    def S0(self) -> int:
        return self.N - self.I0 - self.R0

    def to_metapop(self) -> "MetapopConfig":
        """The same run expressed as a one-location network without mobility."""
        return MetapopConfig(
            N=[self.N],
            I0=[self.I0],
            R0=[self.R0],
            beta=[self.beta],
            D=self.D,
            mobility=[[0.0]],
            days=self.days,
            seed=self.seed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"model": "scalar", **asdict(self)}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ScalarConfig":
        values = dict(payload)
        model = values.pop("model", "scalar")
        if model != "scalar":
            raise ValueError(f"Expected a scalar config, got model type: {model}")
        return cls(**values)


@dataclass
class MetapopConfig:
    # Per-location populations and initial conditions
    N: List[int] = field(default_factory=lambda: [100_000, 100_000])
    I0: List[int] = field(default_factory=lambda: [100, 0])
    R0: List[int] = field(default_factory=lambda: [0, 0])

    # Per-location transmission rate; D may be a scalar or per-location list
    beta: List[float] = field(default_factory=lambda: [0.5, 0.5])
    D: Union[float, List[float]] = 4.0

    # mobility[i][j]: expected movers from j to i per day
    mobility: List[List[float]] = field(default_factory=lambda: [[0.0, 1000.0], [1000.0, 0.0]])

    # Simulation settings
    days: int = 120
    seed: Optional[int] = 42
    per_location_streams: bool = False
    workers: int = 1

    @property
    def n_locations(self) -> int:
        return len(self.N)

    @property
    def S0(self) -> List[int]:
        return [n - i - r for n, i, r in zip(self.N, self.I0, self.R0)]

    def to_dict(self) -> Dict[str, Any]:
        return {"model": "metapop", **asdict(self)}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "MetapopConfig":
        values = dict(payload)
        model = values.pop("model", "metapop")
        if model != "metapop":
            raise ValueError(f"Expected a metapop config, got model type: {model}")
        return cls(**values)


Config = Union[ScalarConfig, MetapopConfig]


def config_from_dict(payload: Dict[str, Any]) -> Config:
    """Builds a config from the output of ``to_dict`` (or an equivalent JSON file)."""
    model = payload.get("model", "metapop")
    if model == "scalar":
        return ScalarConfig.from_dict(payload)
    if model == "metapop":
        return MetapopConfig.from_dict(payload)
    raise ValueError(f"Unknown model type: {model}")


def load_config(path: Union[str, Path]) -> Config:
    with open(path, "r", encoding="utf-8") as f:
        return config_from_dict(json.load(f))


def save_config(config: Config, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)


def _chain_config() -> MetapopConfig:
    # Three towns on a line: 0 <-> 1 <-> 2, outbreak seeded at one end
    return MetapopConfig(
        N=[50_000, 120_000, 80_000],
        I0=[50, 0, 0],
        R0=[0, 0, 0],
        beta=[0.45, 0.45, 0.45],
        D=4.0,
        mobility=[
            [0.0, 800.0, 0.0],
            [800.0, 0.0, 700.0],
            [0.0, 700.0, 0.0],
        ],
        days=180,
    )


CONFIGS = {
    "default": ScalarConfig,
    "two_patch": MetapopConfig,
    "chain": _chain_config,
}


def get_config(name: str) -> Config:
    if name in CONFIGS:
        return CONFIGS[name]()
    else:
        available = ", ".join(CONFIGS.keys())
        raise ValueError(f"Unknown config: {name}. Available configs: {available}")
