import math
from typing import List, Optional

import numpy as np

from .errors import InvalidParameter, RandomSourceError

# numpy's Generator.poisson rejects means above roughly 9.2e18. At this mean
# the draw exceeds any population count, so the clamped result is the ceiling.
MAX_POISSON_RATE = 1e18


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the generator owned by a single run."""
    return np.random.default_rng(seed)


def spawn_location_streams(seed: Optional[int], n_locations: int) -> List[np.random.Generator]:
    """
    Create one independent generator per location.

    Streams are spawned from a single SeedSequence, so a fixed seed gives the
    same per-location draws no matter in which order locations are processed.

    :param seed: Root seed (None for fresh entropy)
    :param n_locations: Number of streams to spawn
    :return: List of generators, one per location
    """
    if n_locations < 1:
        raise InvalidParameter(f"n_locations must be >= 1, got {n_locations}")
    children = np.random.SeedSequence(seed).spawn(n_locations)
    return [np.random.default_rng(child) for child in children]


def sample_bounded_poisson(rate: float, ceiling: int, rng) -> int:
    """
    Draws an event count from Poisson(rate), clamped to ceiling.

    The result never exceeds the number of individuals available to
    transition. A zero rate returns 0 without consuming a draw, and a rate
    at or above MAX_POISSON_RATE returns the ceiling without one.

    :param rate: Poisson mean, must be finite and >= 0
    :param ceiling: Maximum number of events, must be >= 0
    :param rng: Generator exposing ``poisson(lam)``
    :return: Integer in [0, ceiling]
    """
    if not math.isfinite(rate) or rate < 0:
        raise InvalidParameter(f"Poisson rate must be finite and non-negative, got {rate}")
    if ceiling < 0:
        raise InvalidParameter(f"Ceiling must be non-negative, got {ceiling}")
    if rng is None or not hasattr(rng, "poisson"):
        raise RandomSourceError("A random generator with a poisson() method is required")

    if rate == 0:
        return 0
    if rate >= MAX_POISSON_RATE:
        return int(ceiling)

    draw = int(rng.poisson(rate))
    return min(draw, int(ceiling))
