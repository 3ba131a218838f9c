import numpy as np
import pytest


class RoundingGenerator:
    """Deterministic stand-in for a Generator: every Poisson draw returns its mean rounded."""

    def __init__(self):
        self.calls = []

    def poisson(self, lam):
        self.calls.append(lam)
        return int(np.rint(lam))


class FixedGenerator:
    """Returns the same draw no matter the rate."""

    def __init__(self, value):
        self.value = value

    def poisson(self, lam):
        return self.value


class FailingGenerator:
    def poisson(self, lam):
        raise RuntimeError("random source unavailable")


@pytest.fixture
def rounding_rng():
    return RoundingGenerator()
