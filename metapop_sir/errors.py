"""Exceptions raised by the metapopulation simulator."""

from typing import Optional


class MetapopError(Exception):
    """Base class for all simulator errors."""


class InvalidParameter(MetapopError, ValueError):
    """Raised when inputs are rejected before any simulation step runs."""


class SimulationStateError(MetapopError, RuntimeError):
    """Raised when the integrator is driven from the wrong state."""


class RandomSourceError(MetapopError):
    """Raised when no usable random generator is available."""


class InvariantViolation(MetapopError):
    """
    A compartment went negative after a step.

    :param day: Day on which the violation was detected (1-based)
    :param location: Location index
    :param compartment: "S", "I" or "R"
    :param value: Offending value
    :param partial: Time series up to the last valid day, marked incomplete
    """

    def __init__(
        self,
        day: int,
        location: int,
        compartment: str,
        value: int,
        partial: Optional["TimeSeries"] = None,  # noqa: F821
    ):
        self.day = day
        self.location = location
        self.compartment = compartment
        self.value = value
        self.partial = partial
        super().__init__(
            f"Day {day}: compartment {compartment} at location {location} "
            f"would become negative ({value})"
        )
