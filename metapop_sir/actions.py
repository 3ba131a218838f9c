from enum import Enum

import numpy as np

from .errors import InvalidParameter


class InterventionAction(Enum):
    NO = 1.0
    MILD = 0.75
    MODERATE = 0.5
    SEVERE = 0.25

    def apply_to_beta(self, beta_0):
        return np.asarray(beta_0, dtype=np.float64) * self.value

    @property
    def reduction_percent(self) -> float:
        return (1.0 - self.value) * 100.0


def reduce_beta(beta_0, percent: float):
    """
    Reduces transmission by a percentage, e.g. percent=30 keeps 70% of beta.

    :param beta_0: Scalar or per-location base transmission rate
    :param percent: Reduction in [0, 100]
    :return: Reduced beta with the same shape as beta_0
    """
    if not 0.0 <= percent <= 100.0:
        raise InvalidParameter(f"Beta reduction must be within [0, 100] percent, got {percent}")
    return np.asarray(beta_0, dtype=np.float64) * (1.0 - percent / 100.0)
