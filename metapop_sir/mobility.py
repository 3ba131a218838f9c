from typing import Tuple

import numpy as np

from .errors import InvalidParameter


def as_mobility_matrix(M, n_locations: int) -> np.ndarray:
    """
    Validates and converts a mobility matrix.

    :param M: L x L array-like, M[i][j] = expected movers from j to i per day
    :param n_locations: Number of locations L
    :return: Read-only float64 array of shape (L, L)
    """
    matrix = np.array(M, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape != (n_locations, n_locations):
        raise InvalidParameter(
            f"Mobility matrix must have shape ({n_locations}, {n_locations}), got {matrix.shape}"
        )
    if not np.all(np.isfinite(matrix)):
        raise InvalidParameter("Mobility matrix contains non-finite values")
    if np.any(matrix < 0):
        raise InvalidParameter("Mobility matrix entries must be non-negative")
    matrix.setflags(write=False)
    return matrix


def zero_mobility(n_locations: int) -> np.ndarray:
    return as_mobility_matrix(np.zeros((n_locations, n_locations)), n_locations)


def pair_flows(M: np.ndarray, X: np.ndarray, N: np.ndarray) -> np.ndarray:
    """
    Rounded movers of one compartment for every (destination, source) pair.

    F[i, j] = round(M[i, j] * X[j] / N[j]). Each pair is rounded on its own
    (half to even), so summed flows carry pair-local rounding error.

    :param M: Mobility matrix (L, L)
    :param X: Compartment counts per location (L,)
    :param N: Population per location (L,)
    :return: Integer array (L, L)
    """
    share = X / N
    return np.rint(M * share[np.newaxis, :]).astype(np.int64)


def mobility_terms(M: np.ndarray, X: np.ndarray, N: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Inflow and outflow of one compartment for every location.

    inflow[i] = sum_j round(M[i, j] * X[j] / N[j])
    outflow[i] = sum_j round(M[j, i] * X[i] / N[i])

    :return: (inflow, outflow), integer arrays of shape (L,)
    """
    flows = pair_flows(M, X, N)
    inflow = flows.sum(axis=1)
    outflow = flows.sum(axis=0)
    return inflow, outflow


def scale_mobility(M: np.ndarray, factor: float) -> np.ndarray:
    """Returns a copy of M with every entry multiplied by factor (e.g. travel restrictions)."""
    if factor < 0:
        raise InvalidParameter(f"Mobility scale factor must be non-negative, got {factor}")
    matrix = np.asarray(M, dtype=np.float64)
    return as_mobility_matrix(matrix * factor, matrix.shape[0])
