"""
Modified Bessel Function of the First Kind, Order Zero (Numba JIT)

Kaiser and Kaiser-Bessel-Derived windows are built on I0(x). This module
evaluates it without relying on scipy:

1. Power series  sum_k ((x/2)^k / k!)^2        for |x| <= 30
2. Asymptotic    e^x / sqrt(2 pi x) * sum_k c_k / x^k   for |x| > 30

Both sums have only positive terms, so there is no cancellation and the
result is accurate to a few ulp. Values beyond the double range come back
as +inf instead of raising.
"""

import math

import numpy as np
from numba import jit
from typing import Union

# I0(x) > DBL_MAX for x above ~713.987
_OVERFLOW_X = 715.0
_SERIES_LIMIT = 30.0
_EPS = 1e-17


@jit(nopython=True, cache=True)
def _i0_series(ax: float) -> float:
    """Power series, all terms positive."""
    q = 0.25 * ax * ax
    term = 1.0
    total = 1.0
    k = 0
    while term > total * _EPS:
        k += 1
        term *= q / (k * k)
        total += term
    return total


@jit(nopython=True, cache=True)
def _i0_asymptotic(ax: float) -> float:
    """Hankel expansion; split exp(x) in two so the prefactor stays finite."""
    total = 1.0
    term = 1.0
    for k in range(1, 60):
        term *= (2 * k - 1) * (2 * k - 1) / (8.0 * k * ax)
        total += term
        if term < total * _EPS:
            break
    half = math.exp(0.5 * ax)
    return half * (half / math.sqrt(2.0 * math.pi * ax) * total)


@jit(nopython=True, cache=True)
def _i0_scalar(x: float) -> float:
    if x != x:
        return x
    ax = abs(x)
    if ax >= _OVERFLOW_X:
        return np.inf
    if ax <= _SERIES_LIMIT:
        return _i0_series(ax)
    return _i0_asymptotic(ax)


@jit(nopython=True, cache=True)
def _i0_array(x: np.ndarray) -> np.ndarray:
    out = np.empty(x.size, dtype=np.float64)
    flat = x.ravel()
    for i in range(flat.size):
        out[i] = _i0_scalar(flat[i])
    return out.reshape(x.shape)


def i0(x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Modified Bessel function of the first kind, order 0.

    Parameters
    ----------
    x : float or np.ndarray
        Argument(s). Any finite or infinite real value.

    Returns
    -------
    float or np.ndarray
        I0(x), same shape as the input. +inf where the true value overflows,
        NaN where the input is NaN.

    Examples
    --------
    >>> i0(0.0)
    1.0
    >>> i0(1000.0)
    inf
    """
    if np.ndim(x) == 0:
        return float(_i0_scalar(float(x)))
    return _i0_array(np.ascontiguousarray(x, dtype=np.float64))
