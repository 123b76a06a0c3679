"""
Window Iteration Engine

Fills a window array from a per-sample expression under one contract:

1. Special-case resolution. The shape parameter is checked for NaN, then
   +/-inf, then exactly zero. Each check has its own policy; the first one
   that fires replaces the whole array with a fixed pattern (all ones, or a
   unit spike at the centre). These are the mathematical limits of windows
   whose closed form would evaluate 0/0 at that parameter.
2. Otherwise the configured rule runs over the first half of the window:
   - ONE_SIDED: evaluate, then mirror.
   - MDCT_CONVOLUTION: evaluate, accumulate, normalise by the total and take
     the square root (Kaiser-Bessel-Derived construction), then mirror.

Mirroring convention:
    even N: sample n goes to N - n (n >= 1); w[0] stays alone
    odd N:  positions are n + 0.5 and sample n goes to N - 1 - n
The centre index N // 2 is always 1.0.
"""

import logging
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

logger = logging.getLogger(__name__)


class IterRule(Enum):
    ONE_SIDED = 'one_sided'
    MDCT_CONVOLUTION = 'mdct_convolution'


class SpecialCase(Enum):
    NO_OVERRIDE = 'no_override'
    ALL_ONES = 'all_ones'
    CENTER_SPIKE = 'center_spike'


@dataclass(frozen=True)
class IterationDescriptor:
    """
    Everything the engine needs to build one window.

    Attributes:
        func: Expression f(n, N, param) evaluated on half-window positions
        param: Shape parameter, already transformed for ``func``
        rule: Iteration rule
        on_nan: Policy when ``param`` is NaN
        on_inf: Policy when ``param`` is +/-inf
        on_zero: Policy when ``param`` is exactly 0
    """
    func: Callable[[np.ndarray, int, float], np.ndarray]
    param: float = 0.
    rule: IterRule = IterRule.ONE_SIDED
    on_nan: SpecialCase = SpecialCase.NO_OVERRIDE
    on_inf: SpecialCase = SpecialCase.NO_OVERRIDE
    on_zero: SpecialCase = SpecialCase.NO_OVERRIDE


def check_length(N) -> int:
    """Validate a window length and return it as a Python int."""
    if isinstance(N, bool) or not isinstance(N, numbers.Integral):
        raise TypeError(f"window length must be an integer, got {type(N).__name__}")
    N = int(N)
    if N < 1:
        raise ValueError(f"window length must be positive, got {N}")
    return N


def symmetric_positions(N: int, boundary: bool = False) -> np.ndarray:
    """
    Sample positions of the first half of a length-N window.

    Parameters
    ----------
    N : int
        Window length
    boundary : bool
        Also include the midpoint position N / 2 as the last element

    Returns
    -------
    np.ndarray
        [0, 1, ..., N//2 - 1] for even N, [0.5, 1.5, ..., N//2 - 0.5] for
        odd N; one element longer when ``boundary`` is True.
    """
    half = N // 2
    n = np.arange(half + 1 if boundary else half, dtype=np.float64)
    if N % 2 == 1:
        n += 0.5
    return n


def resolve_special_case(descriptor: IterationDescriptor) -> SpecialCase:
    """Pick the fixed-pattern policy for the parameter, NaN > Inf > zero."""
    param = descriptor.param
    if descriptor.on_nan is not SpecialCase.NO_OVERRIDE and np.isnan(param):
        return descriptor.on_nan
    if descriptor.on_inf is not SpecialCase.NO_OVERRIDE and np.isinf(param):
        return descriptor.on_inf
    if descriptor.on_zero is not SpecialCase.NO_OVERRIDE and param == 0:
        return descriptor.on_zero
    return SpecialCase.NO_OVERRIDE


def make_rect(N: int) -> np.ndarray:
    return np.ones(N, dtype=np.float64)


def make_center_spike(N: int) -> np.ndarray:
    w = np.zeros(N, dtype=np.float64)
    w[N // 2] = 1.
    return w


def _mirror(half_values: np.ndarray, N: int) -> np.ndarray:
    """Assemble the full window from its first half and force the centre."""
    half = N // 2
    w = np.empty(N, dtype=np.float64)
    w[:half] = half_values
    if N % 2 == 0:
        # w[N - n] = w[n] for n = 1 .. half - 1
        w[half + 1:] = half_values[:0:-1]
    else:
        w[half + 1:] = half_values[::-1]
    w[half] = 1.
    return w


def iter_one_sided(descriptor: IterationDescriptor, N: int) -> np.ndarray:
    n = symmetric_positions(N)
    values = descriptor.func(n, N, descriptor.param)
    return _mirror(values, N)


def iter_mdct(descriptor: IterationDescriptor, N: int) -> np.ndarray:
    """
    Convolutional (cumulative-energy) rule for MDCT windows.

    w[n] = sqrt(sum_{k<=n} f(k) / sum_{k<=N/2} f(k))

    The total includes the boundary term at the midpoint. A cumulative sum
    that has overflowed to inf saturates to 1.0.
    """
    n = symmetric_positions(N, boundary=True)
    kernel = descriptor.func(n, N, descriptor.param)
    cumsum = np.cumsum(kernel)
    total = cumsum[-1]
    partial = cumsum[:-1]
    with np.errstate(invalid='ignore', divide='ignore'):
        values = np.sqrt(partial / total)
    values[np.isinf(partial)] = 1.
    return _mirror(values, N)


_RULES = {
    IterRule.ONE_SIDED: iter_one_sided,
    IterRule.MDCT_CONVOLUTION: iter_mdct,
}

_PATTERNS = {
    SpecialCase.ALL_ONES: make_rect,
    SpecialCase.CENTER_SPIKE: make_center_spike,
}


def generate(descriptor: IterationDescriptor, N: int) -> np.ndarray:
    """
    Generate a window array of length N.

    Parameters
    ----------
    descriptor : IterationDescriptor
        Expression, parameter, rule and special-case policies
    N : int
        Window length, N >= 1

    Returns
    -------
    np.ndarray
        float64 array of length N, owned by the caller

    Raises
    ------
    TypeError
        If N is not an integer
    ValueError
        If N < 1
    """
    N = check_length(N)

    handle = resolve_special_case(descriptor)
    if handle is not SpecialCase.NO_OVERRIDE:
        logger.debug(f"{descriptor.func.__name__}: param={descriptor.param} -> {handle.value}")
        return _PATTERNS[handle](N)

    return _RULES[descriptor.rule](descriptor, N)
