"""
Window Expressions

One pure evaluator per window family. Every evaluator has the signature

    f(n, N, param) -> np.ndarray

where ``n`` is an array of sample positions, ``N`` the window length and
``param`` the (already transformed) shape parameter. Families without a
shape parameter ignore it. Positions are normalised as x = n / N, so the
domain of each expression is 0 <= x <= 1 with its peak at x = 1/2.

The iteration engine only ever asks for the first half of the window; the
expressions themselves know nothing about symmetry.
"""

import numpy as np

from .bessel import i0


# 4- and 5-term cosine series coefficients
BLACKMAN_HARRIS_COEFS = (0.35875, 0.48829, 0.14128, 0.01168)
NUTTALL_COEFS = (88942 / 250000., 121849 / 250000., 36058 / 250000., 3151 / 250000.)
BLACKMAN_NUTTALL_COEFS = (0.3635819, 0.4891775, 0.1365995, 0.0106411)
FLAT_TOP_COEFS = (0.215578947, 0.416631580, 0.277263158, 0.083578947, 0.006947368)

KAISER_ALPHA = 3.


def _cosine_series(x: np.ndarray, coefs) -> np.ndarray:
    """a0 - a1 cos(2 pi x) + a2 cos(4 pi x) - a3 cos(6 pi x) + ..."""
    w = np.zeros_like(x)
    sign = 1.0
    for k, a in enumerate(coefs):
        w += sign * a * np.cos(2 * np.pi * k * x)
        sign = -sign
    return w


def rectangular_expr(n, N, param=0.):
    return np.ones_like(np.asarray(n, dtype=np.float64))


def hann_expr(n, N, param=0.):
    x = np.asarray(n, dtype=np.float64) / N
    return 0.5 - 0.5 * np.cos(2 * np.pi * x)


def hamming_expr(n, N, param=0.):
    x = np.asarray(n, dtype=np.float64) / N
    return 25. / 46. - 21. / 46. * np.cos(2 * np.pi * x)


def generalized_hamming_param(alpha: float) -> float:
    """
    Validate the generalized Hamming coefficient.

    The family is only meaningful for 0.5 <= alpha <= 1.0 (Hann at 0.5,
    Hamming at 25/46, rectangular at 1.0).

    Raises
    ------
    ValueError
        If alpha is outside [0.5, 1.0] (NaN included).
    """
    alpha = float(alpha)
    if not 0.5 <= alpha <= 1.0:
        raise ValueError(f"parameter 'alpha' is out of domain [0.5, 1.0]: {alpha}")
    return alpha


def generalized_hamming_expr(n, N, alpha):
    x = np.asarray(n, dtype=np.float64) / N
    return alpha - (1 - alpha) * np.cos(2 * np.pi * x)


def bartlett_expr(n, N, param=0.):
    x = np.asarray(n, dtype=np.float64) / N
    return 1 - 2 * np.abs(x - 0.5)


def blackman_expr(n, N, param=0.):
    x = np.asarray(n, dtype=np.float64) / N
    return 0.42 - 0.5 * np.cos(2 * np.pi * x) + 0.08 * np.cos(4 * np.pi * x)


def gaussian_expr(n, N, param=0.):
    """Gaussian window with sigma fixed at 3/10."""
    t = -1 + 2. * np.asarray(n, dtype=np.float64) / N
    return np.exp(-(25. / 18.) * t * t)


def gaussian_param(sigma: float) -> float:
    """
    Map the standard deviation to the denominator 8 sigma^2.

    Very small sigma underflows to exactly 0.0 here (sigma < ~1e-162), which
    the engine then resolves like sigma == 0.
    """
    sigma = float(sigma)
    return 8 * sigma * sigma


def gaussian_with_param_expr(n, N, t2):
    t1 = -1 + 2. * np.asarray(n, dtype=np.float64) / N
    return np.exp(-(t1 * t1 / t2))


def kaiser_expr(n, N, param=0.):
    """Kaiser window with alpha fixed at 3."""
    x = np.asarray(n, dtype=np.float64) / N
    return i0(6 * np.sqrt(-(x - 1) * x)) / i0(KAISER_ALPHA)


def kaiser_with_param_expr(n, N, alpha):
    x = np.asarray(n, dtype=np.float64) / N
    denom = i0(alpha)
    if np.isinf(denom):
        # I0(alpha) overflowed: the limit is a unit impulse at x = 1/2
        return (x == 0.5).astype(np.float64)
    return i0(alpha * 2 * np.sqrt(-(x - 1) * x)) / denom


def bartlett_hann_expr(n, N, param=0.):
    x = np.asarray(n, dtype=np.float64) / N
    return 0.62 - 0.48 * np.abs(x - 0.5) + 0.38 * np.cos(2 * np.pi * (x - 0.5))


def blackman_harris_expr(n, N, param=0.):
    return _cosine_series(np.asarray(n, dtype=np.float64) / N, BLACKMAN_HARRIS_COEFS)


def nuttall_expr(n, N, param=0.):
    return _cosine_series(np.asarray(n, dtype=np.float64) / N, NUTTALL_COEFS)


def blackman_nuttall_expr(n, N, param=0.):
    return _cosine_series(np.asarray(n, dtype=np.float64) / N, BLACKMAN_NUTTALL_COEFS)


def flat_top_expr(n, N, param=0.):
    return _cosine_series(np.asarray(n, dtype=np.float64) / N, FLAT_TOP_COEFS)


def kbd_expr(n, N, alpha):
    """
    Kaiser kernel underlying the KBD window.

    Unnormalised; the MDCT rule of the engine integrates it and divides by
    the total, so the I0(pi alpha) denominator cancels out.
    """
    x = np.asarray(n, dtype=np.float64) / N
    t1 = 4.0 * x - 1.0
    return i0(np.pi * alpha * np.sqrt(np.clip(1.0 - t1 * t1, 0.0, None)))
