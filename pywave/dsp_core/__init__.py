"""
DSP Core Module - Discrete Window Functions

Hand-written window generators built on a single iteration engine, with a
numba-compiled Bessel kernel for the Kaiser family.

Modules:
    - bessel: modified Bessel function I0
    - expressions: per-sample window expressions
    - iteration: symmetric array filling, special cases, MDCT rule
    - windows: public generators and the window registry
"""

from .bessel import i0
from .iteration import (
    IterRule,
    SpecialCase,
    IterationDescriptor,
    generate,
    symmetric_positions,
)
from .windows import (
    rectangular,
    hann,
    hanning,
    hamming,
    generalized_hamming,
    bartlett,
    blackman,
    gaussian,
    kaiser,
    bartlett_hann,
    blackman_harris,
    nuttall,
    blackman_nuttall,
    flat_top,
    kbd,
    WindowKind,
    WindowSpec,
    get_window,
    available_windows,
)

__all__ = [
    # Bessel kernel
    'i0',
    # Engine
    'IterRule',
    'SpecialCase',
    'IterationDescriptor',
    'generate',
    'symmetric_positions',
    # Windows
    'rectangular',
    'hann',
    'hanning',
    'hamming',
    'generalized_hamming',
    'bartlett',
    'blackman',
    'gaussian',
    'kaiser',
    'bartlett_hann',
    'blackman_harris',
    'nuttall',
    'blackman_nuttall',
    'flat_top',
    'kbd',
    'WindowKind',
    'WindowSpec',
    'get_window',
    'available_windows',
]
