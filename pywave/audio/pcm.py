"""
PCM waveform buffer.

A PCM object owns one channel of floating-point samples together with its
sampling frequency. Samples are nominally in [-1.0, 1.0); the RIFF writer
clips anything outside.
"""

import numbers
from typing import Callable, Iterator, Optional

import numpy as np

# Mainstream sampling frequency; 44.1 kHz is no longer the default.
FS_DEF = 48000


def _check_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"'{name}' must be an integer, got {type(value).__name__}")
    return int(value)


class PCM:
    """
    Fixed-capacity buffer of float64 samples with a sample rate tag.

    Args:
        length: Number of samples, >= 0. New samples are 0.0.
        fs: Sampling frequency in Hz, > 0
        generator: Optional callable ``f(index) -> float`` used to fill the
            buffer

    Example:
        >>> pcm = PCM(16, 8000, lambda n: 0.1 * math.sin(2 * math.pi * 500 * n / 8000))
        >>> pcm.fs, len(pcm)
        (8000, 16)
    """

    def __init__(
        self,
        length: int,
        fs: int = FS_DEF,
        generator: Optional[Callable[[int], float]] = None
    ):
        self._samples = np.zeros(0, dtype=np.float64)
        self._fs = FS_DEF
        self.resize(length)
        self.fs = fs

        if generator is not None:
            for i in range(len(self._samples)):
                self._samples[i] = float(generator(i))

    @classmethod
    def from_array(cls, samples, fs: int = FS_DEF) -> 'PCM':
        """Create a PCM holding a copy of ``samples`` (1-D)."""
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError(f"Input must be 1D, got shape {samples.shape}")
        pcm = cls(len(samples), fs)
        pcm._samples[:] = samples
        return pcm

    @property
    def fs(self) -> int:
        """Sampling frequency in Hz."""
        return self._fs

    @fs.setter
    def fs(self, value: int):
        value = _check_int(value, 'fs')
        if value <= 0:
            raise ValueError(f"sampling frequency must be positive, got {value}")
        self._fs = value

    @property
    def length(self) -> int:
        return len(self._samples)

    @length.setter
    def length(self, value: int):
        self.resize(value)

    @property
    def data(self) -> np.ndarray:
        """
        The owned sample array (a view, not a copy).

        Writes through this array modify the buffer. The array object is
        replaced by ``resize``, so do not keep it across a resize.
        """
        return self._samples

    def resize(self, n: int):
        """
        Change the number of samples.

        Growing zero-fills the new tail; shrinking truncates.
        """
        n = _check_int(n, 'length')
        if n < 0:
            raise ValueError(f"sample size must not be negative, got {n}")
        current = len(self._samples)
        if n == current:
            return
        if n < current:
            self._samples = self._samples[:n].copy()
        else:
            grown = np.zeros(n, dtype=np.float64)
            grown[:current] = self._samples
            self._samples = grown

    def to_array(self) -> np.ndarray:
        """Copy of the samples."""
        return self._samples.copy()

    def map_inplace(self, func: Callable[[float], float]) -> 'PCM':
        """Replace each sample s with ``func(s)``."""
        for i in range(len(self._samples)):
            self._samples[i] = float(func(float(self._samples[i])))
        return self

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._samples[index].copy()
        return float(self._samples[index])

    def __setitem__(self, index, value):
        self._samples[index] = value

    def __iter__(self) -> Iterator[float]:
        for s in self._samples:
            yield float(s)

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, PCM):
            return NotImplemented
        return (
            self._fs == other._fs
            and len(self._samples) == len(other._samples)
            and bool(np.array_equal(self._samples, other._samples))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"PCM(length={len(self._samples)}, fs={self._fs})"
