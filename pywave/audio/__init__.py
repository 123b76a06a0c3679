"""
Audio containers: PCM waveform buffers and the RIFF/WAVE codec.
"""

from .pcm import PCM, FS_DEF
from .riff import (
    FormatChunk,
    SUPPORTED_VERSION,
    read_format,
    read_linear_pcm,
    write_linear_pcm,
)

__all__ = [
    'PCM',
    'FS_DEF',
    'FormatChunk',
    'SUPPORTED_VERSION',
    'read_format',
    'read_linear_pcm',
    'write_linear_pcm',
]
