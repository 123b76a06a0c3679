"""
pywave - discrete window functions and a linear-PCM RIFF/WAVE codec.
"""

from .audio import PCM, read_linear_pcm, write_linear_pcm
from .dsp_core import WindowKind, WindowSpec, get_window, available_windows
from .exceptions import SemanticError

__all__ = [
    'PCM',
    'read_linear_pcm',
    'write_linear_pcm',
    'WindowKind',
    'WindowSpec',
    'get_window',
    'available_windows',
    'SemanticError',
]

__version__ = '1.0.0'
