"""
Exceptions raised by pywave.
"""


class SemanticError(ValueError):
    """A RIFF/WAVE file or PCM set is structurally inconsistent."""
