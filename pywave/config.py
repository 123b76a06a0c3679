"""
Configuration with validation.

Defaults live in dataclasses; a YAML file may override any of them:

    audio:
      sample_rate: 44100
      bits_per_sample: 24
    window:
      name: kaiser
      length: 64
      param: 8.0
    logging:
      level: DEBUG
      log_file: logs/pywave.log
"""

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, Optional

import yaml

from .audio.pcm import FS_DEF
from .audio.riff import BUFFER_SIZE, SUPPORTED_BITS
from .dsp_core.windows import parse_kind


@dataclass
class AudioConfig:
    """PCM / RIFF defaults."""
    sample_rate: int = FS_DEF
    bits_per_sample: int = 16
    io_buffer_size: int = BUFFER_SIZE   # bytes per read/write call

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.bits_per_sample not in SUPPORTED_BITS:
            raise ValueError(f"bits_per_sample must be one of {SUPPORTED_BITS}")
        if self.io_buffer_size <= 0:
            raise ValueError(f"io_buffer_size must be positive, got {self.io_buffer_size}")


@dataclass
class WindowConfig:
    """Default window for the CLI."""
    name: str = 'hann'
    length: int = 16
    param: Optional[float] = None

    def __post_init__(self):
        parse_kind(self.name)
        if self.length < 1:
            raise ValueError(f"length must be positive, got {self.length}")


@dataclass
class LoggingConfig:
    level: str = 'INFO'
    log_file: Optional[str] = None


@dataclass
class Config:
    """Top-level configuration."""
    audio: AudioConfig = field(default_factory=AudioConfig)
    window: WindowConfig = field(default_factory=WindowConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build(cls, values: Dict[str, Any], path: str):
    if not isinstance(values, dict):
        raise ValueError(f"'{path}' must be a mapping, got {type(values).__name__}")
    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise ValueError(f"unknown keys in '{path}': {unknown}")

    kwargs = {}
    for key, value in values.items():
        default = known[key].default_factory() if callable(known[key].default_factory) else None
        if is_dataclass(default):
            kwargs[key] = _build(type(default), value or {}, f"{path}.{key}")
        else:
            kwargs[key] = value
    return cls(**kwargs)


def config_from_dict(values: Optional[Dict[str, Any]]) -> Config:
    """Merge a plain dict onto the defaults."""
    return _build(Config, values or {}, 'config')


def load_config(config_path: str) -> Config:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return config_from_dict(yaml.safe_load(f))
