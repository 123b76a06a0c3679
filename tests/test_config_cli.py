"""
Unit Tests for Configuration, Logging and the CLI

Run:
    pytest tests/test_config_cli.py -v
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging

import numpy as np
import pytest
import yaml

from pywave.audio import PCM, read_format, read_linear_pcm, write_linear_pcm
from pywave.cli import main
from pywave.config import AudioConfig, Config, WindowConfig, config_from_dict, load_config
from pywave.utils import get_logger, setup_logging


def _write_yaml(path, values):
    with open(path, 'w') as f:
        yaml.safe_dump(values, f)
    return str(path)


class TestConfig:
    """Test suite for configuration loading."""

    def test_defaults(self):
        config = Config()
        assert config.audio.sample_rate == 48000
        assert config.audio.bits_per_sample == 16
        assert config.audio.io_buffer_size == 0x1000
        assert config.window.name == 'hann'
        assert config.logging.level == 'INFO'

    def test_partial_override(self):
        config = config_from_dict({'audio': {'bits_per_sample': 24}})
        assert config.audio.bits_per_sample == 24
        assert config.audio.sample_rate == 48000
        assert config.window == WindowConfig()

    def test_load_yaml(self, tmp_path):
        path = _write_yaml(tmp_path / 'config.yaml', {
            'audio': {'sample_rate': 44100},
            'window': {'name': 'kaiser', 'length': 64, 'param': 8.0},
            'logging': {'level': 'DEBUG'},
        })
        config = load_config(path)
        assert config.audio.sample_rate == 44100
        assert config.window == WindowConfig('kaiser', 64, 8.0)
        assert config.logging.level == 'DEBUG'

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('')
        assert load_config(str(path)) == Config()

    def test_empty_section(self, tmp_path):
        path = tmp_path / 'section.yaml'
        path.write_text('audio:\n')
        assert load_config(str(path)).audio == AudioConfig()

    def test_unknown_keys(self):
        with pytest.raises(ValueError, match="unknown keys"):
            config_from_dict({'video': {}})
        with pytest.raises(ValueError, match="config.audio"):
            config_from_dict({'audio': {'channels': 2}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            config_from_dict({'audio': 5})

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            AudioConfig(bits_per_sample=12)
        with pytest.raises(ValueError):
            AudioConfig(sample_rate=0)
        with pytest.raises(ValueError):
            AudioConfig(io_buffer_size=0)
        with pytest.raises(ValueError, match="Unknown window"):
            WindowConfig(name='tukey')
        with pytest.raises(ValueError):
            WindowConfig(length=0)


class TestLogging:
    """Test suite for logging setup."""

    def teardown_method(self):
        setup_logging(level=logging.WARNING)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / 'logs' / 'pywave.log'
        logger = setup_logging(log_file=str(log_file), level='DEBUG')
        get_logger('pywave.test').debug('hello from the test')
        for handler in logger.handlers:
            handler.flush()

        assert logger.name == 'pywave'
        assert logger.level == logging.DEBUG
        assert 'hello from the test' in log_file.read_text(encoding='utf-8')

    def test_no_duplicate_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_bad_level(self):
        with pytest.raises(ValueError):
            setup_logging(level='LOUD')


class TestCLI:
    """Test suite for the command-line interface."""

    def teardown_method(self):
        setup_logging(level=logging.WARNING)

    def test_window(self, capsys):
        assert main(['window', 'hann', '5']) == 0
        out = capsys.readouterr().out
        assert 'hann(5)' in out
        assert '1.0' in out

    def test_window_with_param(self, capsys):
        assert main(['window', 'kaiser', '8', '--param', '8']) == 0
        assert 'kaiser(8, 8)' in capsys.readouterr().out

    def test_window_from_config(self, tmp_path, capsys):
        path = _write_yaml(tmp_path / 'c.yaml', {'window': {'name': 'kbd', 'length': 8, 'param': 4.0}})
        assert main(['--config', path, 'window']) == 0
        assert 'kbd(8, 4)' in capsys.readouterr().out

    def test_window_errors(self, capsys):
        assert main(['window', 'tukey', '8']) == 1
        assert 'Error' in capsys.readouterr().out
        assert main(['window', 'kbd', '8']) == 1
        assert main(['window', 'hann', '0']) == 1

    def test_tone_info_convert(self, tmp_path, capsys):
        tone = tmp_path / 'tone.wav'
        assert main([
            'tone', str(tone), '--seconds', '0.01', '--rate', '8000',
            '--bits', '24', '--channels', '2', '--window', 'hann',
        ]) == 0
        assert read_format(tone).channels == 2
        left, right = read_linear_pcm(tone)
        assert len(left) == 80 and left.fs == 8000
        assert left == right
        assert left[0] == 0.0
        assert np.max(np.abs(left.data)) <= 0.5

        assert main(['info', str(tone)]) == 0
        out = capsys.readouterr().out
        assert 'bits_per_sample' in out and '24' in out

        converted = tmp_path / 'converted.wav'
        assert main(['convert', str(tone), str(converted), '--bits', '8']) == 0
        fmt = read_format(converted)
        assert fmt.bits_per_sample == 8
        assert fmt.sample_rate == 8000

    def test_defaults_from_config(self, tmp_path):
        path = _write_yaml(tmp_path / 'c.yaml', {'audio': {'sample_rate': 16000, 'bits_per_sample': 32}})
        tone = tmp_path / 'tone.wav'
        assert main(['--config', path, 'tone', str(tone), '--seconds', '0.5']) == 0
        fmt = read_format(tone)
        assert (fmt.sample_rate, fmt.bits_per_sample) == (16000, 32)

    def test_file_errors(self, tmp_path, capsys):
        assert main(['info', str(tmp_path / 'missing.wav')]) == 1

        junk = tmp_path / 'junk.wav'
        junk.write_bytes(b'not a wave file at all, definitely not')
        assert main(['info', str(junk)]) == 1
        assert 'RIFF' in capsys.readouterr().out

    def test_bad_config(self, tmp_path):
        path = _write_yaml(tmp_path / 'c.yaml', {'audio': {'bits_per_sample': 12}})
        assert main(['--config', path, 'window']) == 1

    def test_convert_keeps_samples(self, tmp_path):
        src = tmp_path / 'src.wav'
        write_linear_pcm(src, [PCM.from_array([0.5, -0.25, 0.0], 8000)], bits=16)
        dst = tmp_path / 'dst.wav'
        assert main(['convert', str(src), str(dst)]) == 0
        assert read_linear_pcm(dst) == read_linear_pcm(src)

    def test_tone_too_many_channels(self, tmp_path, capsys):
        """A header that cannot be encoded is reported, not raised."""
        tone = tmp_path / 'wide.wav'
        assert main([
            'tone', str(tone), '--seconds', '0.0001', '--rate', '48000',
            '--bits', '32', '--channels', '20000',
        ]) == 1
        assert 'block size' in capsys.readouterr().out
        assert not tone.exists()
