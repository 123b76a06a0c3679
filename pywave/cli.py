"""
pywave command-line interface.

Usage:
    pywave window kaiser 16 --param 8
    pywave info input.wav
    pywave convert input.wav output.wav --bits 24
    pywave tone out.wav --freq 440 --seconds 1.0 --window hann
"""

import argparse
import logging
import math
import sys
from typing import List, Optional

import numpy as np
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .audio import PCM, read_format, read_linear_pcm, write_linear_pcm
from .config import Config, load_config
from .dsp_core import available_windows, get_window
from .exceptions import SemanticError
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

console = Console()


def _window_arg(name: str, param: Optional[float]):
    return name if param is None else (name, param)


def cmd_window(args, config: Config) -> int:
    name = args.name or config.window.name
    length = args.length if args.length is not None else config.window.length
    param = args.param if args.param is not None else (
        config.window.param if args.name is None else None
    )
    w = get_window(_window_arg(name, param), length)

    title = f"{name}({length})" if param is None else f"{name}({length}, {param:g})"
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("n", justify="right", style="cyan")
    table.add_column("w[n]", justify="right")
    for i, value in enumerate(w):
        table.add_row(str(i), repr(float(value)))
    console.print(table)
    return 0


def cmd_info(args, config: Config) -> int:
    fmt = read_format(args.file)
    table = Table(title=str(args.file), box=box.SIMPLE, show_header=False)
    table.add_column("field", style="cyan")
    table.add_column("value", justify="right")
    for key, value in fmt._asdict().items():
        table.add_row(key, str(value))
    console.print(table)
    return 0


def cmd_convert(args, config: Config) -> int:
    bits = args.bits or config.audio.bits_per_sample
    buffer_size = config.audio.io_buffer_size
    pcms = read_linear_pcm(args.input, buffer_size=buffer_size)
    written = write_linear_pcm(args.output, pcms, bits=bits, buffer_size=buffer_size)
    console.print(
        f"[green]Wrote[/green] {args.output}: {len(pcms)}ch {bits}bit, {written} bytes"
    )
    return 0


def cmd_tone(args, config: Config) -> int:
    fs = args.rate or config.audio.sample_rate
    bits = args.bits or config.audio.bits_per_sample
    length = int(round(args.seconds * fs))
    if length < 1:
        raise ValueError("tone must be at least one sample long")

    tone = args.amplitude * np.sin(2 * math.pi * args.freq * np.arange(length) / fs)
    if args.window:
        tone = tone * get_window(_window_arg(args.window, args.param), length)

    pcm = PCM.from_array(tone, fs)
    written = write_linear_pcm(
        args.output, [pcm] * args.channels, bits=bits,
        buffer_size=config.audio.io_buffer_size
    )
    console.print(f"[green]Wrote[/green] {args.output}: {length} samples, {written} bytes")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pywave',
        description='Discrete window functions and linear-PCM WAVE files'
    )
    parser.add_argument('--config', type=str, default=None, help='YAML configuration file')
    parser.add_argument('--log-level', type=str, default=None, help='Override logging level')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('window', help='Print a window function')
    p.add_argument('name', nargs='?', default=None,
                   help=f"Window name ({', '.join(available_windows())})")
    p.add_argument('length', nargs='?', type=int, default=None, help='Window length')
    p.add_argument('--param', type=float, default=None, help='Shape parameter (alpha / sigma)')
    p.set_defaults(func=cmd_window)

    p = sub.add_parser('info', help='Show the format chunk of a WAVE file')
    p.add_argument('file')
    p.set_defaults(func=cmd_info)

    p = sub.add_parser('convert', help='Re-quantize a WAVE file')
    p.add_argument('input')
    p.add_argument('output')
    p.add_argument('--bits', type=int, choices=[8, 16, 24, 32], default=None)
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser('tone', help='Write a (windowed) sine tone')
    p.add_argument('output')
    p.add_argument('--freq', type=float, default=440.0)
    p.add_argument('--seconds', type=float, default=1.0)
    p.add_argument('--amplitude', type=float, default=0.5)
    p.add_argument('--rate', type=int, default=None)
    p.add_argument('--bits', type=int, choices=[8, 16, 24, 32], default=None)
    p.add_argument('--channels', type=int, default=1)
    p.add_argument('--window', type=str, default=None)
    p.add_argument('--param', type=float, default=None)
    p.set_defaults(func=cmd_tone)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else Config()
        setup_logging(
            log_file=config.logging.log_file,
            level=args.log_level or config.logging.level,
        )
        return args.func(args, config)
    except (SemanticError, ValueError, TypeError, OSError) as e:
        logger.debug("command failed", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
