"""
RIFF/WAVE linear-PCM codec.

Reads and writes canonical little-endian WAVE files (format tag 1) with
8, 16, 24 or 32 bits per sample and any number of channels. Each channel
is exchanged as one PCM buffer.

Layout written:
    offset  size  field
         0     4  "RIFF"
         4     4  file size - 8
         8     4  "WAVE"
        12     4  "fmt "
        16     4  16
        20     2  format tag (1)
        22     2  channels
        24     4  sample rate
        28     4  byte rate = sample rate * block size
        32     2  block size = channels * bits / 8
        34     2  bits per sample
        36     4  "data"
        40     4  data size
        44     -  interleaved samples (+ one pad byte if data size is odd)

Integer <-> float mapping:
    8-bit   offset binary, (u - 0x80) / 128
    16-bit  signed, s / 32768
    24-bit  signed (sign-extended), s / 8388608
    32-bit  signed, s / 2147483648
Writing reverses the mapping, clips to the integer range, truncates toward
zero and turns NaN into 0.

For detail, see:
https://web.archive.org/web/20080113195252/http://www.borg.com/~jglatt/tech/wave.htm
"""

import logging
import os
import struct
from typing import BinaryIO, List, NamedTuple, Sequence, Union

import numpy as np

from ..exceptions import SemanticError
from .pcm import PCM

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = "1.0.0"

WAVE_FORMAT_PCM = 1
SUPPORTED_BITS = (8, 16, 24, 32)
BUFFER_SIZE = 0x1000
FMT_CHUNK_SIZE = 16
HEADER_SIZE = 44

_RIFF_HEADER = struct.Struct('<4sI4s')
_CHUNK_HEADER = struct.Struct('<4sI')
_FMT_BODY = struct.Struct('<HHIIHH')
_CANONICAL_HEADER = struct.Struct('<4sI4s4sIHHIIHH4sI')

# full-scale value and clip range per bit depth
_SCALE = {
    8: (0x80, -0x80, 0x7F),
    16: (0x8000, -0x8000, 0x7FFF),
    24: (0x800000, -0x800000, 0x7FFFFF),
    32: (0x80000000, -0x80000000, 0x7FFFFFFF),
}

PathOrFile = Union[str, os.PathLike, BinaryIO]


class FormatChunk(NamedTuple):
    """Contents of the 'fmt ' chunk."""
    format_tag: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_size: int
    bits_per_sample: int


def _read_exact(f: BinaryIO, size: int) -> bytes:
    buf = f.read(size)
    if len(buf) != size:
        raise SemanticError(f"unexpected end of file: wanted {size} bytes, got {len(buf)}")
    return buf


def _must_be_nonzero(name: str, value: int):
    if not value:
        raise SemanticError(f"'{name}' must be non-zero")


def _read_header(f: BinaryIO):
    """Parse the RIFF header and 'fmt ' chunk, position ``f`` at the data."""
    riff_id, riff_size, wave_id = _RIFF_HEADER.unpack(_read_exact(f, _RIFF_HEADER.size))
    if riff_id != b'RIFF':
        raise SemanticError(f"unknown RIFF chunk ID: {riff_id!r}")
    if wave_id != b'WAVE':
        raise SemanticError(f"unknown file format type: {wave_id!r}")

    chunk_id, fmt_size = _CHUNK_HEADER.unpack(_read_exact(f, _CHUNK_HEADER.size))
    if chunk_id != b'fmt ':
        raise SemanticError("no format chunk")
    if fmt_size < FMT_CHUNK_SIZE:
        raise SemanticError(f"format chunk too short: {fmt_size} bytes")

    fmt = FormatChunk(*_FMT_BODY.unpack(_read_exact(f, _FMT_BODY.size)))
    # WAVEFORMATEX cbSize and friends, plus the pad byte of an odd chunk
    _read_exact(f, fmt_size - FMT_CHUNK_SIZE + (fmt_size & 1))

    if fmt.format_tag != WAVE_FORMAT_PCM:
        raise SemanticError(f"not a linear PCM (format tag {fmt.format_tag})")
    _must_be_nonzero('channels', fmt.channels)
    _must_be_nonzero('samples_per_sec', fmt.sample_rate)
    _must_be_nonzero('bytes_per_sec', fmt.byte_rate)
    _must_be_nonzero('block_size', fmt.block_size)
    _must_be_nonzero('bits_per_sample', fmt.bits_per_sample)
    if fmt.bits_per_sample // 8 * fmt.channels != fmt.block_size:
        raise SemanticError("'block_size' mismatch")
    if fmt.sample_rate * fmt.block_size != fmt.byte_rate:
        raise SemanticError("'bytes_per_sec' mismatch")
    if fmt.bits_per_sample not in SUPPORTED_BITS:
        raise SemanticError(
            f"unrecognized (or unsupported) bits per sample: {fmt.bits_per_sample} "
            f"(for wave format type: {fmt.format_tag})"
        )
    return riff_size, fmt


def _seek_data(f: BinaryIO) -> int:
    """Skip chunks until 'data'; return its size."""
    while True:
        header = f.read(_CHUNK_HEADER.size)
        if len(header) < _CHUNK_HEADER.size:
            raise SemanticError("no data chunk")
        chunk_id, size = _CHUNK_HEADER.unpack(header)
        if chunk_id == b'data':
            return size
        logger.debug(f"skipping chunk {chunk_id!r} ({size} bytes)")
        _read_exact(f, size + (size & 1))


def decode_samples(raw: bytes, bits: int) -> np.ndarray:
    """Convert little-endian integer samples to floats in [-1, 1)."""
    if bits == 8:
        data = np.frombuffer(raw, dtype=np.uint8).astype(np.int32) - 0x80
    elif bits == 16:
        data = np.frombuffer(raw, dtype='<i2')
    elif bits == 24:
        b = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        data = b[:, 0] | (b[:, 1] << 8) | (b[:, 2] << 16)
        data = np.where(data & 0x800000, data - 0x1000000, data)
    elif bits == 32:
        data = np.frombuffer(raw, dtype='<i4')
    else:
        raise SemanticError(f"unrecognized (or unsupported) bits per sample: {bits}")
    return data.astype(np.float64) / _SCALE[bits][0]


def encode_samples(samples: np.ndarray, bits: int) -> bytes:
    """Convert floats to little-endian integer samples (clip, NaN -> 0)."""
    if bits not in _SCALE:
        raise SemanticError(f"unrecognized (or unsupported) bits per sample: {bits}")
    rate, lo, hi = _SCALE[bits]
    x = np.asarray(samples, dtype=np.float64)
    x = np.where(np.isnan(x), 0.0, x)
    digitized = np.clip(x * rate, lo, hi)

    if bits == 8:
        return np.trunc(digitized + 0x80).astype(np.uint8).tobytes()
    if bits == 16:
        return np.trunc(digitized).astype('<i2').tobytes()
    if bits == 24:
        as_i4 = np.trunc(digitized).astype('<i4')
        return as_i4.view(np.uint8).reshape(-1, 4)[:, :3].tobytes()
    return np.trunc(digitized).astype('<i4').tobytes()


def _open(file: PathOrFile, mode: str):
    if hasattr(file, 'read') or hasattr(file, 'write'):
        return file, False
    return open(file, mode), True


def read_format(file: PathOrFile) -> FormatChunk:
    """Read only the format chunk of a WAVE file."""
    f, owned = _open(file, 'rb')
    try:
        return _read_header(f)[1]
    finally:
        if owned:
            f.close()


def read_linear_pcm(file: PathOrFile, buffer_size: int = BUFFER_SIZE) -> List[PCM]:
    """
    Read a linear-PCM WAVE file.

    Args:
        file: Path or binary file object
        buffer_size: Bytes read per I/O call (rounded down to whole frames)

    Returns:
        One PCM per channel, all with the file's sample rate

    Raises:
        SemanticError: Malformed or unsupported file
        OSError: I/O failure
    """
    f, owned = _open(file, 'rb')
    try:
        _, fmt = _read_header(f)
        data_size = _seek_data(f)
        if data_size % fmt.block_size != 0:
            raise SemanticError("'data_chunk_size' is not a multiple of 'block_size'")

        length = data_size // fmt.block_size
        logger.debug(
            f"reading {fmt.channels}ch {fmt.bits_per_sample}bit {fmt.sample_rate}Hz, "
            f"{length} frames"
        )

        pcms = [PCM(length, fmt.sample_rate) for _ in range(fmt.channels)]
        step = max(buffer_size // fmt.block_size, 1) * fmt.block_size
        idx = 0
        for offset in range(0, data_size, step):
            raw = _read_exact(f, min(step, data_size - offset))
            frames = decode_samples(raw, fmt.bits_per_sample).reshape(-1, fmt.channels)
            for ch, pcm in enumerate(pcms):
                pcm.data[idx:idx + len(frames)] = frames[:, ch]
            idx += len(frames)
        return pcms
    finally:
        if owned:
            f.close()


def write_linear_pcm(
    file: PathOrFile,
    pcms: Sequence[PCM],
    bits: int = 16,
    buffer_size: int = BUFFER_SIZE
) -> int:
    """
    Write PCM buffers as an interleaved linear-PCM WAVE file.

    Args:
        file: Path or binary file object
        pcms: One PCM per channel; all must share sample rate and length
        bits: 8, 16, 24 or 32
        buffer_size: Bytes per write call (rounded down to whole frames)

    Returns:
        Total number of bytes written, header and pad byte included

    Raises:
        TypeError: An element is not a PCM
        ValueError: No channels, too many channels, or a header field
            (block size, sample rate, byte rate, file size) out of range
        SemanticError: Unsupported bit depth, or channels differ in
            sample rate or length
    """
    pcms = list(pcms)
    for p in pcms:
        if not isinstance(p, PCM):
            raise TypeError(f"not a PCM: {type(p).__name__}")
    if not pcms:
        raise ValueError("at least one PCM channel is required")
    if len(pcms) > 0xFFFF:
        raise ValueError("too many PCM channels")
    if bits not in SUPPORTED_BITS:
        raise SemanticError(
            f"unrecognized (or unsupported) bits per sample: {bits} "
            f"(for wave format type: {WAVE_FORMAT_PCM})"
        )

    fs = pcms[0].fs
    length = len(pcms[0])
    for p in pcms[1:]:
        if p.fs != fs:
            raise SemanticError("channels with different sampling frequencies are not supported")
        if len(p) != length:
            raise SemanticError("channels with different lengths are not supported")

    channels = len(pcms)
    block_size = bits // 8 * channels
    data_size = length * block_size
    pad = data_size & 1
    riff_size = 36 + data_size + pad
    # header field widths: block size is 16-bit, rates and sizes are 32-bit
    if block_size > 0xFFFF:
        raise ValueError(f"block size too large for a WAVE header: {block_size} bytes")
    if fs > 0xFFFFFFFF:
        raise ValueError(f"sampling frequency too large for a WAVE header: {fs}")
    if fs * block_size > 0xFFFFFFFF:
        raise ValueError(f"byte rate too large for a WAVE header: {fs * block_size}")
    if riff_size > 0xFFFFFFFF:
        raise ValueError(f"data too large for a RIFF file: {data_size} bytes")

    header = _CANONICAL_HEADER.pack(
        b'RIFF', riff_size, b'WAVE',
        b'fmt ', FMT_CHUNK_SIZE,
        WAVE_FORMAT_PCM, channels, fs, fs * block_size, block_size, bits,
        b'data', data_size,
    )

    # +1.0 itself has no integer code and clips to the largest one
    overdriven = sum(
        int(np.count_nonzero((p.data >= 1.0) | (p.data < -1.0))) for p in pcms
    )
    if overdriven:
        logger.warning(f"{overdriven} samples outside [-1.0, 1.0) will be clipped")
    logger.debug(f"writing {channels}ch {bits}bit {fs}Hz, {length} frames")

    f, owned = _open(file, 'wb')
    written = 0
    try:
        written += f.write(header)
        matrix = np.column_stack([p.data for p in pcms]) if length else np.zeros((0, channels))
        frames_per_step = max(buffer_size // block_size, 1)
        for start in range(0, length, frames_per_step):
            chunk = matrix[start:start + frames_per_step]
            written += f.write(encode_samples(chunk.ravel(), bits))
        if pad:
            written += f.write(b'\x00')
    finally:
        if owned:
            f.close()
    return written
