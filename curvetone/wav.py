"""RIFF/WAVE container for mono 16-bit PCM.

The header written by :func:`to_bytes` is always the canonical 44-byte form:

====== ====== ===================================
offset bytes  field
====== ====== ===================================
0      4      ``RIFF``
4      4      36 + data size
8      4      ``WAVE``
12     4      ``fmt ``
16     4      16 (format block size)
20     2      1 (linear PCM)
22     2      channels
24     4      sample rate
28     4      byte rate
32     2      block align
34     2      bits per sample
36     4      ``data``
40     4      data size
====== ====== ===================================

All integers are little-endian.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import numpy as np
import soundfile as sf  # type: ignore[import]

from .errors import ContainerError, ParameterRangeError
from .oscillator import PcmArray

SAMPLE_RATE = 44_100
NUM_CHANNELS = 1
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
PCM_FORMAT = 1
FMT_BLOCK_SIZE = 16
HEADER_SIZE = 44

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_U32_MAX = 2**32 - 1
MAX_SAMPLE_RATE = _U32_MAX // (NUM_CHANNELS * BYTES_PER_SAMPLE)
# Largest buffer whose RIFF size field still fits in 32 bits.
MAX_SAMPLES = (_U32_MAX - 36) // BYTES_PER_SAMPLE

PcmInput = PcmArray | Sequence[int]


@dataclass(frozen=True, slots=True)
class WavHeader:
    file_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int

    @property
    def frames(self) -> int:
        return self.data_size // self.block_align if self.block_align else 0


@dataclass(frozen=True, slots=True)
class WavInfo:
    sample_rate: int
    channels: int
    frames: int
    duration: float
    subtype: str


def _as_pcm(samples: PcmInput) -> PcmArray:
    array = np.asarray(samples)
    if array.ndim != 1:
        raise ContainerError(f"Expected a mono sample buffer, got shape {array.shape}")
    if array.size == 0:
        return np.zeros(0, dtype="<i2")
    if array.dtype.kind not in "iu":
        raise ContainerError(f"Expected integer PCM samples, got dtype {array.dtype}")
    low, high = int(array.min()), int(array.max())
    if low < -(2**15) or high > 2**15 - 1:
        raise ContainerError(f"PCM samples must fit in 16 bits, got range [{low}, {high}]")
    return array.astype("<i2", copy=False)


def to_bytes(samples: PcmInput, sample_rate: int) -> bytes:
    """Encode a mono 16-bit sample buffer as a complete WAV file."""

    if sample_rate <= 0:
        raise ParameterRangeError(f"Sample rate must be greater than 0, got {sample_rate}")
    if sample_rate > MAX_SAMPLE_RATE:
        raise ParameterRangeError(
            f"Sample rate must be at most {MAX_SAMPLE_RATE}, got {sample_rate}"
        )
    pcm = _as_pcm(samples)

    byte_rate = sample_rate * NUM_CHANNELS * BYTES_PER_SAMPLE
    block_align = NUM_CHANNELS * BYTES_PER_SAMPLE
    data_size = pcm.size * BYTES_PER_SAMPLE
    if pcm.size > MAX_SAMPLES:
        raise ContainerError(f"Sample buffer too large for a WAV file: {pcm.size} samples")
    file_size = 36 + data_size

    header = _HEADER.pack(
        b"RIFF",
        file_size,
        b"WAVE",
        b"fmt ",
        FMT_BLOCK_SIZE,
        PCM_FORMAT,
        NUM_CHANNELS,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )
    return header + pcm.tobytes()


def parse_header(data: bytes) -> WavHeader:
    if len(data) < HEADER_SIZE:
        raise ContainerError(f"WAV header needs {HEADER_SIZE} bytes, got {len(data)}")
    (
        riff,
        file_size,
        wave,
        fmt,
        fmt_size,
        audio_format,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        data_size,
    ) = _HEADER.unpack_from(data)
    if riff != b"RIFF" or wave != b"WAVE":
        raise ContainerError("Missing RIFF/WAVE master header")
    if fmt != b"fmt " or fmt_size != FMT_BLOCK_SIZE:
        raise ContainerError("Expected a 16-byte fmt block directly after the master header")
    if data_tag != b"data":
        raise ContainerError("Expected the data block directly after the fmt block")
    return WavHeader(
        file_size=file_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_size,
    )


def write_output(path: str | Path, data: bytes) -> Path:
    """Write rendered bytes to ``path``, creating missing parent directories."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    return target


def write_wav(path: str | Path, samples: PcmInput, *, sample_rate: int = SAMPLE_RATE) -> Path:
    return write_output(path, to_bytes(samples, sample_rate))


def read_wav(path: str | Path) -> tuple[PcmArray, int]:
    """Decode a WAV file into int16 samples and its sample rate."""

    read_fn = getattr(sf, "read", None)
    assert callable(read_fn)
    data, sample_rate = cast(tuple[Any, int], read_fn(str(path), dtype="int16"))
    return np.asarray(data, dtype=np.int16), int(sample_rate)


def wav_info(path: str | Path) -> WavInfo:
    info = sf.info(str(path))  # type: ignore[reportUnknownMemberType]
    return WavInfo(
        sample_rate=int(info.samplerate),
        channels=int(info.channels),
        frames=int(info.frames),
        duration=float(info.duration),
        subtype=str(info.subtype),
    )
