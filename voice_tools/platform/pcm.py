"""Raw PCM helpers: WAV framing, sample conversion and level estimates."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Union

import numpy as np

DEFAULT_SAMPLE_RATE = 16000
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
WAV_HEADER_SIZE = 44

# RIFF, size, WAVE, "fmt ", fmt size, format tag, channels, rate,
# byte rate, block align, bits per sample, "data", data size
_WAV_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def frame_wav(pcm: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE, channels: int = 1) -> bytes:
    """
    Wrap signed 16-bit little-endian PCM in a canonical 44-byte WAV header.

    The PCM bytes are copied verbatim after the header. Any byte sequence is
    accepted, including an empty one (which yields a valid, silent file).

    Args:
        pcm: Raw sample bytes.
        sample_rate: Samples per second per channel.
        channels: Number of interleaved channels.

    Returns:
        The WAV file contents.
    """
    block_align = channels * BYTES_PER_SAMPLE
    byte_rate = sample_rate * block_align
    data_size = len(pcm)

    header = _WAV_HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        1,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )
    return header + bytes(pcm)


def pcm_duration(pcm: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE, channels: int = 1) -> float:
    """Length of the capture in seconds."""
    frame_size = channels * BYTES_PER_SAMPLE
    if sample_rate <= 0 or frame_size <= 0:
        return 0.0
    return (len(pcm) // frame_size) / float(sample_rate)


def pcm_level(pcm: bytes) -> float:
    """RMS level of 16-bit PCM normalised to [0, 1]."""
    usable = len(pcm) - (len(pcm) % BYTES_PER_SAMPLE)
    if usable <= 0:
        return 0.0
    samples = np.frombuffer(pcm[:usable], dtype="<i2").astype(np.float64)
    rms = float(np.sqrt(np.mean(samples * samples)))
    return min(rms / 32768.0, 1.0)


def save_audio(path: Union[str, Path], data: bytes) -> Path:
    target = Path(path)
    target.write_bytes(data)
    return target


__all__ = [
    "DEFAULT_SAMPLE_RATE",
    "WAV_HEADER_SIZE",
    "frame_wav",
    "pcm_duration",
    "pcm_level",
    "save_audio",
]
