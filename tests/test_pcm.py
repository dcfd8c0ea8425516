from __future__ import annotations

import struct

import numpy as np
import pytest

from voice_tools.platform.pcm import (
    WAV_HEADER_SIZE,
    frame_wav,
    pcm_duration,
    pcm_level,
    save_audio,
)

HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def test_frame_wav_header_layout_mono_16k():
    pcm = b"\x01\x02" * 10

    wav = frame_wav(pcm, 16000, 1)

    assert len(wav) == WAV_HEADER_SIZE + len(pcm)
    fields = HEADER.unpack(wav[:WAV_HEADER_SIZE])
    assert fields == (
        b"RIFF",
        36 + len(pcm),
        b"WAVE",
        b"fmt ",
        16,
        1,
        1,
        16000,
        32000,
        2,
        16,
        b"data",
        len(pcm),
    )
    assert wav[WAV_HEADER_SIZE:] == pcm


def test_frame_wav_stereo_rates():
    wav = frame_wav(b"\x00" * 8, sample_rate=44100, channels=2)
    fields = HEADER.unpack(wav[:WAV_HEADER_SIZE])
    assert fields[6] == 2
    assert fields[7] == 44100
    assert fields[8] == 176400
    assert fields[9] == 4


def test_frame_wav_empty_pcm_is_header_only():
    wav = frame_wav(b"")
    assert len(wav) == WAV_HEADER_SIZE
    fields = HEADER.unpack(wav)
    assert fields[1] == 36
    assert fields[-1] == 0


def test_frame_wav_accepts_odd_length_and_is_deterministic():
    pcm = b"\x01\x02\x03"
    assert frame_wav(pcm) == frame_wav(pcm)
    assert frame_wav(pcm).endswith(pcm)


def test_pcm_duration():
    assert pcm_duration(b"\x00" * 32000, 16000, 1) == pytest.approx(1.0)
    assert pcm_duration(b"\x00" * 32000, 16000, 2) == pytest.approx(0.5)
    assert pcm_duration(b"", 16000, 1) == 0.0


def test_pcm_level_distinguishes_silence_from_signal():
    assert pcm_level(b"") == 0.0
    assert pcm_level(b"\x00\x00" * 100) == 0.0
    loud = np.array([32767, -32768] * 50, dtype="<i2").tobytes()
    assert pcm_level(loud) == pytest.approx(1.0, abs=1e-3)


def test_save_audio_writes_bytes(tmp_path):
    target = tmp_path / "out.wav"
    path = save_audio(str(target), b"RIFF")
    assert path == target
    assert target.read_bytes() == b"RIFF"
