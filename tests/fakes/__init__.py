"""
Utility fakes for adapter and service-layer tests.
"""

from .audio import (
    ChunkedStream,
    FakeElevenLabsClient,
    FakePopen,
    FakeProcess,
    FakeRecorder,
    FakeSpeechSynthesisPort,
    FakeTranscriber,
    FakeWhisperRunner,
    PlainStream,
)

__all__ = [
    "ChunkedStream",
    "FakeElevenLabsClient",
    "FakePopen",
    "FakeProcess",
    "FakeRecorder",
    "FakeSpeechSynthesisPort",
    "FakeTranscriber",
    "FakeWhisperRunner",
    "PlainStream",
]
