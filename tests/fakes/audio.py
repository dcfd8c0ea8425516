from __future__ import annotations

import io
import os
import subprocess
import threading
from types import SimpleNamespace
from typing import Iterable, List, Optional, Sequence, Union

from voice_tools.errors import NoAudioCaptured
from voice_tools.services.audio.contracts import TranscriptionResult


class ChunkedStream:
    """Readable pipe stand-in that hands out one predefined chunk per read."""

    def __init__(self, chunks: Iterable[bytes] = (), error: Optional[Exception] = None) -> None:
        self._chunks = list(chunks)
        self.error = error
        self.reads = 0

    def read1(self, size: int = -1) -> bytes:
        self.reads += 1
        if self._chunks:
            return self._chunks.pop(0)
        if self.error is not None:
            raise self.error
        return b""

    def read(self, size: int = -1) -> bytes:
        return self.read1(size)


class PlainStream:
    """Pipe stand-in exposing only ``read``, like a raw unbuffered file."""

    def __init__(self, chunks: Iterable[bytes] = ()) -> None:
        self._chunks = list(chunks)

    def read(self, size: int = -1) -> bytes:
        return self._chunks.pop(0) if self._chunks else b""


class FakeProcess:
    def __init__(
        self,
        chunks: Iterable[bytes] = (),
        stderr: bytes = b"",
        ignore_terminate: bool = False,
        stdout=None,
    ) -> None:
        self.stdout = stdout if stdout is not None else ChunkedStream(chunks)
        self.stderr = io.BytesIO(stderr)
        self.ignore_terminate = ignore_terminate
        self.terminated = False
        self.killed = False
        self.returncode: Optional[int] = None

    def terminate(self) -> None:
        self.terminated = True
        if not self.ignore_terminate:
            self.returncode = -15

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    def poll(self) -> Optional[int]:
        return self.returncode

    def wait(self, timeout: Optional[float] = None) -> int:
        if self.returncode is None:
            raise subprocess.TimeoutExpired("rec", timeout)
        return self.returncode


class FakePopen:
    """Records the launch request and returns a prepared process (or raises)."""

    def __init__(self, process: Optional[FakeProcess] = None, error: Optional[Exception] = None) -> None:
        self.process = process or FakeProcess()
        self.error = error
        self.calls: List[tuple] = []

    def __call__(self, command, **kwargs):
        self.calls.append((list(command), kwargs))
        if self.error is not None:
            raise self.error
        return self.process


class FakeWhisperRunner:
    """
    Stand-in for ``subprocess.run`` that inspects the WAV file handed to whisper-cli.
    """

    def __init__(
        self,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        error: Optional[Exception] = None,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.error = error
        self.commands: List[List[str]] = []
        self.kwargs: List[dict] = []
        self.wav_paths: List[str] = []
        self.wav_contents: List[bytes] = []

    def __call__(self, command: Sequence[str], **kwargs):
        command = list(command)
        self.commands.append(command)
        self.kwargs.append(kwargs)
        wav_path = command[command.index("-f") + 1]
        self.wav_paths.append(wav_path)
        with open(wav_path, "rb") as handle:
            self.wav_contents.append(handle.read())
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, self.returncode, stdout=self.stdout, stderr=self.stderr)

    def files_removed(self) -> bool:
        return all(not os.path.exists(path) for path in self.wav_paths)


Outcome = Union[TranscriptionResult, Exception]


class FakeTranscriber:
    def __init__(self, outcomes: Iterable[Outcome] = ()) -> None:
        self._outcomes = list(outcomes) or [TranscriptionResult(text="hello world")]
        self.calls: List[bytes] = []
        self._lock = threading.Lock()

    def transcribe(self, pcm: bytes) -> TranscriptionResult:
        with self._lock:
            self.calls.append(pcm)
            index = min(len(self.calls), len(self._outcomes)) - 1
        outcome = self._outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeRecorder:
    def __init__(self, audio: bytes = b"\x01\x00" * 1600, error: Optional[Exception] = None) -> None:
        self.audio = audio
        self.error = error
        self.is_recording = False
        self.start_calls = 0
        self.stop_calls = 0

    def start(self) -> "FakeRecorder":
        self.start_calls += 1
        self.is_recording = True
        return self

    def stop(self) -> bytes:
        self.stop_calls += 1
        self.is_recording = False
        if self.error is not None:
            raise self.error
        if not self.audio:
            raise NoAudioCaptured()
        return self.audio


class FakeSpeechSynthesisPort:
    def __init__(self, audio: bytes = b"ID3fake-mp3", error: Optional[Exception] = None) -> None:
        self.audio = audio
        self.error = error
        self.requests: List[dict] = []

    def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        stability: float = 0.5,
        similarity_boost: float = 0.75,
    ) -> bytes:
        self.requests.append(
            {
                "text": text,
                "voice_id": voice_id,
                "model_id": model_id,
                "stability": stability,
                "similarity_boost": similarity_boost,
            }
        )
        if self.error is not None:
            raise self.error
        return self.audio


class _FakeSpeechToTextResource:
    def __init__(self, response=None, error: Optional[Exception] = None) -> None:
        self.response = response if response is not None else SimpleNamespace(text="hello", words=None)
        self.error = error
        self.requests: List[dict] = []

    def convert(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class _FakeTextToSpeechResource:
    def __init__(self, chunks: Iterable[bytes] = (b"ID3", b"audio"), error: Optional[Exception] = None) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.requests: List[tuple] = []

    def convert(self, voice_id, **kwargs):
        self.requests.append((voice_id, kwargs))
        if self.error is not None:
            raise self.error
        return iter(self.chunks)


class FakeElevenLabsClient:
    def __init__(
        self,
        *,
        stt_response=None,
        stt_error: Optional[Exception] = None,
        tts_chunks: Iterable[bytes] = (b"ID3", b"audio"),
        tts_error: Optional[Exception] = None,
    ) -> None:
        self.speech_to_text = _FakeSpeechToTextResource(stt_response, stt_error)
        self.text_to_speech = _FakeTextToSpeechResource(tts_chunks, tts_error)
