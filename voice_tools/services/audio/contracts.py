from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple


@dataclass(frozen=True)
class WordTiming:
    text: str
    start: float
    end: float


@dataclass(frozen=True)
class TranscriptionResult:
    """Recognised text for one transcription attempt, with optional word timings."""

    text: str
    words: Optional[Tuple[WordTiming, ...]] = None

    def to_dict(self, include_words: bool = False) -> dict:
        payload: dict = {"text": self.text}
        if include_words and self.words is not None:
            payload["words"] = [
                {"word": word.text, "start": word.start, "end": word.end} for word in self.words
            ]
        return payload


class RecorderPort(Protocol):
    is_recording: bool

    def start(self) -> "RecorderPort":
        ...

    def stop(self) -> bytes:
        ...


class TranscriberPort(Protocol):
    def transcribe(self, pcm: bytes) -> TranscriptionResult:
        ...


class SpeechSynthesisPort(Protocol):
    def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        stability: float = 0.5,
        similarity_boost: float = 0.75,
    ) -> bytes:
        ...


__all__ = [
    "WordTiming",
    "TranscriptionResult",
    "RecorderPort",
    "TranscriberPort",
    "SpeechSynthesisPort",
]
