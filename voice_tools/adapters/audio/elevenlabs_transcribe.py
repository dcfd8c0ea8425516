from __future__ import annotations

from typing import Optional

from voice_tools._optional import require_extra
from voice_tools.audio import DEFAULT_STT_MODEL_ID
from voice_tools.errors import MissingCredentialError, TranscriptionFailed
from voice_tools.platform.config import ELEVENLABS_API_KEY, read_api_key
from voice_tools.platform.logging import create_logger
from voice_tools.platform.pcm import frame_wav
from voice_tools.services.audio.contracts import TranscriptionResult, WordTiming

try:  # pragma: no cover - optional ElevenLabs dependency guard
    from elevenlabs.client import ElevenLabs
except ImportError:  # pragma: no cover
    require_extra("ElevenLabsTranscriber")


class ElevenLabsTranscriber:
    """
    Adapter for ElevenLabs speech-to-text.

    PCM is framed as a 16-bit WAV file and uploaded as the ``file`` part of a
    single request; the recognised text is returned verbatim.
    """

    def __init__(
        self,
        client: Optional[ElevenLabs] = None,
        *,
        api_key: Optional[str] = None,
        model_id: str = DEFAULT_STT_MODEL_ID,
        language: Optional[str] = None,
        sample_rate: int = 16000,
        channels: int = 1,
        timeout: Optional[float] = 60.0,
        logger=None,
    ) -> None:
        if client is None:
            api_key = api_key or read_api_key(ELEVENLABS_API_KEY)
            if not api_key:
                raise MissingCredentialError(ELEVENLABS_API_KEY)
            self.client = ElevenLabs(api_key=api_key)
        else:
            self.client = client

        self.model_id = model_id
        self.language = language
        self.sample_rate = sample_rate
        self.channels = channels
        self.timeout = timeout
        self.logger = logger if logger else create_logger(__name__)

    def transcribe(self, pcm: bytes) -> TranscriptionResult:
        wav_bytes = frame_wav(pcm, self.sample_rate, self.channels)
        request = {
            "file": ("audio.wav", wav_bytes, "audio/wav"),
            "model_id": self.model_id,
        }
        if self.language:
            request["language_code"] = self.language
        if self.timeout:
            request["request_options"] = {"timeout_in_seconds": int(self.timeout)}

        self.logger.debug("Uploading %d bytes of WAV audio (model %s)", len(wav_bytes), self.model_id)
        try:
            response = self.client.speech_to_text.convert(**request)
        except Exception as exc:
            raise TranscriptionFailed(f"Transcription failed: {exc}") from exc

        return TranscriptionResult(text=response.text, words=self._word_timings(response))

    @staticmethod
    def _word_timings(response) -> Optional[tuple[WordTiming, ...]]:
        words = getattr(response, "words", None)
        if not words:
            return None
        timings = []
        for word in words:
            if getattr(word, "type", "word") != "word":
                continue
            timings.append(
                WordTiming(
                    text=word.text,
                    start=float(getattr(word, "start", 0.0) or 0.0),
                    end=float(getattr(word, "end", 0.0) or 0.0),
                )
            )
        return tuple(timings)


__all__ = ["ElevenLabsTranscriber"]
