from __future__ import annotations

from typing import Optional

from voice_tools._optional import require_extra
from voice_tools.audio import DEFAULT_TTS_MODEL_ID, DEFAULT_VOICE_ID
from voice_tools.errors import MissingCredentialError, SynthesisFailed
from voice_tools.platform.config import ELEVENLABS_API_KEY, read_api_key
from voice_tools.platform.logging import create_logger

try:  # pragma: no cover - optional ElevenLabs dependency guard
    from elevenlabs import VoiceSettings
    from elevenlabs.client import ElevenLabs
except ImportError:  # pragma: no cover
    require_extra("ElevenLabsSpeechSynthesizer")


def _check_unit_interval(name: str, value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")
    return value


class ElevenLabsSpeechSynthesizer:
    """
    Adapter for ElevenLabs text-to-speech.
    """

    def __init__(
        self,
        client: Optional[ElevenLabs] = None,
        *,
        api_key: Optional[str] = None,
        voice_id: str = DEFAULT_VOICE_ID,
        model_id: str = DEFAULT_TTS_MODEL_ID,
        output_format: Optional[str] = None,
        logger=None,
    ) -> None:
        if client is None:
            api_key = api_key or read_api_key(ELEVENLABS_API_KEY)
            if not api_key:
                raise MissingCredentialError(ELEVENLABS_API_KEY)
            self.client = ElevenLabs(api_key=api_key)
        else:
            self.client = client
        self.voice_id = voice_id
        self.model_id = model_id
        self.output_format = output_format
        self.logger = logger if logger else create_logger(__name__)

    def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        stability: float = 0.5,
        similarity_boost: float = 0.75,
    ) -> bytes:
        settings = VoiceSettings(
            stability=_check_unit_interval("stability", stability),
            similarity_boost=_check_unit_interval("similarity_boost", similarity_boost),
        )
        request = {
            "text": text,
            "model_id": model_id or self.model_id,
            "voice_settings": settings,
        }
        if self.output_format:
            request["output_format"] = self.output_format

        try:
            stream = self.client.text_to_speech.convert(voice_id or self.voice_id, **request)
            audio = b"".join(bytes(chunk) for chunk in stream)
        except Exception as exc:
            raise SynthesisFailed(f"Speech synthesis failed: {exc}") from exc

        self.logger.debug("Received %d bytes of audio", len(audio))
        return audio


__all__ = [
    "ElevenLabsSpeechSynthesizer",
]
