"""Factories wiring the audio adapters into services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from voice_tools._optional import optional_import
from voice_tools.adapters.audio.sox_recorder import SoxRecorder
from voice_tools.adapters.audio.whisper_cpp_transcribe import WhisperCppTranscriber
from voice_tools.services.audio.contracts import TranscriberPort
from voice_tools.services.audio.recording_session import RecordingSession
from voice_tools.services.audio.transcription_service import RetryPolicy, TranscriptionService
from voice_tools.services.audio.tts_service import TextToSpeechService


DEFAULT_VOICE_ID = "ErXwobaYiN019PkySvjV"
DEFAULT_TTS_MODEL_ID = "eleven_multilingual_v2"
DEFAULT_STT_MODEL_ID = "scribe_v1"


class TranscriptionProvider(str, Enum):
    LOCAL = "local"
    CLOUD = "cloud"


@dataclass
class TranscriberConfig:
    """
    Construction-time choice of transcription backend and its parameters.

    Attributes:
        provider: ``local`` runs whisper-cli, ``cloud`` calls ElevenLabs.
        language: Language code; ``None`` keeps each backend's default.
        cloud_model: ElevenLabs speech-to-text model id.
        model_path: whisper.cpp model file (falls back to ``WHISPER_CPP_MODEL``).
        whisper_binary: whisper.cpp executable name or path.
        sample_rate: PCM sample rate used when framing WAV.
        channels: PCM channel count used when framing WAV.
        api_key: Explicit ElevenLabs key instead of ``ELEVENLABS_API_KEY``.
    """

    provider: TranscriptionProvider = TranscriptionProvider.LOCAL
    language: Optional[str] = None
    cloud_model: str = DEFAULT_STT_MODEL_ID
    model_path: Optional[str] = None
    whisper_binary: str = "whisper-cli"
    sample_rate: int = 16000
    channels: int = 1
    api_key: Optional[str] = None


def create_transcriber(config: Optional[TranscriberConfig] = None, logger=None) -> TranscriberPort:
    config = config or TranscriberConfig()
    provider = TranscriptionProvider(config.provider)

    if provider is TranscriptionProvider.CLOUD:
        module = optional_import(
            "voice_tools.adapters.audio.elevenlabs_transcribe",
            feature="ElevenLabsTranscriber",
        )
        return module.ElevenLabsTranscriber(
            api_key=config.api_key,
            model_id=config.cloud_model,
            language=config.language,
            sample_rate=config.sample_rate,
            channels=config.channels,
            logger=logger,
        )

    return WhisperCppTranscriber(
        config.model_path,
        binary=config.whisper_binary,
        language=config.language or "en",
        sample_rate=config.sample_rate,
        channels=config.channels,
        logger=logger,
    )


def create_transcription_service(
    config: Optional[TranscriberConfig] = None,
    policy: Optional[RetryPolicy] = None,
    logger=None,
) -> TranscriptionService:
    return TranscriptionService(create_transcriber(config, logger=logger), policy=policy, logger=logger)


def create_recording_session(
    config: Optional[TranscriberConfig] = None,
    *,
    policy: Optional[RetryPolicy] = None,
    recorder: Optional[SoxRecorder] = None,
    tail_seconds: float = 0.0,
    min_duration: float = 0.0,
    logger=None,
) -> RecordingSession:
    """
    Build an unstarted session: recorder, selected transcriber and retry policy.
    """
    config = config or TranscriberConfig()
    transcription = create_transcription_service(config, policy=policy, logger=logger)
    recorder = recorder or SoxRecorder(config.sample_rate, config.channels, logger=logger)
    return RecordingSession(
        recorder,
        transcription,
        sample_rate=config.sample_rate,
        channels=config.channels,
        tail_seconds=tail_seconds,
        min_duration=min_duration,
        logger=logger,
    )


def create_tts_service(
    *,
    api_key: Optional[str] = None,
    voice_id: Optional[str] = None,
    model_id: Optional[str] = None,
    output_format: Optional[str] = None,
    logger=None,
) -> TextToSpeechService:
    module = optional_import(
        "voice_tools.adapters.audio.elevenlabs_tts",
        feature="ElevenLabsSpeechSynthesizer",
    )
    synthesizer = module.ElevenLabsSpeechSynthesizer(
        api_key=api_key,
        voice_id=voice_id or DEFAULT_VOICE_ID,
        model_id=model_id or DEFAULT_TTS_MODEL_ID,
        output_format=output_format,
        logger=logger,
    )
    return TextToSpeechService(synthesizer)


__all__ = [
    "DEFAULT_STT_MODEL_ID",
    "DEFAULT_TTS_MODEL_ID",
    "DEFAULT_VOICE_ID",
    "TranscriberConfig",
    "TranscriptionProvider",
    "create_recording_session",
    "create_transcriber",
    "create_transcription_service",
    "create_tts_service",
]
