from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "0.1.0"

_LAZY_EXPORTS = {
    "SoxRecorder": ".adapters.audio.sox_recorder",
    "start_recording": ".adapters.audio.sox_recorder",
    "WhisperCppTranscriber": ".adapters.audio.whisper_cpp_transcribe",
    "ElevenLabsTranscriber": ".adapters.audio.elevenlabs_transcribe",
    "ElevenLabsSpeechSynthesizer": ".adapters.audio.elevenlabs_tts",
    "TranscriberConfig": ".audio",
    "TranscriptionProvider": ".audio",
    "create_recording_session": ".audio",
    "create_transcriber": ".audio",
    "create_transcription_service": ".audio",
    "create_tts_service": ".audio",
    "RecordingSession": ".services.audio.recording_session",
    "RetryPolicy": ".services.audio.transcription_service",
    "TranscriptionService": ".services.audio.transcription_service",
    "TextToSpeechService": ".services.audio.tts_service",
    "TranscriptionResult": ".services.audio.contracts",
    "WordTiming": ".services.audio.contracts",
    "frame_wav": ".platform.pcm",
    "create_logger": ".platform.logging",
    "dynamic_print": ".platform.logging",
    "read_api_key": ".platform.config",
    "VoiceToolsError": ".errors",
}

__all__ = ("__version__",) + tuple(_LAZY_EXPORTS)

if TYPE_CHECKING:
    from .adapters.audio.elevenlabs_transcribe import ElevenLabsTranscriber
    from .adapters.audio.elevenlabs_tts import ElevenLabsSpeechSynthesizer
    from .adapters.audio.sox_recorder import SoxRecorder, start_recording
    from .adapters.audio.whisper_cpp_transcribe import WhisperCppTranscriber
    from .audio import (
        TranscriberConfig,
        TranscriptionProvider,
        create_recording_session,
        create_transcriber,
        create_transcription_service,
        create_tts_service,
    )
    from .errors import VoiceToolsError
    from .platform.config import read_api_key
    from .platform.logging import create_logger, dynamic_print
    from .platform.pcm import frame_wav
    from .services.audio.contracts import TranscriptionResult, WordTiming
    from .services.audio.recording_session import RecordingSession
    from .services.audio.transcription_service import RetryPolicy, TranscriptionService
    from .services.audio.tts_service import TextToSpeechService


def __getattr__(name: str):
    try:
        module = import_module(_LAZY_EXPORTS[name], __name__)
    except KeyError as exc:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from exc
    value = getattr(module, name)
    globals()[name] = value
    return value


def __dir__():
    return sorted(set(__all__) | set(globals().keys()))
