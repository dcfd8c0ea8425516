"""
Service layer for voice_tools.

Orchestration implemented on top of the ports in `services.audio.contracts`.
"""

from voice_tools.services.audio.recording_session import RecordingSession
from voice_tools.services.audio.transcription_service import RetryPolicy, TranscriptionService
from voice_tools.services.audio.tts_service import TextToSpeechService

__all__ = ["RecordingSession", "RetryPolicy", "TranscriptionService", "TextToSpeechService"]
