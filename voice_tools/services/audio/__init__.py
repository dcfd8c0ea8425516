"""Audio services: retrying transcription, recording sessions and speech synthesis."""
