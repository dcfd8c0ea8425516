"""Audio capture, transcription and synthesis adapters."""
