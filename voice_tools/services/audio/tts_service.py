from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from voice_tools.errors import EmptyInputError
from voice_tools.platform.pcm import save_audio

from .contracts import SpeechSynthesisPort


class TextToSpeechService:
    def __init__(self, synthesizer: SpeechSynthesisPort) -> None:
        self._synthesizer = synthesizer

    @property
    def synthesizer(self) -> SpeechSynthesisPort:
        return self._synthesizer

    def synthesize(
        self,
        text: str,
        *,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        stability: float = 0.5,
        similarity_boost: float = 0.75,
    ) -> bytes:
        """Return the audio for ``text``; blank text is rejected before any request."""
        if not text or not text.strip():
            raise EmptyInputError("Empty text provided")
        return self._synthesizer.synthesize(
            text,
            voice_id=voice_id,
            model_id=model_id,
            stability=stability,
            similarity_boost=similarity_boost,
        )

    def save(self, text: str, output_path: Union[str, Path], **settings) -> Path:
        audio = self.synthesize(text, **settings)
        return save_audio(Path(output_path).resolve(), audio)


__all__ = ["TextToSpeechService"]
