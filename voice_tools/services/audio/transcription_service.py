from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from voice_tools.errors import RetryExhausted, TranscriptionFailed
from voice_tools.platform.logging import create_logger

from .contracts import TranscriberPort, TranscriptionResult


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff without jitter.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        base_delay: Seconds to wait after the first failed attempt.
        max_delay: Upper bound for any single wait.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Wait after the zero-based ``attempt`` failed."""
        return min(self.base_delay * (2 ** attempt), self.max_delay)


class TranscriptionService:
    """
    Service facade around a transcriber adapter adding bounded retry.

    Every `TranscriptionFailed` is retried the same way; there is no
    per-error classification.
    """

    def __init__(
        self,
        transcriber: TranscriberPort,
        policy: Optional[RetryPolicy] = None,
        wait_fn: Callable[[float], None] = time.sleep,
        logger=None,
    ) -> None:
        self._transcriber = transcriber
        self._policy = policy or RetryPolicy()
        self._wait = wait_fn
        self._logger = logger if logger else create_logger(__name__)

    @property
    def transcriber(self) -> TranscriberPort:
        return self._transcriber

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def transcribe(self, pcm: bytes) -> TranscriptionResult:
        return self._transcriber.transcribe(pcm)

    def transcribe_with_retry(self, pcm: bytes, max_attempts: Optional[int] = None) -> TranscriptionResult:
        """
        Transcribe ``pcm``, retrying failed attempts with exponential backoff.

        Args:
            pcm: Raw 16-bit PCM audio.
            max_attempts: Overrides the policy's attempt count.

        Raises:
            RetryExhausted: When every attempt failed; carries the last error.
        """
        attempts = self._policy.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        last_error: Optional[TranscriptionFailed] = None
        for attempt in range(attempts):
            try:
                return self._transcriber.transcribe(pcm)
            except TranscriptionFailed as exc:
                last_error = exc
                if attempt < attempts - 1:
                    delay = self._policy.delay_for(attempt)
                    self._logger.warning(
                        "Transcription attempt %d/%d failed: %s. Retrying in %.1fs",
                        attempt + 1,
                        attempts,
                        exc,
                        delay,
                    )
                    self._wait(delay)

        raise RetryExhausted(attempts, last_error) from last_error


__all__ = ["RetryPolicy", "TranscriptionService"]
