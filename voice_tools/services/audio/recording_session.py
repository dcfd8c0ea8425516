from __future__ import annotations

import signal
import threading
import time
from typing import Callable, Iterable, Optional

from voice_tools.errors import NoAudioCaptured
from voice_tools.platform.logging import create_logger
from voice_tools.platform.pcm import pcm_duration, pcm_level

from .contracts import RecorderPort, TranscriptionResult
from .transcription_service import TranscriptionService

SILENCE_LEVEL = 0.001


class RecordingSession:
    """
    Owns one recorder and one transcription service for a single capture.

    The stop request may come from several places at once (a line on stdin,
    SIGINT, SIGTERM); `request_stop` only sets an event, and `finish` runs
    the stop-and-transcribe sequence at most once.
    """

    def __init__(
        self,
        recorder: RecorderPort,
        transcription: TranscriptionService,
        *,
        sample_rate: int = 16000,
        channels: int = 1,
        tail_seconds: float = 0.0,
        min_duration: float = 0.0,
        max_attempts: Optional[int] = None,
        wait_fn: Callable[[float], None] = time.sleep,
        logger=None,
    ) -> None:
        self._recorder = recorder
        self._transcription = transcription
        self.sample_rate = sample_rate
        self.channels = channels
        self.tail_seconds = tail_seconds
        self.min_duration = min_duration
        self.max_attempts = max_attempts
        self._wait = wait_fn
        self._logger = logger if logger else create_logger(__name__)
        self._stop_requested = threading.Event()
        self._finish_lock = threading.Lock()
        self._finished = False
        self.audio: Optional[bytes] = None

    @property
    def recorder(self) -> RecorderPort:
        return self._recorder

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self) -> None:
        self._recorder.start()

    def request_stop(self) -> None:
        self._stop_requested.set()

    def wait_for_stop(self, timeout: Optional[float] = None, poll_interval: float = 0.2) -> bool:
        """
        Block until a stop was requested or ``timeout`` elapsed.

        Waits in short slices so signal handlers keep running on the main thread.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._stop_requested.is_set():
            remaining = poll_interval
            if deadline is not None:
                remaining = min(poll_interval, deadline - time.monotonic())
                if remaining <= 0:
                    return False
            self._stop_requested.wait(remaining)
        return True

    def install_signal_handlers(
        self,
        signals: Iterable[int] = (signal.SIGINT, signal.SIGTERM),
    ) -> Callable[[], None]:
        """
        Route the given signals to `request_stop`; must run on the main thread.

        Returns:
            A callable restoring the previous handlers.
        """
        previous = {}

        def _handler(signum, frame):
            self._stop_requested.set()

        for signum in signals:
            previous[signum] = signal.signal(signum, _handler)

        def restore() -> None:
            for signum, handler in previous.items():
                signal.signal(signum, handler)

        return restore

    def finish(self) -> Optional[TranscriptionResult]:
        """
        Stop the recorder and transcribe the capture.

        Only the first call does any work; later calls return None.
        """
        with self._finish_lock:
            if self._finished:
                self._logger.debug("Recording session already finished")
                return None
            self._finished = True

        self._stop_requested.set()
        if self.tail_seconds > 0:
            self._wait(self.tail_seconds)

        audio = self._recorder.stop()
        self.audio = audio

        duration = pcm_duration(audio, self.sample_rate, self.channels)
        self._logger.info("Captured %d bytes of audio (%.2fs)", len(audio), duration)
        if duration < self.min_duration:
            raise NoAudioCaptured(
                f"Recording is too short, only {duration:.2f} seconds. "
                f"Minimum required is {self.min_duration:.2f} seconds."
            )
        if pcm_level(audio) < SILENCE_LEVEL:
            self._logger.warning("Captured audio looks silent; check the microphone input")

        return self._transcription.transcribe_with_retry(audio, self.max_attempts)


__all__ = ["RecordingSession"]
