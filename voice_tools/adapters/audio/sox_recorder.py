from __future__ import annotations

import queue
import subprocess
import threading
from enum import Enum
from typing import Callable, List, Optional

from voice_tools.errors import NoAudioCaptured, RecorderError, StopTimeout, SubprocessLaunchFailed
from voice_tools.platform.logging import create_logger

_END_OF_STREAM = object()


class RecorderState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


class SoxRecorder:
    """
    Microphone recorder backed by a SoX ``rec`` subprocess emitting raw PCM.

    One instance owns exactly one subprocess. Output chunks are pumped by a
    reader thread into a single queue, terminated by an end-of-stream marker
    once the pipe closes, so `stop` sees every byte written before the
    process exited, in arrival order.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        *,
        command: str = "rec",
        stop_timeout: float = 2.0,
        chunk_size: int = 4096,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        logger=None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.command = command
        self.stop_timeout = stop_timeout
        self.chunk_size = chunk_size
        self.logger = logger if logger else create_logger(__name__)
        self._popen = popen
        self._process: Optional[subprocess.Popen] = None
        self._chunks: "queue.Queue[object]" = queue.Queue()
        self._bytes_received = 0
        self._reader_error: Optional[BaseException] = None
        self._state = RecorderState.IDLE
        self._state_lock = threading.Lock()
        self._stdout_thread: Optional[threading.Thread] = None
        self._stderr_thread: Optional[threading.Thread] = None

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state is RecorderState.RECORDING

    @property
    def bytes_received(self) -> int:
        return self._bytes_received

    def build_command(self) -> List[str]:
        return [
            self.command,
            "-t", "raw",
            "-b", "16",
            "-e", "signed-integer",
            "-c", str(self.channels),
            "-r", str(self.sample_rate),
            "-",
        ]

    def start(self) -> "SoxRecorder":
        with self._state_lock:
            if self._state is not RecorderState.IDLE:
                raise RecorderError("Recorder has already been started")
            command = self.build_command()
            try:
                self._process = self._popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
            except OSError as exc:
                self._state = RecorderState.FAILED
                raise SubprocessLaunchFailed(
                    f"Failed to start recording with '{self.command}': {exc}", command=command
                ) from exc
            if self._process.stdout is None:
                self._state = RecorderState.FAILED
                raise SubprocessLaunchFailed("Failed to start recording: no stdout", command=command)
            self._state = RecorderState.RECORDING

        self._stdout_thread = threading.Thread(target=self._pump_stdout, name="SoxRecorderStdout", daemon=True)
        self._stdout_thread.start()
        if self._process.stderr is not None:
            self._stderr_thread = threading.Thread(target=self._pump_stderr, name="SoxRecorderStderr", daemon=True)
            self._stderr_thread.start()
        self.logger.debug("Recording started: %s", " ".join(command))
        return self

    def _pump_stdout(self) -> None:
        stream = self._process.stdout
        read = getattr(stream, "read1", None) or stream.read
        try:
            while True:
                chunk = read(self.chunk_size)
                if not chunk:
                    break
                self._bytes_received += len(chunk)
                self._chunks.put(chunk)
        except (OSError, ValueError) as exc:
            self.logger.debug("Recorder stdout closed: %s", exc)
        except Exception as exc:
            self.logger.error("Recorder output reader failed: %s", exc)
            self._reader_error = exc
        finally:
            self._chunks.put(_END_OF_STREAM)

    def _pump_stderr(self) -> None:
        stream = self._process.stderr
        try:
            for raw_line in iter(stream.readline, b""):
                line = raw_line.decode("utf-8", errors="replace").strip()
                if "FAIL" in line or "ERROR" in line:
                    self.logger.error("SoX error: %s", line)
        except (OSError, ValueError) as exc:
            self.logger.debug("Recorder stderr closed: %s", exc)

    def stop(self) -> bytes:
        """
        Terminate the subprocess and return everything it captured.

        May be called once. Raises `StopTimeout` when the process ignores the
        termination request for longer than ``stop_timeout`` seconds,
        `RecorderError` when reading its output failed, and `NoAudioCaptured`
        when it never produced any output.
        """
        with self._state_lock:
            if self._state is not RecorderState.RECORDING:
                raise RecorderError(f"Cannot stop a recorder in state '{self._state.value}'")
            self._state = RecorderState.STOPPING

        self._process.terminate()
        try:
            self._process.wait(timeout=self.stop_timeout)
        except subprocess.TimeoutExpired as exc:
            self._process.kill()
            self._process.wait()
            self._state = RecorderState.FAILED
            raise StopTimeout(self.stop_timeout) from exc

        chunks = self._drain()
        self._join_threads()
        if self._reader_error is not None:
            self._state = RecorderState.FAILED
            raise RecorderError(f"Failed to read recorder output: {self._reader_error}") from self._reader_error
        if not chunks:
            self._state = RecorderState.FAILED
            raise NoAudioCaptured()

        self._state = RecorderState.STOPPED
        audio = b"".join(chunks)
        self.logger.debug("Recording stopped: %d bytes in %d chunks", len(audio), len(chunks))
        return audio

    def _drain(self) -> List[bytes]:
        chunks: List[bytes] = []
        while True:
            try:
                item = self._chunks.get(timeout=self.stop_timeout)
            except queue.Empty:
                # Output pipe still held open (e.g. by a grandchild); keep what arrived.
                self.logger.warning("Recorder output did not close within %.1fs", self.stop_timeout)
                break
            if item is _END_OF_STREAM:
                break
            chunks.append(item)
        return chunks

    def _join_threads(self) -> None:
        for thread in (self._stdout_thread, self._stderr_thread):
            if thread is not None:
                thread.join(timeout=self.stop_timeout)
        self._stdout_thread = None
        self._stderr_thread = None


def start_recording(sample_rate: int = 16000, channels: int = 1, **kwargs) -> SoxRecorder:
    """Create a recorder and start capturing immediately."""
    return SoxRecorder(sample_rate=sample_rate, channels=channels, **kwargs).start()


__all__ = ["RecorderState", "SoxRecorder", "start_recording"]
