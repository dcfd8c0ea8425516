from __future__ import annotations

import os
import subprocess
import tempfile
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from voice_tools.errors import SubprocessExitNonZero, TranscriptionFailed, TranscriptionLaunchFailed
from voice_tools.platform.config import read_setting
from voice_tools.platform.logging import create_logger
from voice_tools.platform.pcm import frame_wav
from voice_tools.services.audio.contracts import TranscriptionResult

MODEL_PATH_SETTING = "WHISPER_CPP_MODEL"
DEFAULT_MODEL_PATH = os.path.join("~", ".local", "share", "whisper-cpp", "ggml-base.en.bin")


def resolve_model_path(model_path: Optional[str] = None) -> str:
    """Pick the model from the argument, then ``WHISPER_CPP_MODEL``, then the default location."""
    chosen = model_path or read_setting(MODEL_PATH_SETTING, DEFAULT_MODEL_PATH)
    return os.path.expanduser(chosen)


def parse_whisper_output(output: str) -> str:
    """
    Extract the recognised text from whisper-cli standard output.

    Blank lines and lines starting with ``[`` (timestamps and diagnostics)
    are dropped; the remaining lines are joined with single spaces.
    """
    lines = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith("["):
            continue
        lines.append(line)
    return " ".join(lines).strip()


class WhisperCppTranscriber:
    """
    Adapter running a local whisper.cpp ``whisper-cli`` binary on captured PCM.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        *,
        binary: str = "whisper-cli",
        language: str = "en",
        sample_rate: int = 16000,
        channels: int = 1,
        threads: Optional[int] = None,
        timeout: Optional[float] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        logger=None,
    ) -> None:
        self.model_path = resolve_model_path(model_path)
        self.binary = binary
        self.language = language
        self.sample_rate = sample_rate
        self.channels = channels
        self.threads = threads
        self.timeout = timeout
        self._run = runner
        self.logger = logger if logger else create_logger(__name__)

    def build_command(self, wav_path: str) -> List[str]:
        command = [
            self.binary,
            "-m", self.model_path,
            "-f", wav_path,
            "--no-timestamps",
            "-l", self.language,
        ]
        if self.threads:
            command += ["-t", str(self.threads)]
        return command

    @contextmanager
    def _temporary_wav(self, wav_bytes: bytes) -> Iterator[str]:
        handle = tempfile.NamedTemporaryFile(prefix="voice_tools_stt_", suffix=".wav", delete=False)
        try:
            with handle:
                handle.write(wav_bytes)
            yield handle.name
        finally:
            try:
                os.remove(handle.name)
            except OSError as exc:
                self.logger.warning("Could not remove temporary audio %s: %s", handle.name, exc)

    def transcribe(self, pcm: bytes) -> TranscriptionResult:
        wav_bytes = frame_wav(pcm, self.sample_rate, self.channels)
        with self._temporary_wav(wav_bytes) as wav_path:
            command = self.build_command(wav_path)
            self.logger.debug("Running %s", " ".join(command))
            try:
                completed = self._run(
                    command,
                    capture_output=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                raise TranscriptionFailed(f"{self.binary} timed out after {self.timeout}s") from exc
            except OSError as exc:
                raise TranscriptionLaunchFailed(
                    f"Failed to launch {self.binary}: {exc}", command=command
                ) from exc

        if completed.returncode != 0:
            raise SubprocessExitNonZero(command, completed.returncode, completed.stderr or "")

        text = parse_whisper_output(completed.stdout or "")
        return TranscriptionResult(text=text)


__all__ = [
    "DEFAULT_MODEL_PATH",
    "MODEL_PATH_SETTING",
    "WhisperCppTranscriber",
    "parse_whisper_output",
    "resolve_model_path",
]
