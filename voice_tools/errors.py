"""Exception hierarchy raised by voice_tools."""

from __future__ import annotations

from typing import Optional, Sequence


class VoiceToolsError(Exception):
    """Base class for every error the command line tools report."""


class ConfigurationError(VoiceToolsError):
    pass


class MissingCredentialError(ConfigurationError):
    def __init__(self, key_name: str) -> None:
        super().__init__(f"{key_name} environment variable is not set")
        self.key_name = key_name


class EmptyInputError(VoiceToolsError):
    pass


class SubprocessLaunchFailed(VoiceToolsError):
    """The external program could not be started at all."""

    def __init__(self, message: str, *, command: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.command = list(command) if command else []


class RecorderError(VoiceToolsError):
    pass


class NoAudioCaptured(RecorderError):
    def __init__(self, message: str = "No audio data captured") -> None:
        super().__init__(message)


class StopTimeout(RecorderError):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"Recording stop timeout after {timeout:g}s")
        self.timeout = timeout


class TranscriptionFailed(VoiceToolsError):
    pass


class TranscriptionLaunchFailed(SubprocessLaunchFailed, TranscriptionFailed):
    pass


class SubprocessExitNonZero(TranscriptionFailed):
    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        program = command[0] if command else "subprocess"
        detail = stderr.strip() or "no error output"
        super().__init__(f"{program} exited with code {returncode}: {detail}")
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class RetryExhausted(VoiceToolsError):
    def __init__(self, attempts: int, last_error: Optional[BaseException]) -> None:
        detail = str(last_error) if last_error is not None else "unknown error"
        super().__init__(f"Failed after {attempts} attempts: {detail}")
        self.attempts = attempts
        self.last_error = last_error


class SynthesisFailed(VoiceToolsError):
    pass


__all__ = [
    "VoiceToolsError",
    "ConfigurationError",
    "MissingCredentialError",
    "EmptyInputError",
    "SubprocessLaunchFailed",
    "RecorderError",
    "NoAudioCaptured",
    "StopTimeout",
    "TranscriptionFailed",
    "TranscriptionLaunchFailed",
    "SubprocessExitNonZero",
    "RetryExhausted",
    "SynthesisFailed",
]
