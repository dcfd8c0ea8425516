"""Record microphone audio and transcribe it locally (whisper.cpp) or with ElevenLabs."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from pathlib import Path
from typing import Optional, Sequence, TextIO

from voice_tools import __version__
from voice_tools.audio import (
    DEFAULT_STT_MODEL_ID,
    TranscriberConfig,
    TranscriptionProvider,
    create_recording_session,
)
from voice_tools.errors import VoiceToolsError
from voice_tools.platform.logging import configure_logging, create_logger, dynamic_print
from voice_tools.platform.pcm import frame_wav, save_audio
from voice_tools.services.audio.contracts import TranscriptionResult
from voice_tools.services.audio.recording_session import RecordingSession
from voice_tools.services.audio.transcription_service import RetryPolicy


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value} must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stt",
        description="Speech-to-text: record until Enter is pressed, then transcribe.",
    )
    parser.add_argument(
        "--provider",
        choices=[provider.value for provider in TranscriptionProvider],
        default=TranscriptionProvider.LOCAL.value,
        help="Transcription backend (default: local whisper.cpp).",
    )
    parser.add_argument(
        "--model",
        default=DEFAULT_STT_MODEL_ID,
        help=f"ElevenLabs model ID for the cloud provider (default: {DEFAULT_STT_MODEL_ID}).",
    )
    parser.add_argument(
        "--model-path",
        default=None,
        help="whisper.cpp model file (default: $WHISPER_CPP_MODEL or ~/.local/share/whisper-cpp/ggml-base.en.bin).",
    )
    parser.add_argument("--whisper-bin", default="whisper-cli", help="whisper.cpp executable (default: whisper-cli).")
    parser.add_argument("--language", default=None, help="Language code (e.g. en, es, fr).")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write the transcription to this file.")
    parser.add_argument("--json", action="store_true", help="Output as JSON.")
    parser.add_argument("--timestamps", action="store_true", help="Include word timestamps in JSON (if available).")
    parser.add_argument("--retries", type=positive_int, default=3, help="Transcription attempts before giving up (default: 3).")
    parser.add_argument("--sample-rate", type=positive_int, default=16000, help="Recording sample rate in Hz (default: 16000).")
    parser.add_argument("--channels", type=positive_int, default=1, help="Recording channel count (default: 1).")
    parser.add_argument("--save-audio", type=Path, default=None, help="Also save the capture as a WAV file.")
    parser.add_argument(
        "--tail",
        type=float,
        default=1.5,
        help="Seconds to keep recording after Enter so trailing audio is not cut (default: 1.5).",
    )
    parser.add_argument(
        "--min-duration",
        type=float,
        default=0.0,
        help="Reject recordings shorter than this many seconds (default: 0).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug output on stderr.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors on stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _log_level(args: argparse.Namespace) -> int:
    if args.verbose:
        return logging.DEBUG
    if args.quiet:
        return logging.WARNING
    return logging.INFO


def _watch_for_enter(stream: TextIO, session: RecordingSession, logger) -> threading.Thread:
    def _wait_for_line() -> None:
        try:
            stream.readline()
        except (OSError, ValueError) as exc:
            logger.debug("stdin unavailable: %s", exc)
        session.request_stop()

    thread = threading.Thread(target=_wait_for_line, name="SttEnterWatcher", daemon=True)
    thread.start()
    return thread


def _save_capture(args: argparse.Namespace, audio: bytes, logger) -> None:
    try:
        path = save_audio(args.save_audio, frame_wav(audio, args.sample_rate, args.channels))
    except OSError as exc:
        logger.warning("Could not save audio to %s: %s", args.save_audio, exc)
        return
    logger.info("Audio saved to: %s", path.resolve())


def render_result(result: TranscriptionResult, *, as_json: bool, timestamps: bool) -> Optional[str]:
    """Text destined for stdout, or None when there is nothing to print."""
    if as_json:
        return json.dumps(result.to_dict(include_words=timestamps), indent=2)
    text = result.text.strip() if result.text else ""
    return text or None


def run(
    args: argparse.Namespace,
    *,
    session: Optional[RecordingSession] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    install_signals: bool = True,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    logger = create_logger("voice_tools.stt")

    try:
        if session is None:
            config = TranscriberConfig(
                provider=TranscriptionProvider(args.provider),
                language=args.language,
                cloud_model=args.model,
                model_path=args.model_path,
                whisper_binary=args.whisper_bin,
                sample_rate=args.sample_rate,
                channels=args.channels,
            )
            session = create_recording_session(
                config,
                policy=RetryPolicy(max_attempts=args.retries),
                tail_seconds=args.tail,
                min_duration=args.min_duration,
            )

        restore_signals = session.install_signal_handlers() if install_signals else None
        try:
            session.start()
            dynamic_print("Press Enter to stop recording and transcribe.", stream=stderr, persist=True)
            dynamic_print("Recording...", stream=stderr)
            _watch_for_enter(stdin, session, logger)
            session.wait_for_stop()
            dynamic_print("Processing...", stream=stderr, persist=True)
            result = session.finish()
        finally:
            if restore_signals is not None:
                restore_signals()
            if args.save_audio and session.audio:
                _save_capture(args, session.audio, logger)
    except VoiceToolsError as exc:
        logger.error("Error: %s", exc)
        return 1

    if result is None:
        return 0

    output = render_result(result, as_json=args.json, timestamps=args.timestamps)
    if output is None:
        logger.warning("No transcription returned (audio may be too short)")
        return 0

    if args.output:
        try:
            args.output.write_text(output + "\n", encoding="utf-8")
        except OSError as exc:
            logger.error("Error: %s", exc)
            return 1
        logger.info("Transcription saved to: %s", args.output.resolve())
    else:
        stdout.write(output + "\n")
        stdout.flush()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(_log_level(args))
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
