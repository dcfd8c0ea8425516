"""Convert text to speech with ElevenLabs and write the audio to stdout or a file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, TextIO

from voice_tools import __version__
from voice_tools.audio import DEFAULT_TTS_MODEL_ID, DEFAULT_VOICE_ID, create_tts_service
from voice_tools.errors import EmptyInputError, VoiceToolsError
from voice_tools.platform.logging import configure_logging, create_logger
from voice_tools.services.audio.tts_service import TextToSpeechService


def unit_interval(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number") from exc
    if not 0.0 <= number <= 1.0:
        raise argparse.ArgumentTypeError(f"{value} is not between 0 and 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tts",
        description="Simple ElevenLabs text-to-speech CLI.",
    )
    parser.add_argument("text", nargs="?", default=None, help="Text to convert to speech (if not piped).")
    parser.add_argument("-v", "--voice", default=DEFAULT_VOICE_ID, help=f"Voice ID to use (default: {DEFAULT_VOICE_ID}).")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output file (default: stdout).")
    parser.add_argument("-m", "--model", default=DEFAULT_TTS_MODEL_ID, help=f"Model ID (default: {DEFAULT_TTS_MODEL_ID}).")
    parser.add_argument("-s", "--stability", type=unit_interval, default=0.5, help="Voice stability 0-1 (default: 0.5).")
    parser.add_argument(
        "-S",
        "--similarity",
        type=unit_interval,
        default=0.75,
        help="Similarity boost 0-1 (default: 0.75).",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default=None,
        help="ElevenLabs output format, e.g. mp3_44100_128 or pcm_16000 (default: API default).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Show debug output on stderr.")
    verbosity.add_argument("--quiet", action="store_true", help="Only show warnings and errors on stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def read_text(text_arg: Optional[str], stdin: TextIO) -> str:
    """Text from the argument, else from piped stdin; an interactive stdin is an error."""
    if text_arg:
        return text_arg.strip()
    if stdin.isatty():
        raise EmptyInputError("No text provided. Pipe text or provide as argument.")
    return stdin.read().strip()


def run(
    args: argparse.Namespace,
    *,
    service: Optional[TextToSpeechService] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout.buffer
    logger = create_logger("voice_tools.tts")

    try:
        text = read_text(args.text, stdin)
        if not text:
            raise EmptyInputError("Empty text provided")

        if service is None:
            service = create_tts_service(
                voice_id=args.voice,
                model_id=args.model,
                output_format=args.output_format,
            )

        settings = dict(
            voice_id=args.voice,
            model_id=args.model,
            stability=args.stability,
            similarity_boost=args.similarity,
        )
        if args.output:
            path = service.save(text, args.output, **settings)
            logger.info("Audio saved to: %s", path)
            return 0

        audio = service.synthesize(text, **settings)
        stdout.write(audio)
        stdout.flush()
    except (VoiceToolsError, OSError) as exc:
        logger.error("Error: %s", exc)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging(logging.INFO)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
