from __future__ import annotations

from types import SimpleNamespace

import pytest

pytest.importorskip("elevenlabs")

from voice_tools.adapters.audio.elevenlabs_transcribe import ElevenLabsTranscriber  # noqa: E402
from voice_tools.errors import MissingCredentialError, TranscriptionFailed  # noqa: E402
from voice_tools.platform.pcm import frame_wav  # noqa: E402
from tests.fakes.audio import FakeElevenLabsClient  # noqa: E402

PCM = b"\x01\x00\x02\x00"


def test_missing_api_key_is_a_configuration_error():
    with pytest.raises(MissingCredentialError, match="ELEVENLABS_API_KEY environment variable is not set"):
        ElevenLabsTranscriber()


def test_api_key_from_config_file_is_accepted(config_file):
    config_file(ELEVENLABS_API_KEY="sk-test")
    transcriber = ElevenLabsTranscriber()
    assert transcriber.client is not None


def test_uploads_wav_framed_audio():
    client = FakeElevenLabsClient(stt_response=SimpleNamespace(text="Hello world", words=None))
    transcriber = ElevenLabsTranscriber(client, model_id="scribe_v1")

    result = transcriber.transcribe(PCM)

    assert result.text == "Hello world"
    assert result.words is None
    request, = client.speech_to_text.requests
    name, payload, mime = request["file"]
    assert name == "audio.wav"
    assert mime == "audio/wav"
    assert payload == frame_wav(PCM, 16000, 1)
    assert request["model_id"] == "scribe_v1"
    assert "language_code" not in request
    assert request["request_options"] == {"timeout_in_seconds": 60}


def test_language_is_forwarded_when_set():
    client = FakeElevenLabsClient()
    ElevenLabsTranscriber(client, language="de", timeout=None).transcribe(PCM)

    request = client.speech_to_text.requests[0]
    assert request["language_code"] == "de"
    assert "request_options" not in request


def test_word_timings_skip_spacing_entries():
    words = [
        SimpleNamespace(text="Hi", start=0.0, end=0.4, type="word"),
        SimpleNamespace(text=" ", start=0.4, end=0.5, type="spacing"),
        SimpleNamespace(text="there", start=0.5, end=0.9, type="word"),
    ]
    client = FakeElevenLabsClient(stt_response=SimpleNamespace(text="Hi there", words=words))

    result = ElevenLabsTranscriber(client).transcribe(PCM)

    assert [word.text for word in result.words] == ["Hi", "there"]
    assert result.to_dict(include_words=True)["words"][1] == {"word": "there", "start": 0.5, "end": 0.9}


def test_client_errors_become_transcription_failures():
    client = FakeElevenLabsClient(stt_error=RuntimeError("HTTP 401"))

    with pytest.raises(TranscriptionFailed, match="Transcription failed: HTTP 401") as excinfo:
        ElevenLabsTranscriber(client).transcribe(PCM)
    assert isinstance(excinfo.value.__cause__, RuntimeError)
