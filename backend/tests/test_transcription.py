"""Speech-to-text gateway and the upload/cleanup service around it."""
import io
import os

import openai
import pytest

from fakes import FakeOpenAI, FakeTranscriber, SleepRecorder, status_error
from superfeynman.application.transcription_app_service import CHUNK_SIZE, TranscriptionAppService, validate_audio
from superfeynman.domain.common.errors import ErrorKind, InvalidCredentials, RateLimited, TranscriptionFailed
from superfeynman.gateways.transcription_gateway import TranscriptionGateway


def _gateway(*outcomes):
    client = FakeOpenAI(outcomes)
    return TranscriptionGateway(client=client, model="whisper-test", sleep=SleepRecorder()), client


# ------------------------------------------------------------------
# Gateway
# ------------------------------------------------------------------
def test_transcribe_returns_trimmed_text():
    gateway, client = _gateway("  I think entropy is disorder.  ")
    assert gateway.transcribe(b"RIFF....", "audio/wav") == "I think entropy is disorder."

    call = client.audio_calls[0]
    assert call["model"] == "whisper-test"
    assert call["file"] == ("audio.wav", b"RIFF....", "audio/wav")


def test_transcribe_keeps_given_filename():
    gateway, client = _gateway("ok")
    gateway.transcribe(b"data", "audio/webm", filename="answer.webm")
    assert client.audio_calls[0]["file"][0] == "answer.webm"


def test_transcribe_rejects_empty_audio():
    gateway, client = _gateway()
    with pytest.raises(ValueError):
        gateway.transcribe(b"", "audio/webm")
    assert client.audio_calls == []


def test_transcribe_provider_rejection():
    gateway, client = _gateway(status_error(openai.BadRequestError, 400))
    with pytest.raises(TranscriptionFailed):
        gateway.transcribe(b"data", "audio/webm")
    assert len(client.audio_calls) == 1


def test_transcribe_rate_limited_after_retries():
    gateway, client = _gateway(*[status_error(openai.RateLimitError, 429)] * 3)
    with pytest.raises(RateLimited):
        gateway.transcribe(b"data", "audio/webm")
    assert len(client.audio_calls) == 3


def test_transcribe_bad_key():
    gateway, _ = _gateway(status_error(openai.AuthenticationError, 401))
    with pytest.raises(InvalidCredentials):
        gateway.transcribe(b"data", "audio/webm")


def test_transcribe_without_key(monkeypatch):
    monkeypatch.setattr("superfeynman.gateways.transcription_gateway.OPENAI_API_KEY", "")
    with pytest.raises(InvalidCredentials):
        TranscriptionGateway().transcribe(b"data", "audio/webm")


# ------------------------------------------------------------------
# Upload service
# ------------------------------------------------------------------
@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


def _service(transcriber, upload_dir, max_audio_bytes=64):
    return TranscriptionAppService(gateway=transcriber, upload_dir=str(upload_dir), max_audio_bytes=max_audio_bytes)


def test_validate_audio():
    assert validate_audio("Answer.MP3", "audio/mpeg").value == ".mp3"
    assert validate_audio("clip.webm", "application/octet-stream").is_success
    assert not validate_audio("notes.txt", "text/plain").is_success
    assert not validate_audio("clip.webm", "video/webm").is_success
    assert not validate_audio(None, "audio/webm").is_success


def test_upload_is_removed_after_success(upload_dir):
    transcriber = FakeTranscriber("entropy is disorder")
    result = _service(transcriber, upload_dir).transcribe_upload(io.BytesIO(b"webm-bytes"), "a.webm", "audio/webm")

    assert result.value == "entropy is disorder"
    audio, mime, filename = transcriber.calls[0]
    assert audio == b"webm-bytes"
    assert mime == "audio/webm"
    assert filename.startswith("audio-") and filename.endswith(".webm")
    assert os.listdir(upload_dir) == []


def test_upload_is_removed_after_provider_failure(upload_dir):
    transcriber = FakeTranscriber()
    transcriber.error = TranscriptionFailed("transcription failed: unsupported codec")
    result = _service(transcriber, upload_dir).transcribe_upload(io.BytesIO(b"webm-bytes"), "a.webm", "audio/webm")

    assert result.kind == ErrorKind.TRANSCRIPTION_FAILED
    assert os.listdir(upload_dir) == []


def test_oversized_and_empty_uploads_rejected(upload_dir):
    transcriber = FakeTranscriber()
    service = _service(transcriber, upload_dir, max_audio_bytes=4)

    too_big = service.transcribe_upload(io.BytesIO(b"12345"), "a.wav", "audio/wav")
    empty = service.transcribe_upload(io.BytesIO(b""), "a.wav", "audio/wav")

    assert too_big.kind == ErrorKind.INVALID_INPUT
    assert empty.kind == ErrorKind.INVALID_INPUT
    assert transcriber.calls == []
    assert os.listdir(upload_dir) == []


def test_oversized_upload_stops_copying_at_limit(upload_dir):
    transcriber = FakeTranscriber()
    stream = io.BytesIO(b"\0" * (10 * CHUNK_SIZE))
    result = _service(transcriber, upload_dir, max_audio_bytes=100).transcribe_upload(stream, "a.wav", "audio/wav")

    assert result.kind == ErrorKind.INVALID_INPUT
    assert stream.tell() == CHUNK_SIZE
    assert transcriber.calls == []


def test_cleanup_failure_is_logged_not_raised(upload_dir, monkeypatch, caplog):
    def refuse(path):
        raise PermissionError("read-only volume")

    monkeypatch.setattr("superfeynman.application.transcription_app_service.os.remove", refuse)
    result = _service(FakeTranscriber("ok"), upload_dir).transcribe_upload(io.BytesIO(b"x"), "a.mp3", "audio/mpeg")

    assert result.value == "ok"
    assert "Failed to delete audio file" in caplog.text
