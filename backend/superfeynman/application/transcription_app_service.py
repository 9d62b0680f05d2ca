"""Application service for voice answers: validate the clip, transcribe, always clean up."""
from __future__ import annotations
import logging
import os
import uuid
from typing import BinaryIO, Optional, Tuple

from superfeynman.domain.common.errors import ProviderError
from superfeynman.domain.common.result import Result
from superfeynman.gateways.transcription_gateway import TranscriptionGateway

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ALLOWED_AUDIO_EXTENSIONS = {".webm", ".mp3", ".wav", ".m4a"}
ALLOWED_AUDIO_MIME_TYPES = {
    "audio/webm",
    "audio/mpeg",
    "audio/mp3",
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/mp4",
    "audio/x-m4a",
    "application/octet-stream",  # browsers that cannot detect the type
}

def validate_audio(filename: Optional[str], mime_type: Optional[str]) -> Result[str]:
    """Returns the lower-cased extension."""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_AUDIO_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_AUDIO_EXTENSIONS))
        return Result.fail(f"Only audio files are allowed ({allowed})")
    if (mime_type or "") not in ALLOWED_AUDIO_MIME_TYPES:
        return Result.fail(f"Invalid audio MIME type: {mime_type}")
    return Result.ok(ext)

class TranscriptionAppService:
    def __init__(self, gateway: TranscriptionGateway, upload_dir: str, max_audio_bytes: int):
        self._gateway = gateway
        self._upload_dir = upload_dir
        self._max_audio_bytes = max_audio_bytes

    def transcribe_upload(self, stream: BinaryIO, filename: Optional[str], mime_type: Optional[str]) -> Result[str]:
        valid = validate_audio(filename, mime_type)
        if not valid.is_success:
            return Result.fail(valid.error, valid.kind)

        path, written = self._spool(stream, valid.value)
        try:
            if written > self._max_audio_bytes:
                return Result.fail(f"Audio file exceeds maximum size of {self._max_audio_bytes // (1024 * 1024)}MB")
            if written == 0:
                return Result.fail("Audio file is empty")
            with open(path, "rb") as f:
                audio = f.read()
            try:
                text = self._gateway.transcribe(audio, mime_type, filename=os.path.basename(path))
            except ProviderError as e:
                return Result.fail(str(e), e.kind)
            return Result.ok(text)
        finally:
            self._cleanup(path)

    def _spool(self, stream: BinaryIO, ext: str) -> Tuple[str, int]:
        """Copy the upload to disk, stopping once it passes the size limit. Returns (path, bytes written)."""
        os.makedirs(self._upload_dir, exist_ok=True)
        path = os.path.join(self._upload_dir, f"audio-{uuid.uuid4().hex}{ext}")
        written = 0
        with open(path, "wb") as out:
            while written <= self._max_audio_bytes:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                out.write(chunk)
                written += len(chunk)
        return path, written

    def _cleanup(self, path: str) -> None:
        # Cleanup trouble is logged, never surfaced to the caller
        try:
            os.remove(path)
            logger.info("Cleaned up audio file: %s", path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Failed to delete audio file %s: %s", path, e)
