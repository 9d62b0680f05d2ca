"""Speech-to-text gateway: one audio clip in, plain text out."""
from __future__ import annotations
import logging
import time
from typing import Callable, Optional

import openai
from openai import OpenAI

from superfeynman.core.config import OPENAI_API_KEY, OPENAI_BASE_URL, TRANSCRIPTION_MODEL
from superfeynman.domain.common.errors import InvalidCredentials, TranscriptionFailed
from superfeynman.gateways.retry import call_with_retry, translate_provider_error

logger = logging.getLogger(__name__)

# Extension the provider uses to sniff the container format
MIME_EXTENSIONS: dict[str, str] = {
    "audio/webm": ".webm",
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
    "audio/mp4": ".m4a",
    "audio/x-m4a": ".m4a",
}


class TranscriptionGateway:
    def __init__(
        self,
        client: Optional[OpenAI] = None,
        model: str = TRANSCRIPTION_MODEL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if client is None and OPENAI_API_KEY:
            client = OpenAI(api_key=OPENAI_API_KEY, base_url=OPENAI_BASE_URL, max_retries=0)
        self._client = client
        self._model = model
        self._sleep = sleep

    def transcribe(self, audio_bytes: bytes, mime_hint: str, filename: Optional[str] = None) -> str:
        if not audio_bytes:
            raise ValueError("Audio content is required")
        if self._client is None:
            raise InvalidCredentials("OPENAI_API_KEY is not configured")

        upload_name = filename or "audio" + MIME_EXTENSIONS.get(mime_hint, ".webm")
        logger.info("Transcribing %s (%d bytes, %s)", upload_name, len(audio_bytes), mime_hint)

        def _call():
            return self._client.audio.transcriptions.create(
                model=self._model,
                file=(upload_name, audio_bytes, mime_hint),
            )

        try:
            transcription = call_with_retry(_call, label="transcription", sleep=self._sleep)
        except openai.APIError as e:
            logger.error("Transcription failed: %s", e)
            raise translate_provider_error(e, "transcription", fallback=TranscriptionFailed) from e

        text = (getattr(transcription, "text", None) or "").strip()
        logger.info("Transcription successful (%d characters)", len(text))
        return text
