"""Error kinds shared by every layer, plus the exceptions raised by provider gateways."""
from __future__ import annotations
from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    MALFORMED_PROVIDER_RESPONSE = "malformed_provider_response"
    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    PROVIDER_CALL_FAILED = "provider_call_failed"
    TRANSCRIPTION_FAILED = "transcription_failed"
    STORAGE_CORRUPTED = "storage_corrupted"


class ProviderError(Exception):
    """Base class for failures coming out of the LLM / speech-to-text gateways."""

    kind: ErrorKind = ErrorKind.PROVIDER_CALL_FAILED


class MalformedProviderResponse(ProviderError):
    kind = ErrorKind.MALFORMED_PROVIDER_RESPONSE


class InvalidCredentials(ProviderError):
    kind = ErrorKind.INVALID_CREDENTIALS


class RateLimited(ProviderError):
    kind = ErrorKind.RATE_LIMITED


class ProviderCallFailed(ProviderError):
    kind = ErrorKind.PROVIDER_CALL_FAILED


class TranscriptionFailed(ProviderError):
    kind = ErrorKind.TRANSCRIPTION_FAILED
