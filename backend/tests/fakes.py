"""Stand-ins for the provider gateways and the openai SDK client."""
from __future__ import annotations
import time
from types import SimpleNamespace

import httpx
import openai

from superfeynman.domain.concept.models import ExtractedConcept
from superfeynman.domain.review.models import FeedbackResult

_REQUEST = httpx.Request("POST", "https://provider.test/v1/chat/completions")


def status_error(cls, code: int):
    """Build a real openai status error, e.g. status_error(openai.RateLimitError, 429)."""
    return cls(f"error {code}", response=httpx.Response(code, request=_REQUEST), body=None)


def connection_error():
    return openai.APIConnectionError(request=_REQUEST)


# ------------------------------------------------------------------
# openai client doubles
# ------------------------------------------------------------------
class _Endpoint:
    def __init__(self, outcomes, wrap):
        self.outcomes = list(outcomes)
        self.calls = []
        self._wrap = wrap

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return self._wrap(outcome)


def _chat_response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class FakeOpenAI:
    """Each outcome is either reply text or an exception to raise, consumed in order."""

    def __init__(self, outcomes):
        self.chat = SimpleNamespace(completions=_Endpoint(outcomes, _chat_response))
        self.audio = SimpleNamespace(transcriptions=_Endpoint(outcomes, lambda t: SimpleNamespace(text=t)))

    @property
    def chat_calls(self):
        return self.chat.completions.calls

    @property
    def audio_calls(self):
        return self.audio.transcriptions.calls


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


# ------------------------------------------------------------------
# Gateway doubles
# ------------------------------------------------------------------
class FakeLLM:
    def __init__(self):
        self.extracted = [
            ExtractedConcept(name="Entropy", description="A measure of disorder"),
            ExtractedConcept(name="Second Law", description="Entropy of an isolated system never decreases"),
        ]
        self.opening = "Ooh, what is entropy?"
        self.feedback = FeedbackResult(
            overall_quality="Good intuition, light on detail.",
            clear_parts=["Messiness grows over time"],
            jargon_used=["isolated system"],
        )
        self.fail_with = {}
        self.calls = []
        self.histories = []
        self.delay = 0.0

    def _enter(self, name):
        self.calls.append(name)
        if self.delay:
            time.sleep(self.delay)
        if name in self.fail_with:
            raise self.fail_with[name]

    def extract_concepts(self, note_text):
        self._enter("extract_concepts")
        return list(self.extracted)

    def open_session(self, concept_name, concept_description, audience):
        self._enter("open_session")
        return self.opening

    def continue_session(self, history, concept_name, concept_description, audience):
        self.histories.append(list(history))
        self._enter("continue_session")
        return f"Reply to: {history[-1].content}"

    def analyze_feedback(self, history, concept_name, concept_description, audience):
        self.histories.append(list(history))
        self._enter("analyze_feedback")
        return self.feedback


class FakeTranscriber:
    def __init__(self, text="hello from the microphone"):
        self.text = text
        self.error = None
        self.calls = []

    def transcribe(self, audio_bytes, mime_hint, filename=None):
        self.calls.append((audio_bytes, mime_hint, filename))
        if self.error:
            raise self.error
        return self.text
