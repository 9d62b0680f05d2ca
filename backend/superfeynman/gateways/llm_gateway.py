"""
LLM Gateway
===========
Every chat-completion call the app makes goes through here:

  - extract_concepts   lecture notes  -> 5-15 reviewable concepts
  - open_session       persona prompt -> the opening question
  - continue_session   full history   -> the next persona reply
  - analyze_feedback   transcript     -> structured FeedbackResult

Provider output is validated and coerced once, here. Nothing past this
module sees raw provider JSON.
"""
from __future__ import annotations
import json
import logging
import re
import time
from typing import Any, Callable, List, Optional

import openai
from openai import OpenAI

from superfeynman.core.config import LLM_API_KEY, LLM_BASE_URL, LLM_MODEL
from superfeynman.domain.common.errors import InvalidCredentials, MalformedProviderResponse
from superfeynman.domain.concept.models import ExtractedConcept
from superfeynman.domain.review.models import FeedbackResult, Message, Role
from superfeynman.domain.review.prompts import OPENING_REQUEST, render_system_prompt
from superfeynman.gateways.retry import call_with_retry, translate_provider_error

logger = logging.getLogger(__name__)

MIN_CONCEPTS = 5
MAX_CONCEPTS = 15

FEEDBACK_LIST_FIELDS = ("clear_parts", "unclear_parts", "jargon_used", "struggled_with")

_FENCED = re.compile(r"```[a-zA-Z]*\s*(.*?)\s*```", re.DOTALL)

EXTRACTION_PROMPT = """You are an expert educator analyzing lecture notes. Your task is to break down these lecture notes into 5-15 bite-sized, distinct concepts that a student should understand and be able to explain using the Feynman Technique.

For each concept, provide:
1. concept_name: A clear, concise name (2-6 words)
2. concept_description: A brief description explaining what the concept is about (1-2 sentences)

IMPORTANT: Return ONLY a valid JSON array with no additional text, markdown formatting, or explanations. The response must be parseable JSON.

Format:
[
  {{
    "concept_name": "Concept Title",
    "concept_description": "Brief explanation of what this concept covers."
  }}
]

Guidelines:
- Extract 5-15 concepts (adjust based on content length and complexity)
- Make concepts specific and testable
- Focus on key ideas that require understanding, not just memorization
- Ensure concepts are distinct and don't overlap significantly
- Use clear, student-friendly language

Lecture Notes:
{notes}"""

FEEDBACK_PROMPT = """You are an educational assessment expert analyzing a student's explanation of a concept.

Concept: "{name}"
Description: "{description}"
Audience Level: {audience}

Here is the conversation transcript:

{transcript}

Based on this conversation, analyze the student's understanding and provide detailed, specific feedback in JSON format:

{{
  "overall_quality": "A brief 1-2 sentence summary of how well they explained the concept",
  "clear_parts": ["Specific aspect 1 they explained well", "Specific aspect 2 they explained well"],
  "unclear_parts": ["Specific aspect 1 that was unclear or missing", "Specific aspect 2 that was unclear"],
  "jargon_used": ["Technical term 1 they used without explanation", "Technical term 2"],
  "struggled_with": ["Specific struggle point 1", "Specific struggle point 2"]
}}

Important:
- Be SPECIFIC, not generic. Reference actual parts of their explanation.
- clear_parts should mention concrete aspects they got right
- unclear_parts should identify gaps or misconceptions
- jargon_used should list technical terms used without proper explanation
- struggled_with should identify conceptual areas where they had difficulty
- Arrays can be empty if not applicable
- Return ONLY valid JSON, no additional text"""


def strip_code_fence(text: str) -> str:
    """Return the body of a ```json ... ``` block if the reply is wrapped in one."""
    text = text.strip()
    match = _FENCED.search(text)
    if match:
        return match.group(1).strip()
    if text.startswith("```"):
        # Opening fence with no closing one (reply cut off by max_tokens)
        return text.split("\n", 1)[1].strip() if "\n" in text else ""
    return text


def _parse_json(text: str, action: str) -> Any:
    body = strip_code_fence(text)
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        logger.error("%s: provider returned invalid JSON: %.200s", action, body)
        raise MalformedProviderResponse(f"Failed to parse AI response for {action}") from e


def build_transcript(history: List[Message]) -> str:
    return "\n\n".join(
        f"{'Student' if m.role == Role.USER.value else 'AI'}: {m.content}" for m in history
    )


class LLMGateway:
    def __init__(
        self,
        client: Optional[OpenAI] = None,
        model: str = LLM_MODEL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if client is None and LLM_API_KEY:
            # Retries are ours; the SDK's own retry loop is switched off
            client = OpenAI(api_key=LLM_API_KEY, base_url=LLM_BASE_URL, max_retries=0)
        self._client = client
        self._model = model
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _complete(
        self,
        messages: List[dict],
        action: str,
        system: str = "",
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> str:
        if self._client is None:
            raise InvalidCredentials("LLM_API_KEY is not configured")

        full_messages = []
        if system:
            full_messages.append({"role": "system", "content": system})
        full_messages.extend(messages)

        def _call():
            return self._client.chat.completions.create(
                model=self._model,
                messages=full_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )

        try:
            response = call_with_retry(_call, label=action, sleep=self._sleep)
        except openai.APIError as e:
            logger.error("%s failed: %s", action, e)
            raise translate_provider_error(e, action) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise MalformedProviderResponse(f"Provider returned an empty reply for {action}")
        return content.strip()

    # ------------------------------------------------------------------
    # Concept extraction
    # ------------------------------------------------------------------
    def extract_concepts(self, note_text: str) -> List[ExtractedConcept]:
        if not note_text or not note_text.strip():
            raise ValueError("Note text is required and must be a non-empty string")

        logger.info("Extracting concepts from lecture notes (%d characters)", len(note_text))
        reply = self._complete(
            [{"role": "user", "content": EXTRACTION_PROMPT.format(notes=note_text)}],
            action="concept extraction",
            max_tokens=3000,
            temperature=0.2,
        )

        items = _parse_json(reply, "concept extraction")
        if not isinstance(items, list):
            raise MalformedProviderResponse("Concept extraction response is not a JSON array")
        if not items:
            logger.warning("Provider returned an empty concepts array")
            return []
        if not MIN_CONCEPTS <= len(items) <= MAX_CONCEPTS:
            logger.warning(
                "Provider returned %d concepts (expected %d-%d)", len(items), MIN_CONCEPTS, MAX_CONCEPTS
            )

        concepts = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object concept entry: %r", item)
                continue
            name = str(item.get("concept_name") or "").strip()
            description = str(item.get("concept_description") or "").strip()
            if not name or not description:
                logger.warning("Skipping concept missing required fields: %r", item)
                continue
            concepts.append(ExtractedConcept(name=name, description=description))

        logger.info("Extracted %d concepts", len(concepts))
        return concepts

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------
    def open_session(self, concept_name: str, concept_description: str, audience: str) -> str:
        system = render_system_prompt(concept_name, concept_description, audience)
        logger.info("Generating opening message for %r at %s level", concept_name, audience)
        return self._complete(
            [{"role": "user", "content": OPENING_REQUEST}],
            action="session opening",
            system=system,
        )

    def continue_session(
        self,
        history: List[Message],
        concept_name: str,
        concept_description: str,
        audience: str,
    ) -> str:
        if not history:
            raise ValueError("Conversation history is required and must be non-empty")
        system = render_system_prompt(concept_name, concept_description, audience)
        # Replay the request that produced the opening line so the exchange starts with a user turn
        messages = [{"role": Role.USER.value, "content": OPENING_REQUEST}]
        messages.extend(m.to_dict() for m in history)
        logger.info("Continuing conversation for %r (%d messages in history)", concept_name, len(history))
        return self._complete(messages, action="conversation turn", system=system)

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------
    def analyze_feedback(
        self,
        history: List[Message],
        concept_name: str,
        concept_description: str,
        audience: str,
    ) -> FeedbackResult:
        if not history:
            raise ValueError("Conversation history is required and must be non-empty")

        prompt = FEEDBACK_PROMPT.format(
            name=concept_name,
            description=concept_description,
            audience=audience,
            transcript=build_transcript(history),
        )
        logger.info("Analyzing feedback for %r (%d messages)", concept_name, len(history))
        reply = self._complete(
            [{"role": "user", "content": prompt}],
            action="feedback analysis",
            max_tokens=2048,
            temperature=0.2,
        )

        data = _parse_json(reply, "feedback analysis")
        if not isinstance(data, dict):
            raise MalformedProviderResponse("Feedback response is not a JSON object")

        overall = data.get("overall_quality")
        if not isinstance(overall, str) or not overall.strip():
            raise MalformedProviderResponse("Invalid feedback: missing overall_quality")

        lists = {}
        for field_name in FEEDBACK_LIST_FIELDS:
            value = data.get(field_name)
            # Absent or non-array fields degrade to empty rather than failing the whole analysis
            lists[field_name] = [str(v) for v in value if v is not None] if isinstance(value, list) else []

        return FeedbackResult(overall_quality=overall.strip(), **lists)
