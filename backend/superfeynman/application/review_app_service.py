"""
Application service for review sessions: the Start / SendMessage / End state machine.

Each transition validates, loads rows, calls the LLM gateway, and only then
persists. A failed provider call leaves stored state exactly as it was.
"""
from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from superfeynman.domain.common.errors import ErrorKind, ProviderError
from superfeynman.domain.common.result import Result
from superfeynman.domain.course.rules import validate_positive_id
from superfeynman.domain.review.models import ReviewSession, SessionOutcome
from superfeynman.domain.review.rules import (
    ensure_active,
    ensure_turn_available,
    validate_audience_level,
    validate_user_message,
)
from superfeynman.domain.review.service import ReviewDomainService
from superfeynman.gateways.llm_gateway import LLMGateway
from superfeynman.persistence.interfaces.concept_repository import ConceptRepository
from superfeynman.persistence.interfaces.review_session_repository import (
    ReviewSessionRepository,
    StoredHistoryCorrupted,
)

logger = logging.getLogger(__name__)


class SessionLocks:
    """
    One lock per session id; transitions on the same session run one at a time.
    An entry lives only while some caller holds or waits on it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, list] = {}  # session id -> [lock, holders]

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, session_id: int) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(session_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[session_id]


class ReviewAppService:
    def __init__(
        self,
        concepts: ConceptRepository,
        sessions: ReviewSessionRepository,
        llm: LLMGateway,
        max_turns: int = 0,
    ):
        self._concepts = concepts
        self._sessions = sessions
        self._llm = llm
        self._max_turns = max_turns
        self._domain = ReviewDomainService()
        self._locks = SessionLocks()

    # ------------------------------------------------------------------
    # START
    # ------------------------------------------------------------------
    def start_session(self, concept_id, audience_level: Optional[str]) -> Result[ReviewSession]:
        parsed = validate_positive_id(concept_id, "concept")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        audience = validate_audience_level(audience_level)
        if not audience.is_success:
            return Result.fail(audience.error, audience.kind)

        concept = self._concepts.get_by_id(parsed.value)
        if not concept:
            return Result.fail("Concept not found", ErrorKind.NOT_FOUND)

        try:
            opening = self._llm.open_session(concept.name, concept.description, audience.value)
        except ProviderError as e:
            logger.error("Starting review session for concept %s failed: %s", concept.id, e)
            return Result.fail(str(e), e.kind)

        session = self._domain.open_session(concept.id, audience.value, opening)
        self._sessions.create(session)
        logger.info("Created review session %s for concept %r", session.id, concept.name)
        return Result.ok(session)

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def get_session(self, session_id) -> Result[ReviewSession]:
        parsed = validate_positive_id(session_id, "session")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        return self._load(parsed.value)

    def _load(self, session_id: int) -> Result[ReviewSession]:
        try:
            session = self._sessions.get_by_id(session_id)
        except StoredHistoryCorrupted as e:
            logger.error("Session %s has unreadable history: %s", session_id, e)
            return Result.fail("Invalid conversation history in database", ErrorKind.STORAGE_CORRUPTED)
        if not session:
            return Result.fail("Session not found", ErrorKind.NOT_FOUND)
        return Result.ok(session)

    # ------------------------------------------------------------------
    # SEND MESSAGE
    # ------------------------------------------------------------------
    def send_message(self, session_id, user_message: Optional[str]) -> Result[ReviewSession]:
        """Returns the session with the new user/assistant pair appended."""
        parsed = validate_positive_id(session_id, "session")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        text = validate_user_message(user_message)
        if not text.is_success:
            return Result.fail(text.error, text.kind)

        with self._locks.hold(parsed.value):
            loaded = self._load(parsed.value)
            if not loaded.is_success:
                return loaded
            session = loaded.value

            for guard in (ensure_active(session), ensure_turn_available(session, self._max_turns)):
                if not guard.is_success:
                    return Result.fail(guard.error, guard.kind)

            concept = self._concepts.get_by_id(session.concept_id)
            if not concept:
                return Result.fail("Associated concept not found", ErrorKind.NOT_FOUND)

            try:
                reply = self._llm.continue_session(
                    self._domain.pending_history(session, text.value),
                    concept.name,
                    concept.description,
                    session.audience_level,
                )
            except ProviderError as e:
                logger.error("Session %s: message failed: %s", session.id, e)
                return Result.fail(str(e), e.kind)

            recorded = self._domain.record_turn(session, text.value, reply)
            if not recorded.is_success:
                return Result.fail(recorded.error, recorded.kind)
            if not self._sessions.append_history(session.id, recorded.value):
                return Result.fail("Session not found", ErrorKind.NOT_FOUND)

            logger.info(
                "Session %s: added user message and AI response (%d total messages)",
                session.id, len(session.conversation_history),
            )
            return Result.ok(session)

    # ------------------------------------------------------------------
    # END
    # ------------------------------------------------------------------
    def end_session(self, session_id) -> Result[SessionOutcome]:
        parsed = validate_positive_id(session_id, "session")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)

        with self._locks.hold(parsed.value):
            loaded = self._load(parsed.value)
            if not loaded.is_success:
                return Result.fail(loaded.error, loaded.kind)
            session = loaded.value

            guard = ensure_active(session)
            if not guard.is_success:
                return Result.fail(guard.error, guard.kind)

            concept = self._concepts.get_by_id(session.concept_id)
            if not concept:
                return Result.fail("Associated concept not found", ErrorKind.NOT_FOUND)

            try:
                feedback = self._llm.analyze_feedback(
                    session.conversation_history,
                    concept.name,
                    concept.description,
                    session.audience_level,
                )
            except ProviderError as e:
                logger.error("Session %s: feedback analysis failed: %s", session.id, e)
                return Result.fail(str(e), e.kind)

            completed = self._domain.complete(session, feedback, concept.progress_status)
            if not completed.is_success:
                return Result.fail(completed.error, completed.kind)
            outcome = completed.value

            if not self._sessions.finish(session.id, feedback, session.ended_at, concept.id, outcome.new_status):
                # Another End claimed the session first, or it was deleted meanwhile
                if self._sessions.get_by_id(session.id) is None:
                    return Result.fail("Session not found", ErrorKind.NOT_FOUND)
                return Result.fail(f"Review session {session.id} has already ended", ErrorKind.INVALID_STATE)

            logger.info(
                "Session %s: updated concept %s from %r to %r",
                session.id, concept.id, outcome.old_status, outcome.new_status,
            )
            return Result.ok(outcome)
