"""Domain service: pure state transitions for a review session. No I/O."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import List

from superfeynman.domain.common.result import Result
from superfeynman.domain.concept.rules import next_status
from superfeynman.domain.review.models import (
    FeedbackResult,
    Message,
    ReviewSession,
    Role,
    SessionOutcome,
)
from superfeynman.domain.review.rules import ensure_active


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ReviewDomainService:
    """
    Builds and advances ReviewSession values. The application layer
    calls the provider first, then one of these, then persists the result.
    """

    def open_session(self, concept_id: int, audience_level: str, opening_message: str) -> ReviewSession:
        """A session only exists once the persona's first line does."""
        return ReviewSession(
            id=None,
            concept_id=concept_id,
            audience_level=audience_level,
            conversation_history=[Message(role=Role.ASSISTANT.value, content=opening_message)],
            created_at=_now_iso(),
        )

    def pending_history(self, session: ReviewSession, user_text: str) -> List[Message]:
        """History to send to the provider: stored turns plus the new user line. Does not mutate."""
        return list(session.conversation_history) + [Message(role=Role.USER.value, content=user_text)]

    def record_turn(self, session: ReviewSession, user_text: str, reply: str) -> Result[List[Message]]:
        """Append one user/assistant pair and return the two new entries."""
        guard = ensure_active(session)
        if not guard.is_success:
            return Result.fail(guard.error, guard.kind)
        appended = [
            Message(role=Role.USER.value, content=user_text),
            Message(role=Role.ASSISTANT.value, content=reply),
        ]
        session.conversation_history.extend(appended)
        return Result.ok(appended)

    def complete(self, session: ReviewSession, feedback: FeedbackResult, current_status: str) -> Result[SessionOutcome]:
        """Close the session and compute the concept's next mastery status."""
        guard = ensure_active(session)
        if not guard.is_success:
            return Result.fail(guard.error, guard.kind)
        session.feedback = feedback
        session.ended_at = _now_iso()
        return Result.ok(
            SessionOutcome(
                feedback=feedback,
                old_status=current_status,
                new_status=next_status(current_status),
            )
        )
