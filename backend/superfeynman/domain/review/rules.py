"""Business rules for review sessions: input checks and the Active/Ended guard."""
from __future__ import annotations

from superfeynman.domain.common.errors import ErrorKind
from superfeynman.domain.common.result import Result
from superfeynman.domain.review.models import AudienceLevel, ReviewSession, SessionState

VALID_AUDIENCE_LEVELS = [a.value for a in AudienceLevel]


def validate_audience_level(audience_level: str | None) -> Result[str]:
    if not isinstance(audience_level, str) or audience_level not in VALID_AUDIENCE_LEVELS:
        return Result.fail(
            f"Audience level must be one of: {', '.join(VALID_AUDIENCE_LEVELS)}",
            ErrorKind.INVALID_INPUT,
        )
    return Result.ok(audience_level)


def validate_user_message(text: str | None) -> Result[str]:
    message = (text or "").strip() if isinstance(text, str) else ""
    if not message:
        return Result.fail(
            "User message is required and must be a non-empty string",
            ErrorKind.INVALID_INPUT,
        )
    return Result.ok(message)


def ensure_active(session: ReviewSession) -> Result[ReviewSession]:
    if session.state is SessionState.ENDED:
        return Result.fail(
            f"Review session {session.id} has already ended",
            ErrorKind.INVALID_STATE,
        )
    return Result.ok(session)


def ensure_turn_available(session: ReviewSession, max_turns: int) -> Result[ReviewSession]:
    """max_turns <= 0 means the caller enforces its own limit."""
    if max_turns > 0 and session.user_turns >= max_turns:
        return Result.fail(
            f"Review session {session.id} reached its limit of {max_turns} turns; end the session",
            ErrorKind.INVALID_STATE,
        )
    return Result.ok(session)
