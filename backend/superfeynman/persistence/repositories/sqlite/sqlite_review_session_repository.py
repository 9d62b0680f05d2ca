"""SQLite implementation of ReviewSessionRepository."""
from __future__ import annotations
import json
from typing import List, Optional

from superfeynman.domain.review.models import FeedbackResult, Message, ReviewSession, Role
from superfeynman.persistence.db import get_connection
from superfeynman.persistence.interfaces.review_session_repository import (
    ReviewSessionRepository,
    StoredHistoryCorrupted,
)

_ROLES = {r.value for r in Role}


def encode_history(messages: List[Message]) -> str:
    return json.dumps([m.to_dict() for m in messages], ensure_ascii=False)


def decode_history(raw: str) -> List[Message]:
    try:
        items = json.loads(raw or "[]")
    except json.JSONDecodeError as e:
        raise StoredHistoryCorrupted(f"conversation_history is not valid JSON: {e}") from e
    if not isinstance(items, list):
        raise StoredHistoryCorrupted("conversation_history is not a list")
    messages = []
    for item in items:
        if (
            not isinstance(item, dict)
            or item.get("role") not in _ROLES
            or not isinstance(item.get("content"), str)
        ):
            raise StoredHistoryCorrupted(f"conversation_history holds an invalid entry: {item!r}")
        messages.append(Message(role=item["role"], content=item["content"]))
    return messages


def _decode_feedback(raw: Optional[str]) -> Optional[FeedbackResult]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StoredHistoryCorrupted(f"feedback is not valid JSON: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("overall_quality"), str):
        raise StoredHistoryCorrupted("feedback is not an object with overall_quality")
    for field_name in ("clear_parts", "unclear_parts", "jargon_used", "struggled_with"):
        if not isinstance(data.get(field_name, []), list):
            raise StoredHistoryCorrupted(f"feedback.{field_name} is not a list")
    return FeedbackResult(
        overall_quality=data.get("overall_quality", ""),
        clear_parts=data.get("clear_parts", []),
        unclear_parts=data.get("unclear_parts", []),
        jargon_used=data.get("jargon_used", []),
        struggled_with=data.get("struggled_with", []),
    )


def _row_to_session(row) -> ReviewSession:
    return ReviewSession(
        id=row["id"],
        concept_id=row["concept_id"],
        audience_level=row["audience_level"],
        conversation_history=decode_history(row["conversation_history"]),
        created_at=row["created_at"],
        feedback=_decode_feedback(row["feedback"]),
        ended_at=row["ended_at"],
    )


class SqliteReviewSessionRepository(ReviewSessionRepository):

    def create(self, session: ReviewSession) -> int:
        conn = get_connection()
        cur = conn.execute(
            """
            INSERT INTO review_sessions (concept_id, audience_level, conversation_history, created_at)
            VALUES (:concept_id, :audience_level, :conversation_history, :created_at)
            """,
            {
                "concept_id": session.concept_id,
                "audience_level": session.audience_level,
                "conversation_history": encode_history(session.conversation_history),
                "created_at": session.created_at,
            },
        )
        conn.commit()
        conn.close()
        session.id = cur.lastrowid
        return cur.lastrowid

    def get_by_id(self, session_id: int) -> Optional[ReviewSession]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM review_sessions WHERE id = ?", (session_id,)).fetchone()
        conn.close()
        return _row_to_session(row) if row else None

    def append_history(self, session_id: int, messages: List[Message]) -> bool:
        conn = get_connection()
        try:
            # Read-modify-write under one write lock so appends never interleave
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT conversation_history FROM review_sessions WHERE id = ?",
                (session_id,),
            ).fetchone()
            if row is None:
                conn.rollback()
                return False
            history = decode_history(row["conversation_history"]) + list(messages)
            conn.execute(
                "UPDATE review_sessions SET conversation_history = ? WHERE id = ?",
                (encode_history(history), session_id),
            )
            conn.commit()
            return True
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def finish(
        self,
        session_id: int,
        feedback: FeedbackResult,
        ended_at: str,
        concept_id: int,
        new_status: str,
    ) -> bool:
        conn = get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            # Claim the session first; only one End can win
            claimed = conn.execute(
                "UPDATE review_sessions SET feedback = ?, ended_at = ? WHERE id = ? AND ended_at IS NULL",
                (json.dumps(feedback.to_dict(), ensure_ascii=False), ended_at, session_id),
            )
            if claimed.rowcount == 0:
                conn.rollback()
                return False
            conn.execute(
                "UPDATE concepts SET progress_status = ?, last_reviewed = ? WHERE id = ?",
                (new_status, ended_at, concept_id),
            )
            conn.commit()
            return True
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
