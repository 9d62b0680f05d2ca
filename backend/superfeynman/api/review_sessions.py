"""Review session endpoints: start, converse, end."""
from __future__ import annotations
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from superfeynman.api.errors import raise_for_result
from superfeynman.application.review_app_service import ReviewAppService
from superfeynman.container import get_review_app_service
from superfeynman.domain.review.models import ReviewSession

router = APIRouter(prefix="/review-sessions", tags=["review-sessions"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
# Loosely typed: bad values become 400s from the rule layer, not 422s
class StartSessionBody(BaseModel):
    concept_id: Any = None
    audience_level: Any = None


class MessageBody(BaseModel):
    user_message: Any = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_session(s: ReviewSession) -> dict:
    return {
        "id": s.id,
        "concept_id": s.concept_id,
        "audience_level": s.audience_level,
        "state": s.state.value,
        "conversation_history": [m.to_dict() for m in s.conversation_history],
        "feedback": s.feedback.to_dict() if s.feedback else None,
        "created_at": s.created_at,
        "ended_at": s.ended_at,
    }


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
def start_session(
    body: StartSessionBody,
    svc: ReviewAppService = Depends(get_review_app_service),
):
    result = svc.start_session(body.concept_id, body.audience_level)
    if not result.is_success:
        raise_for_result(result)
    session = result.value
    return {
        "session_id": session.id,
        "initial_message": session.conversation_history[0].content,
    }


@router.get("/{session_id}")
def get_session(
    session_id: str,
    svc: ReviewAppService = Depends(get_review_app_service),
):
    result = svc.get_session(session_id)
    if not result.is_success:
        raise_for_result(result)
    return _serialize_session(result.value)


@router.post("/{session_id}/message")
def send_message(
    session_id: str,
    body: MessageBody,
    svc: ReviewAppService = Depends(get_review_app_service),
):
    result = svc.send_message(session_id, body.user_message)
    if not result.is_success:
        raise_for_result(result)
    return {"ai_response": result.value.conversation_history[-1].content}


@router.post("/{session_id}/end")
def end_session(
    session_id: str,
    svc: ReviewAppService = Depends(get_review_app_service),
):
    result = svc.end_session(session_id)
    if not result.is_success:
        raise_for_result(result)
    outcome = result.value
    return {
        "feedback": outcome.feedback.to_dict(),
        "old_status": outcome.old_status,
        "new_status": outcome.new_status,
    }
