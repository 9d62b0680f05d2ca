"""Concept endpoints + service health check."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from superfeynman.api.errors import raise_for_result
from superfeynman.api.rate_limit import limiter
from superfeynman.application.concept_app_service import ConceptAppService
from superfeynman.container import get_concept_app_service
from superfeynman.domain.concept.models import Concept
from superfeynman.persistence.db import ping

router = APIRouter(tags=["concepts"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class ProgressBody(BaseModel):
    progress_status: Any = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def serialize_concept(c: Concept) -> dict:
    return {
        "id": c.id,
        "lecture_id": c.lecture_id,
        "concept_name": c.name,
        "concept_description": c.description,
        "progress_status": c.progress_status,
        "last_reviewed": c.last_reviewed,
        "created_at": c.created_at,
    }


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
@router.get("/health")
@limiter.exempt
def health():
    timestamp = datetime.now(timezone.utc).isoformat()
    if not ping():
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": "disconnected", "timestamp": timestamp},
        )
    return {"status": "ok", "database": "connected", "timestamp": timestamp}


# ------------------------------------------------------------------
# Concept endpoints
# ------------------------------------------------------------------
@router.get("/concepts/{lecture_id}")
def list_concepts(
    lecture_id: str,
    svc: ConceptAppService = Depends(get_concept_app_service),
):
    result = svc.list_for_lecture(lecture_id)
    if not result.is_success:
        raise_for_result(result)
    return [serialize_concept(c) for c in result.value]


@router.patch("/concepts/{concept_id}/progress")
def update_progress(
    concept_id: str,
    body: ProgressBody,
    svc: ConceptAppService = Depends(get_concept_app_service),
):
    result = svc.update_progress(concept_id, body.progress_status)
    if not result.is_success:
        raise_for_result(result)
    return serialize_concept(result.value)


@router.delete("/concepts/{concept_id}")
def delete_concept(
    concept_id: str,
    svc: ConceptAppService = Depends(get_concept_app_service),
):
    result = svc.delete_concept(concept_id)
    if not result.is_success:
        raise_for_result(result)
    return {"message": "Concept deleted successfully", "id": result.value}
