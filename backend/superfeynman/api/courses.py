"""Course and lecture endpoints."""
from __future__ import annotations
import os
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from pydantic import BaseModel

from superfeynman.api.concepts import serialize_concept
from superfeynman.api.errors import raise_for_result
from superfeynman.api.rate_limit import limiter
from superfeynman.application.course_app_service import CourseAppService
from superfeynman.container import get_course_app_service
from superfeynman.core.config import RATE_LIMIT_UPLOADS
from superfeynman.domain.course.models import Course, Lecture

router = APIRouter(tags=["courses"])

ALLOWED_NOTE_EXTENSIONS = {".txt"}
ALLOWED_NOTE_MIME_TYPES = {"text/plain"}


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class CourseBody(BaseModel):
    name: Any = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_course(c: Course) -> dict:
    return {"id": c.id, "name": c.name, "created_at": c.created_at}


def _serialize_lecture(lec: Lecture) -> dict:
    return {
        "id": lec.id,
        "course_id": lec.course_id,
        "name": lec.name,
        "file_content": lec.file_content,
        "created_at": lec.created_at,
    }


def _read_notes(upload: Optional[UploadFile]) -> Optional[str]:
    """None when no file was sent; raises 400 for anything that is not UTF-8 plain text."""
    if upload is None:
        return None
    ext = os.path.splitext(upload.filename or "")[1].lower()
    mime = (upload.content_type or "").split(";")[0].strip()
    if ext not in ALLOWED_NOTE_EXTENSIONS or mime not in ALLOWED_NOTE_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Only .txt files (text/plain MIME type) are allowed")
    try:
        return upload.file.read().decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text")


# ------------------------------------------------------------------
# Course endpoints
# ------------------------------------------------------------------
@router.post("/courses", status_code=status.HTTP_201_CREATED)
def create_course(
    body: CourseBody,
    svc: CourseAppService = Depends(get_course_app_service),
):
    result = svc.create_course(body.name if isinstance(body.name, str) else None)
    if not result.is_success:
        raise_for_result(result)
    return _serialize_course(result.value)


@router.get("/courses")
def list_courses(svc: CourseAppService = Depends(get_course_app_service)):
    return [_serialize_course(c) for c in svc.list_courses()]


@router.delete("/courses/{course_id}")
def delete_course(
    course_id: str,
    svc: CourseAppService = Depends(get_course_app_service),
):
    result = svc.delete_course(course_id)
    if not result.is_success:
        raise_for_result(result)
    return {"message": "Course deleted successfully", "id": result.value}


# ------------------------------------------------------------------
# Lecture endpoints
# ------------------------------------------------------------------
@router.post("/lectures", status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_UPLOADS)
def create_lecture(
    request: Request,
    courseId: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    svc: CourseAppService = Depends(get_course_app_service),
):
    result = svc.create_lecture(courseId, name, _read_notes(file))
    if not result.is_success:
        raise_for_result(result)
    created = result.value
    response = {
        **_serialize_lecture(created.lecture),
        "concepts": [serialize_concept(c) for c in created.concepts],
    }
    if created.concepts_generation_error:
        response["concepts_generation_error"] = created.concepts_generation_error
    return response


@router.get("/lectures/{course_id}")
def list_lectures(
    course_id: str,
    svc: CourseAppService = Depends(get_course_app_service),
):
    result = svc.list_lectures(course_id)
    if not result.is_success:
        raise_for_result(result)
    return [_serialize_lecture(lec) for lec in result.value]


@router.delete("/lectures/{lecture_id}")
def delete_lecture(
    lecture_id: str,
    svc: CourseAppService = Depends(get_course_app_service),
):
    result = svc.delete_lecture(lecture_id)
    if not result.is_success:
        raise_for_result(result)
    return {"message": "Lecture deleted successfully", "id": result.value}
