"""Dependency injection container: wires implementations to interfaces."""
from __future__ import annotations
from functools import lru_cache

from superfeynman.application.concept_app_service import ConceptAppService
from superfeynman.application.concept_extraction import ConceptExtractionPipeline
from superfeynman.application.course_app_service import CourseAppService
from superfeynman.application.review_app_service import ReviewAppService
from superfeynman.application.transcription_app_service import TranscriptionAppService
from superfeynman.core.config import MAX_AUDIO_BYTES, MAX_NOTES_BYTES, REVIEW_MAX_TURNS, UPLOAD_DIR
from superfeynman.gateways.llm_gateway import LLMGateway
from superfeynman.gateways.transcription_gateway import TranscriptionGateway
from superfeynman.persistence.repositories.sqlite.sqlite_concept_repository import SqliteConceptRepository
from superfeynman.persistence.repositories.sqlite.sqlite_course_repository import (
    SqliteCourseRepository,
    SqliteLectureRepository,
)
from superfeynman.persistence.repositories.sqlite.sqlite_review_session_repository import (
    SqliteReviewSessionRepository,
)


@lru_cache(maxsize=1)
def get_course_repo() -> SqliteCourseRepository:
    return SqliteCourseRepository()


@lru_cache(maxsize=1)
def get_lecture_repo() -> SqliteLectureRepository:
    return SqliteLectureRepository()


@lru_cache(maxsize=1)
def get_concept_repo() -> SqliteConceptRepository:
    return SqliteConceptRepository()


@lru_cache(maxsize=1)
def get_session_repo() -> SqliteReviewSessionRepository:
    return SqliteReviewSessionRepository()


@lru_cache(maxsize=1)
def get_llm_gateway() -> LLMGateway:
    return LLMGateway()


@lru_cache(maxsize=1)
def get_transcription_gateway() -> TranscriptionGateway:
    return TranscriptionGateway()


@lru_cache(maxsize=1)
def get_course_app_service() -> CourseAppService:
    return CourseAppService(
        courses=get_course_repo(),
        lectures=get_lecture_repo(),
        extraction=ConceptExtractionPipeline(concepts=get_concept_repo(), llm=get_llm_gateway()),
        max_notes_bytes=MAX_NOTES_BYTES,
    )


@lru_cache(maxsize=1)
def get_concept_app_service() -> ConceptAppService:
    return ConceptAppService(concepts=get_concept_repo(), lectures=get_lecture_repo())


@lru_cache(maxsize=1)
def get_review_app_service() -> ReviewAppService:
    return ReviewAppService(
        concepts=get_concept_repo(),
        sessions=get_session_repo(),
        llm=get_llm_gateway(),
        max_turns=REVIEW_MAX_TURNS,
    )


@lru_cache(maxsize=1)
def get_transcription_app_service() -> TranscriptionAppService:
    return TranscriptionAppService(
        gateway=get_transcription_gateway(),
        upload_dir=UPLOAD_DIR,
        max_audio_bytes=MAX_AUDIO_BYTES,
    )
