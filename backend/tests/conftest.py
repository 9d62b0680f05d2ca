import pytest
from fastapi.testclient import TestClient

from fakes import FakeLLM, FakeTranscriber
from superfeynman.persistence import db
from superfeynman.domain.concept.models import ExtractedConcept
from superfeynman.persistence.repositories.sqlite.sqlite_concept_repository import SqliteConceptRepository
from superfeynman.persistence.repositories.sqlite.sqlite_course_repository import (
    SqliteCourseRepository,
    SqliteLectureRepository,
)

NOW = "2026-01-05T10:00:00+00:00"


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Fresh sqlite file per test."""
    path = tmp_path / "superfeynman-test.db"
    monkeypatch.setattr(db, "DATABASE_PATH", str(path))
    db.init_db()
    return path


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def lecture(database):
    course = SqliteCourseRepository().create("Physics 101", created_at=NOW)
    return SqliteLectureRepository().create(course.id, "Thermodynamics", "Entropy notes", created_at=NOW)


@pytest.fixture
def concept_id(lecture):
    ids = SqliteConceptRepository().create_many(
        lecture.id,
        [ExtractedConcept(name="Entropy", description="A measure of disorder")],
        created_at=NOW,
    )
    return ids[0]


@pytest.fixture
def client(database, llm, transcriber, tmp_path):
    from superfeynman import container
    from superfeynman.application.concept_app_service import ConceptAppService
    from superfeynman.application.concept_extraction import ConceptExtractionPipeline
    from superfeynman.application.course_app_service import CourseAppService
    from superfeynman.application.review_app_service import ReviewAppService
    from superfeynman.application.transcription_app_service import TranscriptionAppService
    from superfeynman.api.rate_limit import limiter
    from superfeynman.main import app
    from superfeynman.persistence.repositories.sqlite.sqlite_review_session_repository import (
        SqliteReviewSessionRepository,
    )

    concepts = SqliteConceptRepository()
    lectures = SqliteLectureRepository()
    app.dependency_overrides[container.get_course_app_service] = lambda: CourseAppService(
        courses=SqliteCourseRepository(),
        lectures=lectures,
        extraction=ConceptExtractionPipeline(concepts=concepts, llm=llm),
        max_notes_bytes=1024,
    )
    app.dependency_overrides[container.get_concept_app_service] = lambda: ConceptAppService(
        concepts=concepts, lectures=lectures
    )
    review = ReviewAppService(concepts=concepts, sessions=SqliteReviewSessionRepository(), llm=llm)
    app.dependency_overrides[container.get_review_app_service] = lambda: review
    app.dependency_overrides[container.get_transcription_app_service] = lambda: TranscriptionAppService(
        gateway=transcriber, upload_dir=str(tmp_path / "uploads"), max_audio_bytes=1024
    )
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()
