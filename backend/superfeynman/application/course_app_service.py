"""Application service: courses, lectures, and the extraction step that follows a lecture upload."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from superfeynman.application.concept_extraction import ConceptExtractionPipeline
from superfeynman.domain.common.errors import ErrorKind
from superfeynman.domain.common.result import Result
from superfeynman.domain.concept.models import Concept
from superfeynman.domain.course.models import Course, Lecture
from superfeynman.domain.course.rules import validate_name, validate_note_content, validate_positive_id
from superfeynman.persistence.interfaces.course_repository import CourseRepository, LectureRepository


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class CreatedLecture:
    lecture: Lecture
    concepts: List[Concept] = field(default_factory=list)
    concepts_generation_error: Optional[str] = None


class CourseAppService:
    def __init__(
        self,
        courses: CourseRepository,
        lectures: LectureRepository,
        extraction: ConceptExtractionPipeline,
        max_notes_bytes: int,
    ):
        self._courses = courses
        self._lectures = lectures
        self._extraction = extraction
        self._max_notes_bytes = max_notes_bytes

    # ------------------------------------------------------------------
    # COURSES
    # ------------------------------------------------------------------
    def create_course(self, name: Optional[str]) -> Result[Course]:
        valid = validate_name(name, "Course")
        if not valid.is_success:
            return Result.fail(valid.error, valid.kind)
        return Result.ok(self._courses.create(valid.value, created_at=_now_iso()))

    def list_courses(self) -> List[Course]:
        return self._courses.list_all()

    def delete_course(self, course_id) -> Result[int]:
        parsed = validate_positive_id(course_id, "course")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        if not self._courses.delete(parsed.value):
            return Result.fail("Course not found", ErrorKind.NOT_FOUND)
        return Result.ok(parsed.value)

    # ------------------------------------------------------------------
    # LECTURES
    # ------------------------------------------------------------------
    def create_lecture(self, course_id, name: Optional[str], content: Optional[str]) -> Result[CreatedLecture]:
        """Store the lecture, then try extraction; extraction failure is reported, not raised."""
        parsed = validate_positive_id(course_id, "course")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        valid_name = validate_name(name, "Lecture")
        if not valid_name.is_success:
            return Result.fail(valid_name.error, valid_name.kind)
        if content is None:
            return Result.fail("File is required")
        if not self._courses.get_by_id(parsed.value):
            return Result.fail("Course not found", ErrorKind.NOT_FOUND)
        valid_content = validate_note_content(content, self._max_notes_bytes)
        if not valid_content.is_success:
            return Result.fail(valid_content.error, valid_content.kind)

        lecture = self._lectures.create(parsed.value, valid_name.value, content, created_at=_now_iso())

        extracted = self._extraction.extract_and_persist(lecture.id, content)
        if not extracted.is_success:
            return Result.ok(CreatedLecture(lecture=lecture, concepts_generation_error=extracted.error))
        return Result.ok(CreatedLecture(lecture=lecture, concepts=extracted.value))

    def list_lectures(self, course_id) -> Result[List[Lecture]]:
        parsed = validate_positive_id(course_id, "course")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        if not self._courses.get_by_id(parsed.value):
            return Result.fail("Course not found", ErrorKind.NOT_FOUND)
        return Result.ok(self._lectures.list_for_course(parsed.value))

    def delete_lecture(self, lecture_id) -> Result[int]:
        parsed = validate_positive_id(lecture_id, "lecture")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        if not self._lectures.delete(parsed.value):
            return Result.fail("Lecture not found", ErrorKind.NOT_FOUND)
        return Result.ok(parsed.value)
