"""Application service: concept reads, direct status edits, deletes."""
from __future__ import annotations
from typing import List, Optional

from superfeynman.domain.common.errors import ErrorKind
from superfeynman.domain.common.result import Result
from superfeynman.domain.concept.models import Concept
from superfeynman.domain.concept.rules import validate_progress_status
from superfeynman.domain.course.rules import validate_positive_id
from superfeynman.persistence.interfaces.concept_repository import ConceptRepository
from superfeynman.persistence.interfaces.course_repository import LectureRepository


class ConceptAppService:
    def __init__(self, concepts: ConceptRepository, lectures: LectureRepository):
        self._concepts = concepts
        self._lectures = lectures

    def list_for_lecture(self, lecture_id) -> Result[List[Concept]]:
        parsed = validate_positive_id(lecture_id, "lecture")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        if not self._lectures.get_by_id(parsed.value):
            return Result.fail("Lecture not found", ErrorKind.NOT_FOUND)
        return Result.ok(self._concepts.list_for_lecture(parsed.value))

    def update_progress(self, concept_id, progress_status: Optional[str]) -> Result[Concept]:
        """Manual override; leaves last_reviewed alone."""
        parsed = validate_positive_id(concept_id, "concept")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        status = validate_progress_status(progress_status)
        if not status.is_success:
            return Result.fail(status.error, status.kind)
        if not self._concepts.set_progress(parsed.value, status.value):
            return Result.fail("Concept not found", ErrorKind.NOT_FOUND)
        return Result.ok(self._concepts.get_by_id(parsed.value))

    def delete_concept(self, concept_id) -> Result[int]:
        parsed = validate_positive_id(concept_id, "concept")
        if not parsed.is_success:
            return Result.fail(parsed.error, parsed.kind)
        if not self._concepts.delete(parsed.value):
            return Result.fail("Concept not found", ErrorKind.NOT_FOUND)
        return Result.ok(parsed.value)
