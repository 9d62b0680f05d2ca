"""Abstract repository interfaces for courses and their lectures."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from superfeynman.domain.course.models import Course, Lecture


class CourseRepository(ABC):

    @abstractmethod
    def create(self, name: str, created_at: str) -> Course:
        ...

    @abstractmethod
    def get_by_id(self, course_id: int) -> Optional[Course]:
        ...

    @abstractmethod
    def list_all(self) -> List[Course]:
        """Newest first."""
        ...

    @abstractmethod
    def delete(self, course_id: int) -> bool:
        """Delete course and cascade to lectures, concepts and sessions. Returns True if deleted."""
        ...


class LectureRepository(ABC):

    @abstractmethod
    def create(self, course_id: int, name: str, file_content: str, created_at: str) -> Lecture:
        ...

    @abstractmethod
    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        ...

    @abstractmethod
    def list_for_course(self, course_id: int) -> List[Lecture]:
        """Newest first."""
        ...

    @abstractmethod
    def delete(self, lecture_id: int) -> bool:
        ...
