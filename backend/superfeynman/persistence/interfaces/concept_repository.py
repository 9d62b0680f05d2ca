"""Abstract repository interface for the Concept aggregate."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from superfeynman.domain.concept.models import Concept, ExtractedConcept


class ConceptRepository(ABC):

    @abstractmethod
    def create_many(self, lecture_id: int, concepts: List[ExtractedConcept], created_at: str) -> List[int]:
        """Insert concepts in order with status 'Not Started'. Returns the new ids."""
        ...

    @abstractmethod
    def get_by_id(self, concept_id: int) -> Optional[Concept]:
        ...

    @abstractmethod
    def list_for_lecture(self, lecture_id: int) -> List[Concept]:
        """Ordered by id ASC (insertion order)."""
        ...

    @abstractmethod
    def set_progress(self, concept_id: int, status: str) -> bool:
        """Direct status edit; leaves last_reviewed alone. Returns True if the row exists."""
        ...

    @abstractmethod
    def delete(self, concept_id: int) -> bool:
        ...
