"""Abstract repository interface for review sessions."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from superfeynman.domain.review.models import FeedbackResult, Message, ReviewSession


class StoredHistoryCorrupted(Exception):
    """A persisted conversation_history or feedback value could not be decoded."""


class ReviewSessionRepository(ABC):

    @abstractmethod
    def create(self, session: ReviewSession) -> int:
        """Persist a freshly opened session. Returns its id."""
        ...

    @abstractmethod
    def get_by_id(self, session_id: int) -> Optional[ReviewSession]:
        """Raises StoredHistoryCorrupted when the stored history or feedback is unreadable."""
        ...

    @abstractmethod
    def append_history(self, session_id: int, messages: List[Message]) -> bool:
        """Append messages to the end of the stored history, preserving order. Returns False if the session is gone."""
        ...

    @abstractmethod
    def finish(
        self,
        session_id: int,
        feedback: FeedbackResult,
        ended_at: str,
        concept_id: int,
        new_status: str,
    ) -> bool:
        """
        End the session and advance its concept in one transaction.
        Returns False, changing nothing, when the session is already ended or gone.
        """
        ...
