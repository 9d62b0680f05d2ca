"""Concept domain models: pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProgressStatus(str, Enum):
    NOT_STARTED = "Not Started"
    REVIEWING = "Reviewing"
    UNDERSTOOD = "Understood"
    MASTERED = "Mastered"


@dataclass
class Concept:
    id: int
    lecture_id: int
    name: str
    description: str
    progress_status: str  # Not Started | Reviewing | Understood | Mastered
    created_at: str
    last_reviewed: Optional[str] = None


@dataclass
class ExtractedConcept:
    """A concept candidate returned by the extraction gateway, before it has an id."""

    name: str
    description: str
