"""Course and lecture domain models: pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Course:
    id: int
    name: str
    created_at: str


@dataclass
class Lecture:
    id: int
    course_id: int
    name: str
    file_content: str
    created_at: str
