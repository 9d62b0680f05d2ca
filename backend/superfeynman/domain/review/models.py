"""Review session domain models: pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class AudienceLevel(str, Enum):
    CLASSMATE = "classmate"
    MIDDLESCHOOLER = "middleschooler"
    KID = "kid"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SessionState(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class Message:
    role: str  # user | assistant
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class FeedbackResult:
    overall_quality: str
    clear_parts: List[str] = field(default_factory=list)
    unclear_parts: List[str] = field(default_factory=list)
    jargon_used: List[str] = field(default_factory=list)
    struggled_with: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overall_quality": self.overall_quality,
            "clear_parts": list(self.clear_parts),
            "unclear_parts": list(self.unclear_parts),
            "jargon_used": list(self.jargon_used),
            "struggled_with": list(self.struggled_with),
        }


@dataclass
class ReviewSession:
    id: Optional[int]
    concept_id: int
    audience_level: str
    conversation_history: List[Message]
    created_at: str
    feedback: Optional[FeedbackResult] = None
    ended_at: Optional[str] = None

    @property
    def state(self) -> SessionState:
        return SessionState.ENDED if self.ended_at else SessionState.ACTIVE

    @property
    def user_turns(self) -> int:
        return sum(1 for m in self.conversation_history if m.role == Role.USER.value)


@dataclass
class SessionOutcome:
    """What End hands back: the feedback and the status move it caused."""

    feedback: FeedbackResult
    old_status: str
    new_status: str
