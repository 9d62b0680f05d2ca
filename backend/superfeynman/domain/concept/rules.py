"""Business rules for concept mastery: the four-step progression ladder."""
from __future__ import annotations
import logging

from superfeynman.domain.common.errors import ErrorKind
from superfeynman.domain.common.result import Result
from superfeynman.domain.concept.models import ProgressStatus

logger = logging.getLogger(__name__)

VALID_STATUSES = {s.value for s in ProgressStatus}

# One completed review moves a concept exactly one rung up; Mastered is the ceiling
PROGRESSION: dict[str, str] = {
    ProgressStatus.NOT_STARTED.value: ProgressStatus.REVIEWING.value,
    ProgressStatus.REVIEWING.value: ProgressStatus.UNDERSTOOD.value,
    ProgressStatus.UNDERSTOOD.value: ProgressStatus.MASTERED.value,
    ProgressStatus.MASTERED.value: ProgressStatus.MASTERED.value,
}


def next_status(current_status: str) -> str:
    """
    Status after one completed review session.
    Unrecognised stored values fall back to 'Reviewing' rather than failing.
    """
    new_status = PROGRESSION.get(current_status)
    if new_status is None:
        logger.warning("Unknown progress status %r; treating next status as 'Reviewing'", current_status)
        return ProgressStatus.REVIEWING.value
    return new_status


def validate_progress_status(status: str | None) -> Result[str]:
    """Direct user edits may set any of the four statuses."""
    if not isinstance(status, str) or status not in VALID_STATUSES:
        ordered = ", ".join(s.value for s in ProgressStatus)
        return Result.fail(f"Progress status must be one of: {ordered}", ErrorKind.INVALID_INPUT)
    return Result.ok(status)
