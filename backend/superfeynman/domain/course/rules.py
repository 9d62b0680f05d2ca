"""Validation rules for courses and uploaded lecture notes."""
from __future__ import annotations
import re

from superfeynman.domain.common.errors import ErrorKind
from superfeynman.domain.common.result import Result

# Control characters that never appear in plain-text notes
_BINARY_PATTERN = re.compile(r"[\x00-\x08\x0E-\x1F]")

# sqlite INTEGER is a signed 64-bit value
_MAX_ID = 2**63 - 1


def validate_positive_id(raw, label: str) -> Result[int]:
    """Accepts ints or numeric strings; rejects anything that is not a positive integer."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return Result.fail(f"Invalid {label} ID", ErrorKind.INVALID_INPUT)
    if not 0 < value <= _MAX_ID:
        return Result.fail(f"Invalid {label} ID", ErrorKind.INVALID_INPUT)
    return Result.ok(value)


def validate_name(raw: str | None, label: str) -> Result[str]:
    name = (raw or "").strip()
    if not name:
        return Result.fail(f"{label} name is required and must be a non-empty string")
    return Result.ok(name)


def validate_note_content(content: str, max_bytes: int) -> Result[str]:
    """Rejects empty, oversized or binary-looking note text."""
    if not content.strip():
        return Result.fail("File content cannot be empty")
    if len(content.encode("utf-8")) > max_bytes:
        return Result.fail(f"File content exceeds maximum size of {max_bytes // (1024 * 1024)}MB")
    if _BINARY_PATTERN.search(content):
        return Result.fail("File appears to contain binary data")
    return Result.ok(content)
