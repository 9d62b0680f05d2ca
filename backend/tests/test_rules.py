"""Pure domain rules: mastery progression, input validation, persona prompts."""
import pytest

from superfeynman.domain.common.errors import ErrorKind
from superfeynman.domain.concept.rules import PROGRESSION, next_status, validate_progress_status
from superfeynman.domain.course.rules import validate_name, validate_note_content, validate_positive_id
from superfeynman.domain.review.prompts import InvalidAudience, render_system_prompt
from superfeynman.domain.review.rules import validate_audience_level, validate_user_message

LADDER = ["Not Started", "Reviewing", "Understood", "Mastered"]


# ------------------------------------------------------------------
# Progression
# ------------------------------------------------------------------
@pytest.mark.parametrize(
    "current,expected",
    [
        ("Not Started", "Reviewing"),
        ("Reviewing", "Understood"),
        ("Understood", "Mastered"),
        ("Mastered", "Mastered"),
    ],
)
def test_next_status(current, expected):
    assert next_status(current) == expected


def test_progression_moves_at_most_one_rung_and_never_down():
    for current in LADDER:
        step = LADDER.index(next_status(current)) - LADDER.index(current)
        assert step == (0 if current == "Mastered" else 1)
    assert set(PROGRESSION) == set(LADDER)


def test_unknown_status_falls_back(caplog):
    assert next_status("Legendary") == "Reviewing"
    assert next_status("") == "Reviewing"
    assert "Unknown progress status" in caplog.text


def test_validate_progress_status():
    assert validate_progress_status("Understood").value == "Understood"
    for bad in ("understood", "Expert", None, 3, ["Mastered"]):
        assert validate_progress_status(bad).kind == ErrorKind.INVALID_INPUT


# ------------------------------------------------------------------
# Input validation
# ------------------------------------------------------------------
def test_validate_positive_id():
    assert validate_positive_id("12", "course").value == 12
    assert validate_positive_id(7, "course").value == 7
    for bad in ("abc", "0", -1, None, "1.5", "", 2**63):
        result = validate_positive_id(bad, "course")
        assert not result.is_success
        assert result.error == "Invalid course ID"


def test_validate_name_trims():
    assert validate_name("  Physics  ", "Course").value == "Physics"
    assert not validate_name("   ", "Course").is_success
    assert not validate_name(None, "Course").is_success


def test_validate_note_content():
    assert validate_note_content("Entropy notes\n\tindented", 100).is_success
    assert not validate_note_content(" \n ", 100).is_success
    assert not validate_note_content("x" * 101, 100).is_success
    assert not validate_note_content("null\x00byte", 100).is_success


def test_validate_audience_level():
    for level in ("classmate", "middleschooler", "kid"):
        assert validate_audience_level(level).value == level
    for bad in ("Kid", "grandparent", None, {"kid": 1}):
        assert validate_audience_level(bad).kind == ErrorKind.INVALID_INPUT


def test_validate_user_message():
    assert validate_user_message("  hi there ").value == "hi there"
    for bad in ("", "   ", None, 42):
        assert validate_user_message(bad).kind == ErrorKind.INVALID_INPUT


# ------------------------------------------------------------------
# Persona prompts
# ------------------------------------------------------------------
@pytest.mark.parametrize(
    "audience,marker",
    [
        ("classmate", "(2-3 sentences)"),
        ("middleschooler", "(1-2 sentences)"),
        ("kid", "(1 sentence)"),
    ],
)
def test_system_prompt_per_audience(audience, marker):
    prompt = render_system_prompt("Entropy", "A measure of disorder", audience)
    assert marker in prompt
    assert '"Entropy"' in prompt
    assert '"A measure of disorder"' in prompt


def test_system_prompt_rejects_unknown_audience():
    with pytest.raises(InvalidAudience):
        render_system_prompt("Entropy", "A measure of disorder", "professor")
