# assess_core/feedback.py
from __future__ import annotations

_PRACTICE_BANDS = (
    (90, "Excellent reading! You pronounced the words really well! 🌟"),
    (70, "Good effort! Keep practicing and you'll get even better! 📚"),
    (50, "Nice try! Let's practice a bit more together. You're improving! 💪"),
)
_PRACTICE_FLOOR = "That's okay! Reading takes practice. Let's try again slowly. 🤗"

STEP_UP_MESSAGE = "Great job! Let's try something a bit more challenging! 🌟"
STEP_DOWN_MESSAGE = "Let's practice with some easier ones to build your confidence! 💪"


def practice_feedback(accuracy_percent: float) -> str:
    for floor, msg in _PRACTICE_BANDS:
        if accuracy_percent >= floor:
            return msg
    return _PRACTICE_FLOOR


def difficulty_feedback(modifier_before: int, modifier_after: int) -> str | None:
    """Message for a modifier change, or None when the modifier held."""

    if modifier_after > modifier_before:
        return STEP_UP_MESSAGE
    if modifier_after < modifier_before:
        return STEP_DOWN_MESSAGE
    return None
