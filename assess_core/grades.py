# assess_core/grades.py
from __future__ import annotations
import re
from typing import Dict, List
from .types import GradeDifficultyProfile
from .config import GRADE_BANDS, DEFAULT_GRADE

GRADE_PROFILES: Dict[str, GradeDifficultyProfile] = {
    "1": GradeDifficultyProfile(30, 1, "low", "concrete", "simple"),
    "2": GradeDifficultyProfile(25, 1, "low", "concrete", "simple"),
    "3": GradeDifficultyProfile(20, 2, "medium", "concrete", "moderate"),
    "4": GradeDifficultyProfile(20, 2, "medium", "semi-abstract", "moderate"),
    "5": GradeDifficultyProfile(15, 3, "medium", "semi-abstract", "detailed"),
    "6": GradeDifficultyProfile(15, 3, "high", "semi-abstract", "detailed"),
    "7": GradeDifficultyProfile(12, 4, "high", "abstract", "detailed"),
    "8": GradeDifficultyProfile(10, 5, "high", "abstract", "detailed"),
}


def grade_profile(grade: str | int) -> GradeDifficultyProfile:
    try:
        key = str(grade_number(grade))
    except ValueError:
        key = DEFAULT_GRADE
    return GRADE_PROFILES.get(key, GRADE_PROFILES[DEFAULT_GRADE])


def grade_number(grade: str | int) -> int:
    """Parse a grade like ``"4"`` or ``4``; anything non-numeric is a caller error."""

    try:
        return int(str(grade).strip())
    except ValueError:
        raise ValueError(f"grade must be numeric, got {grade!r}") from None


def grade_band(grade: str | int) -> str:
    g = grade_number(grade)
    if g <= 2: return "1-2"
    if g <= 4: return "3-4"
    if g <= 6: return "5-6"
    return "7-8"


def base_difficulty_for_grade(grade: str | int) -> int:
    g = grade_number(grade)
    if g <= 2: return 1
    if g <= 4: return 2
    return 3


def adjacent_bands(band: str) -> List[str]:
    """Bands exactly one index away from ``band`` (never further)."""

    if band not in GRADE_BANDS:
        return []
    idx = GRADE_BANDS.index(band)
    return [b for i, b in enumerate(GRADE_BANDS) if abs(i - idx) == 1]


_YOUNG_WORDING = (
    ("identify", "find"),
    ("determine", "figure out"),
    ("calculate", "count"),
    ("analyze", "look at"),
    ("comprehension", "understanding"),
)
_MIDDLE_WORDING = (
    ("analyze", "think about"),
    ("comprehension", "understanding"),
)


def grade_appropriate_instruction(instruction: str, grade: str | int) -> str:
    """Swap harder instruction verbs for simpler ones for younger grades."""

    g = grade_number(grade)
    if g <= 2:
        pairs = _YOUNG_WORDING
    elif g <= 4:
        pairs = _MIDDLE_WORDING
    else:
        return instruction
    out = instruction
    for word, plain in pairs:
        out = re.sub(word, plain, out, flags=re.I)
    return out
