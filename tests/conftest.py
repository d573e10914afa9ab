from __future__ import annotations

import pytest

from assess_core.config import GRADE_BANDS
from assess_core.types import Question, WordToken


def build_synthetic_pool(
    *,
    bands: list[str] | None = None,
    per_level: int = 2,
) -> list[Question]:
    """Create a deterministic question pool for tests."""

    items: list[Question] = []
    for band in bands or list(GRADE_BANDS):
        for level in (1, 2, 3):
            for idx in range(per_level):
                items.append(
                    Question(
                        id=f"{band}_{level}_{idx}",
                        prompt="Read aloud",
                        difficulty_level=level,
                        grade_band=band,
                        expected_text=f"the cat sat on mat {idx}",
                    )
                )
    return items


def timed_tokens(words: list[str], gaps_ms: list[float], word_ms: float = 300.0) -> list[WordToken]:
    """Lay out ``words`` with ``gaps_ms[i]`` of silence before word ``i + 1``."""

    assert len(gaps_ms) == len(words) - 1
    out: list[WordToken] = []
    t = 100.0
    for idx, w in enumerate(words):
        if idx:
            t += gaps_ms[idx - 1]
        out.append(WordToken(text=w, start_ms=t, end_ms=t + word_ms))
        t += word_ms
    return out


@pytest.fixture
def synthetic_pool() -> list[Question]:
    return build_synthetic_pool()
