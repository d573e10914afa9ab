from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Literal, Protocol, runtime_checkable
CognitiveLoad = Literal["low","medium","high"]
Abstraction = Literal["concrete","semi-abstract","abstract"]
Expectation = Literal["simple","moderate","detailed"]
@dataclass(frozen=True)
class WordToken:
    text: str
    start_ms: Optional[float] = None
    end_ms: Optional[float] = None
@dataclass(frozen=True)
class AlignmentResult:
    accuracy_percent: int
    hesitation_count: int
    total_pause_ms: int
    fluency_percent: int

    @property
    def pronunciation_percent(self) -> int:
        return self.accuracy_percent

    def to_dict(self) -> Dict[str, int]:
        d = asdict(self)
        d["pronunciation_percent"] = self.pronunciation_percent
        return d
@dataclass(frozen=True)
class PerformanceState:
    correct_streak: int = 0
    incorrect_streak: int = 0
    average_response_time_ms: float = 0.0
    items_answered: int = 0
    difficulty_modifier: int = 0

    def to_dict(self) -> Dict[str, object]:
        """JSON-friendly representation for caller-side persistence."""

        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Dict[str, object]) -> "PerformanceState":
        return cls(
            correct_streak=int(raw.get("correct_streak", 0) or 0),
            incorrect_streak=int(raw.get("incorrect_streak", 0) or 0),
            average_response_time_ms=float(raw.get("average_response_time_ms", 0.0) or 0.0),
            items_answered=int(raw.get("items_answered", 0) or 0),
            difficulty_modifier=int(raw.get("difficulty_modifier", 0) or 0),
        )
@dataclass(frozen=True)
class GradeDifficultyProfile:
    base_time_limit_sec: int
    complexity_level: int
    cognitive_load: CognitiveLoad
    abstraction_level: Abstraction
    response_expectation: Expectation
@runtime_checkable
class CandidateQuestion(Protocol):
    difficulty_level: int
    grade_band: str
@dataclass(frozen=True)
class Question:
    id: str; prompt: str; difficulty_level: int; grade_band: str
    expected_text: Optional[str] = None
    time_limit_sec: Optional[int] = None
