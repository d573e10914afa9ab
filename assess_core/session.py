# assess_core/session.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union
from datetime import datetime, timezone
import logging, random

from .types import AlignmentResult, PerformanceState, Question
from .alignment import score_response, tokens_from_transcript
from .difficulty import (
    init_state,
    record_answer,
    adjusted_time_limit,
    rank_questions,
    select_questions,
    target_difficulty,
    adjusted_score,
)
from .feedback import practice_feedback, difficulty_feedback
from .grades import grade_number, grade_appropriate_instruction
from .config import load_config, make_rng, PASS_ACCURACY, PRACTICE_COUNT, DEBUG_TRACE, TRACE_FIELDS


log = logging.getLogger(__name__)


def _emit_trace(**values: object) -> None:
    if not DEBUG_TRACE:
        return
    ordered = []
    for key in TRACE_FIELDS:
        if key in values:
            ordered.append(f"{key}={values[key]}")
    if ordered:
        log.info("trace %s", " ".join(str(val) for val in ordered))


@dataclass
class PracticeOutcome:
    question_id: Optional[str]
    correct: bool
    item_score: float
    state_before: PerformanceState
    state_after: PerformanceState
    alignment: Optional[AlignmentResult] = None
    feedback: str = ""
    difficulty_message: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "question_id": self.question_id,
            "correct": self.correct,
            "item_score": self.item_score,
            "state_before": self.state_before.to_dict(),
            "state_after": self.state_after.to_dict(),
            "alignment": self.alignment.to_dict() if self.alignment else None,
            "feedback": self.feedback,
            "difficulty_message": self.difficulty_message,
        }


def _question_key(q: Any) -> object:
    qid = getattr(q, "id", None)
    return qid if qid is not None else id(q)


class PracticeSession:
    """One child's practice run: select, time, score, adapt.

    The session owns its ``PerformanceState`` and replaces it on every
    answer; nothing is shared between sessions.
    """

    def __init__(
        self,
        grade: str,
        pool: Sequence[Any],
        rng: Optional[random.Random] = None,
        correct_threshold: int = PASS_ACCURACY,
    ):
        grade_number(grade)
        self.cfg = load_config()
        self.grade = str(grade).strip()
        self.pool: List[Any] = list(pool)
        self.rng = rng or make_rng(self.cfg)
        self.correct_threshold = int(correct_threshold)
        self.state: PerformanceState = init_state()
        self.asked: set[object] = set()
        self.outcomes: List[PracticeOutcome] = []
        self.audit_events: List[Dict[str, object]] = []
        self._step = 0

    def next_questions(self, count: Optional[int] = None) -> List[Any]:
        n = PRACTICE_COUNT if count is None else int(count)
        fresh = [q for q in self.pool if _question_key(q) not in self.asked]
        return select_questions(fresh, self.grade, self.state.difficulty_modifier, n, rng=self.rng)

    def next_question(self) -> Optional[Any]:
        """Draw one unseen question for the current modifier.

        Picks at random among the candidates closest to the target
        difficulty, so a step up or down takes effect on the very next item.
        Returns None once the primary and adjacent bands are exhausted.
        """

        fresh = [q for q in self.pool if _question_key(q) not in self.asked]
        ranked = rank_questions(fresh, self.grade, self.state.difficulty_modifier, 1)
        if not ranked:
            return None
        target = target_difficulty(self.grade, self.state.difficulty_modifier)
        best = min(abs(int(q.difficulty_level) - target) for q in ranked)
        closest = [q for q in ranked if abs(int(q.difficulty_level) - target) == best]
        return self.rng.choice(closest)

    def time_limit(self, question: Any = None) -> int:
        base = getattr(question, "time_limit_sec", None) if question is not None else None
        return adjusted_time_limit(base, self.grade, self.state.difficulty_modifier)

    def instruction(self, text: str) -> str:
        return grade_appropriate_instruction(text, self.grade)

    def submit_voice(
        self,
        question: Union[Question, str],
        transcript: Union[Dict[str, Any], str, None],
        response_time_ms: float = 0.0,
    ) -> PracticeOutcome:
        """Score a spoken response and feed the result back into the controller.

        ``transcript`` is either the transcription payload
        ``{text, words: [...]}`` or the plain transcript text.  A response is
        counted correct when its accuracy reaches ``correct_threshold``.
        """

        if isinstance(question, str):
            expected = question
        else:
            expected = getattr(question, "expected_text", None) or getattr(question, "prompt", "")
        if isinstance(transcript, dict):
            tokens = tokens_from_transcript(transcript)
            text = str(transcript.get("text") or " ".join(t.text for t in tokens))
        else:
            tokens = []
            text = transcript or ""
        result = score_response(expected, text, tokens)
        correct = result.accuracy_percent >= self.correct_threshold
        return self._advance(
            None if isinstance(question, str) else question,
            correct,
            float(result.accuracy_percent),
            response_time_ms,
            alignment=result,
        )

    def submit_answer(self, question: Any, is_correct: bool, response_time_ms: float = 0.0) -> PracticeOutcome:
        return self._advance(question, bool(is_correct), 100.0 if is_correct else 0.0, response_time_ms)

    def _advance(
        self,
        question: Any,
        correct: bool,
        item_score: float,
        response_time_ms: float,
        alignment: Optional[AlignmentResult] = None,
    ) -> PracticeOutcome:
        before = self.state
        after = record_answer(before, correct, max(0.0, float(response_time_ms)))
        self.state = after
        self._step += 1
        qid = getattr(question, "id", None) if question is not None else None
        if question is not None:
            self.asked.add(_question_key(question))

        fb = practice_feedback(alignment.accuracy_percent) if alignment else ""
        outcome = PracticeOutcome(
            question_id=qid,
            correct=correct,
            item_score=item_score,
            state_before=before,
            state_after=after,
            alignment=alignment,
            feedback=fb,
            difficulty_message=difficulty_feedback(before.difficulty_modifier, after.difficulty_modifier),
        )
        self.outcomes.append(outcome)

        time_limit = self.time_limit()
        _emit_trace(
            step=self._step,
            question_id=qid,
            accuracy=alignment.accuracy_percent if alignment else None,
            fluency=alignment.fluency_percent if alignment else None,
            hesitations=alignment.hesitation_count if alignment else None,
            correct=int(correct),
            modifier_before=before.difficulty_modifier,
            modifier_after=after.difficulty_modifier,
            time_limit=time_limit,
        )
        self.audit_events.append({
            "t": datetime.now(timezone.utc).isoformat(),
            "step": self._step,
            "question_id": qid,
            "correct": correct,
            "item_score": item_score,
            "modifier_before": before.difficulty_modifier,
            "modifier_after": after.difficulty_modifier,
            "time_limit": time_limit,
            "latency_ms": int(response_time_ms),
        })
        return outcome

    def summary(self) -> Dict[str, object]:
        voiced = [o.alignment for o in self.outcomes if o.alignment is not None]
        n = len(self.outcomes)
        raw = sum(o.item_score for o in self.outcomes) / n if n else 0.0
        return {
            "grade": self.grade,
            "items_answered": self.state.items_answered,
            "correct": sum(1 for o in self.outcomes if o.correct),
            "raw_score": round(raw, 1),
            "adjusted_score": round(adjusted_score(raw, self.state.difficulty_modifier), 1),
            "difficulty_modifier": self.state.difficulty_modifier,
            "average_response_time_ms": round(self.state.average_response_time_ms, 1),
            "mean_accuracy": round(sum(a.accuracy_percent for a in voiced) / len(voiced), 1) if voiced else None,
            "mean_fluency": round(sum(a.fluency_percent for a in voiced) / len(voiced), 1) if voiced else None,
            "total_hesitations": sum(a.hesitation_count for a in voiced),
        }
