from __future__ import annotations
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, model_validator
import logging, os, random

# ---- Engine imports ----
from assess_core.alignment import score_response, tokens_from_transcript
from assess_core.difficulty import (
    init_state,
    record_answer,
    adjusted_time_limit,
    select_questions,
    adjusted_score,
    target_difficulty,
)
from assess_core.feedback import practice_feedback, difficulty_feedback
from assess_core.grades import grade_band
from assess_core.types import PerformanceState, Question
from assess_core.config import make_rng

log = logging.getLogger(__name__)

app = FastAPI(title="Reading Assessment API")

@app.get("/")
def root():
    return {"status": "ok", "service": "reading-assessment-api"}

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class WordIn(BaseModel):
    text: str
    start: float | None = None   # seconds
    end: float | None = None
    type: str | None = None

class VoiceScoreReq(BaseModel):
    expected_text: str
    transcript: str = ""
    words: list[WordIn] | None = None

class StateIn(BaseModel):
    correct_streak: int = Field(0, ge=0)
    incorrect_streak: int = Field(0, ge=0)
    average_response_time_ms: float = Field(0.0, ge=0)
    items_answered: int = Field(0, ge=0)
    difficulty_modifier: int = Field(0, ge=-2, le=2)

    @model_validator(mode="after")
    def _one_streak(self) -> "StateIn":
        if self.correct_streak and self.incorrect_streak:
            raise ValueError("correct_streak and incorrect_streak cannot both be non-zero")
        return self

class AnswerReq(BaseModel):
    state: StateIn = Field(default_factory=StateIn)
    is_correct: bool
    response_time_ms: float = Field(0.0, ge=0)

class TimeLimitReq(BaseModel):
    base_time_limit_sec: float | None = Field(None, ge=0)
    grade: str
    difficulty_modifier: int = Field(0, ge=-2, le=2)

class QuestionIn(BaseModel):
    id: str
    prompt: str = ""
    difficulty_level: int = Field(..., ge=1, le=3)
    grade_band: str
    expected_text: str | None = None
    time_limit_sec: int | None = None

class SelectReq(BaseModel):
    pool: list[QuestionIn]
    grade: str
    difficulty_modifier: int = Field(0, ge=-2, le=2)
    count: int = Field(..., ge=0)
    seed: int | None = None

class ScoreReq(BaseModel):
    raw_score: float
    difficulty_modifier: int = Field(0, ge=-2, le=2)

# ---- Helpers ----
def _state(s: StateIn) -> PerformanceState:
    return PerformanceState(**s.model_dump())

def _rng(seed: int | None) -> random.Random:
    return random.Random(seed) if seed is not None else make_rng()

# ---- Health ----
@app.get("/health")
def health():
    return {"status": "ok", "debug_seed": os.getenv("DEBUG_SEED") is not None}

# ---- Scoring ----
@app.post("/voice/score")
def voice_score(req: VoiceScoreReq):
    payload = {"text": req.transcript, "words": [w.model_dump() for w in (req.words or [])]}
    tokens = tokens_from_transcript(payload)
    text = req.transcript or " ".join(tok.text for tok in tokens)
    res = score_response(req.expected_text, text, tokens)
    return {**res.to_dict(), "transcription": text, "feedback": practice_feedback(res.accuracy_percent)}

# ---- Adaptive difficulty ----
@app.get("/adaptive/state")
def adaptive_state():
    return init_state().to_dict()

@app.post("/adaptive/answer")
def adaptive_answer(req: AnswerReq):
    before = _state(req.state)
    after = record_answer(before, req.is_correct, req.response_time_ms)
    return {
        "state": after.to_dict(),
        "message": difficulty_feedback(before.difficulty_modifier, after.difficulty_modifier),
    }

def _check_grade(grade: str) -> str:
    try:
        return grade_band(grade)
    except ValueError as e:
        raise HTTPException(400, str(e))

@app.post("/adaptive/time-limit")
def adaptive_time_limit(req: TimeLimitReq):
    _check_grade(req.grade)
    return {"time_limit_sec": adjusted_time_limit(req.base_time_limit_sec, req.grade, req.difficulty_modifier)}

@app.post("/adaptive/select")
def adaptive_select(req: SelectReq):
    band = _check_grade(req.grade)
    pool = [Question(**q.model_dump()) for q in req.pool]
    picked = select_questions(pool, req.grade, req.difficulty_modifier, req.count, rng=_rng(req.seed))
    log.info("select grade=%s band=%s requested=%d returned=%d", req.grade, band, req.count, len(picked))
    return {
        "grade_band": band,
        "target_difficulty": target_difficulty(req.grade, req.difficulty_modifier),
        "questions": [q.__dict__ for q in picked],
        "short": len(picked) < req.count,
    }

@app.post("/adaptive/score")
def adaptive_score(req: ScoreReq):
    return {"adjusted_score": adjusted_score(req.raw_score, req.difficulty_modifier)}
