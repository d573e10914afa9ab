from __future__ import annotations
import os, json, pathlib, random


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


HESITATION_GAP_MS: float = 500.0
HESITATION_PENALTY: int = 5
SHORT_RESPONSE_RATIO: float = 0.8
SHORT_RESPONSE_PENALTY: int = 15

STEP_UP_STREAK: int = 3
STEP_DOWN_STREAK: int = 2
MODIFIER_MIN: int = -2
MODIFIER_MAX: int = 2

TIME_LIMIT_MIN: int = 5
TIME_LIMIT_MAX: int = 60
TIME_STEP_SEC: int = 3

DIFFICULTY_MIN: int = 1
DIFFICULTY_MAX: int = 3
GRADE_BANDS: tuple[str, ...] = ("1-2", "3-4", "5-6", "7-8")
DEFAULT_GRADE: str = "4"

SCORE_BONUS_PER_STEP: int = 2
SCORE_PENALTY_PER_STEP: int = 1

PASS_ACCURACY: int = 70
PRACTICE_COUNT: int = 5

DEBUG_TRACE: bool = False
DEBUG_SEED: int | None = None
TRACE_FIELDS: tuple[str, ...] = (
    "step",
    "question_id",
    "accuracy",
    "fluency",
    "hesitations",
    "correct",
    "modifier_before",
    "modifier_after",
    "time_limit",
)
# // env overrides for staging/ops; thresholds are not tuned here.
PASS_ACCURACY = _env_int("PASS_ACCURACY", PASS_ACCURACY)
PRACTICE_COUNT = _env_int("PRACTICE_COUNT", PRACTICE_COUNT)
HESITATION_GAP_MS = _env_float("HESITATION_GAP_MS", HESITATION_GAP_MS)
DEBUG_TRACE = _env_bool("DEBUG_TRACE", False)
_seed_raw = _env_int("DEBUG_SEED", -1)
DEBUG_SEED = _seed_raw if _seed_raw >= 0 else None

def _env_true(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1","true","yes","on")
def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError): cfg = {}
    e = os.environ
    if e.get("PRACTICE_GRADE"): cfg["PRACTICE_GRADE"] = e.get("PRACTICE_GRADE")
    if e.get("PRACTICE_COUNT"): cfg["PRACTICE_COUNT"] = _env_int("PRACTICE_COUNT", PRACTICE_COUNT)
    if e.get("SHOW_TIMER"): cfg["SHOW_TIMER"] = _env_true("SHOW_TIMER")
    if e.get("SEED"): cfg["SEED"] = int(e.get("SEED"))
    return cfg
def make_rng(cfg: dict | None = None) -> random.Random:
    s = (cfg or {}).get("SEED", DEBUG_SEED)
    if s is None:
        s = random.randint(0, 2**31 - 1)
    return random.Random(int(s))
