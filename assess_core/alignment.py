# assess_core/alignment.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from .types import WordToken, AlignmentResult
from .textutil import tokenize, similarity, clamp, round_half_up
from .config import (
    HESITATION_GAP_MS,
    HESITATION_PENALTY,
    SHORT_RESPONSE_RATIO,
    SHORT_RESPONSE_PENALTY,
)


log = logging.getLogger(__name__)


def word_accuracy(expected: str, actual: str) -> int:
    """Partial-credit word accuracy in 0..100.

    Each expected token takes its best similarity against any actual token
    (greedy and independent per token; the first best match wins).  The
    mean of those similarities is scaled to a percentage, so "buter" read for
    "butter" still earns most of the credit for that word.
    """

    exp_tokens = tokenize(expected)
    act_tokens = tokenize(actual)
    if not exp_tokens:
        return 0

    total = 0.0
    for exp in exp_tokens:
        best = 0.0
        for act in act_tokens:
            sim = similarity(exp, act)
            if sim > best:
                best = sim
                if best >= 1.0:
                    break
        total += best
    return round_half_up(total / len(exp_tokens) * 100.0)


def _timing(value: Optional[float]) -> Optional[float]:
    try:
        v = float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return None
    return v if v > 0 else None


def detect_hesitations(tokens: Optional[Iterable[WordToken]]) -> Tuple[int, int]:
    """Count inter-word pauses longer than the hesitation gap.

    Returns ``(hesitation_count, total_pause_ms)``.  A token with missing or
    zero timing contributes no gap on either side.
    """

    count = 0
    pause_ms = 0.0
    prev_end: Optional[float] = None
    for tok in tokens or ():
        start = _timing(getattr(tok, "start_ms", None))
        if prev_end is not None and start is not None:
            gap = start - prev_end
            if gap > HESITATION_GAP_MS:
                count += 1
                pause_ms += gap
        prev_end = _timing(getattr(tok, "end_ms", None))
    return count, round_half_up(pause_ms)


def fluency_score(expected_word_count: int, actual_word_count: int, hesitation_count: int) -> int:
    score = 100 - HESITATION_PENALTY * max(0, int(hesitation_count))
    if actual_word_count < SHORT_RESPONSE_RATIO * expected_word_count:
        score -= SHORT_RESPONSE_PENALTY
    return int(clamp(score, 0, 100))


def tokens_from_transcript(payload: Optional[Dict[str, Any]]) -> List[WordToken]:
    """Convert a transcription payload ``{text, words: [{text, start, end}]}``.

    Word times arrive in seconds and are stored in milliseconds.  Spacing
    entries (``type == "spacing"``) and blank words are skipped.
    """

    if not isinstance(payload, dict):
        return []
    out: List[WordToken] = []
    for w in payload.get("words") or []:
        if not isinstance(w, dict):
            continue
        if str(w.get("type", "word")).lower() == "spacing":
            continue
        text = str(w.get("text") or "").strip()
        if not text:
            continue
        out.append(WordToken(text=text, start_ms=_seconds_to_ms(w.get("start")), end_ms=_seconds_to_ms(w.get("end"))))
    return out


def _seconds_to_ms(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value) * 1000.0
    except (TypeError, ValueError):
        return None


def score_response(
    expected: str,
    actual: str,
    tokens: Optional[Sequence[WordToken]] = None,
) -> AlignmentResult:
    """Score a transcript against its prompt.

    The spoken word count is taken from the timed tokens when present,
    otherwise from the transcript text.
    """

    accuracy = word_accuracy(expected, actual)
    hesitations, pause_ms = detect_hesitations(tokens or [])
    expected_count = len(tokenize(expected))
    actual_count = len(tokens) if tokens else len(tokenize(actual))
    fluency = fluency_score(expected_count, actual_count, hesitations)
    log.debug(
        "alignment expected_words=%d actual_words=%d accuracy=%d hesitations=%d pause_ms=%d fluency=%d",
        expected_count,
        actual_count,
        accuracy,
        hesitations,
        pause_ms,
        fluency,
    )
    return AlignmentResult(
        accuracy_percent=accuracy,
        hesitation_count=hesitations,
        total_pause_ms=pause_ms,
        fluency_percent=fluency,
    )
