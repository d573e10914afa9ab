"""Shared string and numeric helpers for the scoring and difficulty modules.

Everything here is pure: no configuration lookups and no logging, so the
helpers can be reused from the API runtime, the CLI and the tests without
side effects.
"""
from __future__ import annotations

import math
from typing import List

__all__ = [
    "tokenize",
    "levenshtein",
    "similarity",
    "clamp",
    "clamp01",
    "round_half_up",
]


def tokenize(text: str | None) -> List[str]:
    """Split on whitespace, lower-case, and drop empty tokens."""

    if not text:
        return []
    return [tok for tok in str(text).lower().split() if tok]


def levenshtein(a: str, b: str) -> int:
    """Classic dynamic-programming edit distance.

    Insert, delete and substitute all cost 1.  Python strings index by code
    point, so non-Latin scripts compare character by character rather than
    byte by byte.  Only two rows of the table are kept.
    """

    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        curr = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            curr.append(min(curr[j - 1] + 1, prev[j] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def similarity(a: str, b: str) -> float:
    """Normalised similarity ``1 − lev(a, b) / max(len a, len b)`` in [0, 1]."""

    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return clamp01(1.0 - levenshtein(a, b) / float(longest))


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp01(x: float) -> float:
    return clamp(float(x), 0.0, 1.0)


def round_half_up(x: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""

    return int(math.floor(float(x) + 0.5))
