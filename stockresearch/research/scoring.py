"""Deterministic pseudo-random scores.

Scores are derived from a SHA-256 digest so the same (identifier, seed label)
pair always produces the same value on every process and platform. That is
what lets research be regenerated on demand instead of stored.
"""

from __future__ import annotations

import hashlib


SCORE_FLOOR = 6.0
SCORE_STEPS = 40


def score(identifier: str, seed_label: str) -> float:
    """
    Score in {6.0, 6.1, ..., 9.9}.

    The first 24 bits of sha256("{identifier}-{seed_label}") select one of 40
    steps of 0.1 above the floor.
    """
    digest = hashlib.sha256(f"{identifier}-{seed_label}".encode("utf-8")).hexdigest()
    value = int(digest[:6], 16)
    return round(SCORE_FLOOR + (value % SCORE_STEPS) / 10, 1)
