from __future__ import annotations

import re
from typing import List

from coach_advisor.core.guides import (
    PROJECT_COST_GUIDES,
    PROJECT_TYPE_ALIASES,
    ROLE_ALIASES,
    SALARY_GUIDES,
)

_NON_LETTERS_RE = re.compile(r"[^a-z\s]")
_WS_RE = re.compile(r"\s+")

# below this the fuzzy match is ignored and the single-word fallback runs
MIN_ROLE_SCORE = 5


def _clean(text: str) -> str:
    return _NON_LETTERS_RE.sub("", (text or "").lower()).strip()


def _underscore(normalized: str) -> str:
    return _WS_RE.sub("_", normalized)


def score_role_key(key: str, words: List[str], underscored: str) -> float:
    """Score how well a canonical role key matches the tokenized input.

    Every key word found (exactly or as a prefix in either direction) among the
    input words earns 10 per key word; each exact word hit adds 5; the whole key
    appearing in the underscored input adds its length; any positive score gets a
    0.1 * len(key) bonus so longer, more specific keys win close calls.
    """
    key_words = key.split("_")
    score: float = 0

    if all(
        any(w == kw or w.startswith(kw) or kw.startswith(w) for w in words)
        for kw in key_words
    ):
        score += len(key_words) * 10

    for kw in key_words:
        if kw in words:
            score += 5

    if key in underscored:
        score += len(key)

    if score > 0:
        score += len(key) * 0.1
    return score


def normalize_role(role: str) -> str:
    """Map a free-text job title to a SALARY_GUIDES key.

    Returns the underscored input unchanged when nothing matches, which callers
    treat as "no market data".
    """
    normalized = _clean(role)
    underscored = _underscore(normalized)

    if underscored in SALARY_GUIDES:
        return underscored

    alias = ROLE_ALIASES.get(underscored)
    if alias:
        return alias

    # whitespace split: runs of spaces never yield an empty token that would
    # prefix-match every key
    words = normalized.split()
    best_match = ""
    best_score: float = 0
    for key in SALARY_GUIDES:
        score = score_role_key(key, words, underscored)
        if score > best_score:
            best_score = score
            best_match = key

    if best_score >= MIN_ROLE_SCORE:
        return best_match

    for word in words:
        if word in SALARY_GUIDES:
            return word

    return underscored


def normalize_project_type(project_type: str) -> str:
    """Map a free-text project description to a PROJECT_COST_GUIDES key."""
    normalized = _clean(project_type)

    alias = PROJECT_TYPE_ALIASES.get(normalized)
    if alias:
        return alias

    # an empty description would otherwise match the first guide key
    if not normalized:
        return ""

    first_word = normalized.split()[0]
    for key in PROJECT_COST_GUIDES:
        if key.replace("_", " ") in normalized or first_word in key:
            return key

    return _underscore(normalized)


def normalize_industry(industry: str | None) -> str:
    return _underscore(" ".join((industry or "").lower().split()))
