"""Fuzzy matching - ordered-subsequence match with a relevance score.

A query matches a candidate when every query character appears in the
candidate, in order, ignoring case. The score rewards early matches,
consecutive runs, word and camelCase boundaries, exact case, and short
candidates.
"""

from dataclasses import dataclass, field
from typing import Optional

# Per matched character
POSITION_WEIGHT = 0.3
CONSECUTIVE_STEP = 0.2
WORD_BOUNDARY_BONUS = 0.3
CAMEL_BOUNDARY_BONUS = 0.2
EXACT_CASE_BONUS = 0.1

# Normalization
MAX_SCORE_PER_CHAR = 0.9
MATCH_QUALITY_WEIGHT = 0.7
LENGTH_RATIO_WEIGHT = 0.3

WORD_SEPARATORS = frozenset(" \t\n\r\f\v-_")


@dataclass
class FuzzyMatch:
    """Score in [0, 1] and the matched candidate indices."""

    score: float
    matches: list[int] = field(default_factory=list)


def _fold(text: str) -> str:
    # Lower-case per character so indices stay aligned with the original
    return "".join(ch.lower() if len(ch.lower()) == 1 else ch for ch in text)


def is_subsequence(query: str, candidate: str) -> bool:
    """Check if all characters of query appear in order in candidate."""
    it = iter(candidate)
    return all(c in it for c in query)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def fuzzy_match(query: str, candidate: str) -> Optional[FuzzyMatch]:
    """Match query against candidate.

    Args:
        query: Search text as typed
        candidate: Text to match against (title, subtitle, keyword)

    Returns:
        FuzzyMatch, or None when query is not an ordered subsequence of
        candidate. An empty query matches with score 1 and no indices.
    """
    if not query:
        return FuzzyMatch(score=1.0)

    query_lower = _fold(query)
    candidate_lower = _fold(candidate)

    if not is_subsequence(query_lower, candidate_lower):
        return None

    matches: list[int] = []
    score = 0.0
    query_idx = 0
    prev_match = -1
    consecutive = 0
    length = len(candidate_lower)

    for i, ch in enumerate(candidate_lower):
        if query_idx >= len(query_lower):
            break
        if ch != query_lower[query_idx]:
            continue

        matches.append(i)

        score += (1 - i / length) * POSITION_WEIGHT

        if prev_match == i - 1:
            consecutive += 1
            score += consecutive * CONSECUTIVE_STEP
        else:
            consecutive = 0

        if i == 0 or candidate[i - 1] in WORD_SEPARATORS:
            score += WORD_BOUNDARY_BONUS
        elif candidate[i].isupper() and candidate[i - 1].islower():
            score += CAMEL_BOUNDARY_BONUS

        if candidate[i] == query[query_idx]:
            score += EXACT_CASE_BONUS

        prev_match = i
        query_idx += 1

    normalized = min(1.0, score / (len(query_lower) * MAX_SCORE_PER_CHAR))
    length_ratio = len(query_lower) / length
    final = normalized * MATCH_QUALITY_WEIGHT + length_ratio * LENGTH_RATIO_WEIGHT

    return FuzzyMatch(score=_clamp(final), matches=matches)
