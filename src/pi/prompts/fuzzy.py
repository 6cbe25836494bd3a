"""Fuzzy matching utilities.

Matches if all query characters appear in order (not necessarily
consecutive).  Higher score = better match; 0 means no match.
"""

from __future__ import annotations

from typing import TypeVar

from pi.prompts.options import Option

T = TypeVar("T", bound=Option)

BASE_SCORE = 1
START_BONUS = 3
CONSECUTIVE_BONUS = 2
BOUNDARY_BONUS = 2

_BOUNDARY_CHARS = frozenset(" _-/")


def score(query: str, target: str) -> int:
    """Score how well *query* fuzzily matches *target*.

    Each matched character earns a base point, plus bonuses for matching
    at the very start, directly after the previous match, or right after a
    word boundary.
    """
    if not query:
        return 0

    query_lower = query.lower()
    target_lower = target.lower()
    if len(query_lower) > len(target_lower):
        return 0

    total = 0
    query_index = 0
    last_match_index = -2

    for i, char in enumerate(target_lower):
        if query_index >= len(query_lower):
            break
        if char != query_lower[query_index]:
            continue

        total += BASE_SCORE
        if i == 0:
            total += START_BONUS
        if i == last_match_index + 1:
            total += CONSECUTIVE_BONUS
        if i > 0 and target_lower[i - 1] in _BOUNDARY_CHARS:
            total += BOUNDARY_BONUS

        last_match_index = i
        query_index += 1

    if query_index < len(query_lower):
        return 0
    return total


def fuzzy_match(query: str, target: str) -> bool:
    if not query:
        return True
    return score(query, target) > 0


def option_score(option: Option, query: str) -> int:
    candidates = [option.label, str(option.value)]
    if option.hint:
        candidates.append(option.hint)
    return max(score(query, text) for text in candidates)


def fuzzy_filter(options: list[T], query: str) -> list[T]:
    """Filter and sort options by fuzzy match quality (best matches first).

    Ties keep their original order.
    """
    if not query:
        return options

    scored = [(option, option_score(option, query)) for option in options]
    scored = [pair for pair in scored if pair[1] > 0]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [pair[0] for pair in scored]
