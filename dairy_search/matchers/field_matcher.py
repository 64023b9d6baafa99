"""
Fuzzy subsequence scoring of a query fragment against one prepared field.

A query matches a field only when all of its characters occur in the field,
in order. Each candidate alignment is rated on three components in [0, 1]:

- contiguity: share of consecutive query characters that land next to each other
- alignment: share of matched runs that start at a word boundary
- coverage: query length over field length

`combine` turns the components into the normalized score that the ranker's
threshold is compared against. Only an exact (case-insensitive) match can
reach 1.0, since any other match has coverage below 1.
"""
from bisect import bisect_left, bisect_right
from typing import List, Optional, Sequence

from dairy_search.models import NO_MATCH, MatchResult, PreparedField, Score

CONTIGUITY_WEIGHT = 0.45
ALIGNMENT_WEIGHT = 0.35
COVERAGE_WEIGHT = 0.20


def is_word_start(text: str, i: int) -> bool:
    """True if text[i] is at index 0 or follows a space or punctuation."""
    return i == 0 or not text[i - 1].isalnum()


def combine(contiguity: float, alignment: float, coverage: float) -> float:
    """
    Normalize the three match components into a single 0-1 relevance score.

    Args:
        contiguity (float): 0-1, how much of the match is made of adjacent characters.
        alignment (float): 0-1, share of match runs starting on a word boundary.
        coverage (float): 0-1, fraction of the field consumed by the query.

    Returns:
        float: Weighted score clamped to [0, 1].
    """
    value = (
        CONTIGUITY_WEIGHT * contiguity
        + ALIGNMENT_WEIGHT * alignment
        + COVERAGE_WEIGHT * coverage
    )
    return max(0.0, min(value, 1.0))


def _latest_positions(query: str, field: PreparedField) -> Optional[List[int]]:
    # Rightmost embedding: query[k] matched at or before limits[k] still leaves
    # room for the rest of the query.
    limits = [0] * len(query)
    upper = len(field)
    for k in range(len(query) - 1, -1, -1):
        occurrences = field.positions.get(query[k])
        if not occurrences:
            return None
        i = bisect_left(occurrences, upper) - 1
        if i < 0:
            return None
        upper = occurrences[i]
        limits[k] = upper
    return limits


def _next_within(occurrences: Sequence[int], after: int, limit: int) -> Optional[int]:
    i = bisect_right(occurrences, after)
    if i < len(occurrences) and occurrences[i] <= limit:
        return occurrences[i]
    return None


def _align_from(start: int, query: str, field: PreparedField, limits: List[int]) -> List[int]:
    """Extend the current run if possible, else jump to a word start, else to the next occurrence."""
    matched = [start]
    p = start
    for k in range(1, len(query)):
        ch = query[k]
        if p + 1 <= limits[k] and field.folded[p + 1] == ch:
            p += 1
        else:
            nxt = _next_within(field.boundary_positions.get(ch, ()), p, limits[k])
            if nxt is None:
                # limits[k] is itself an occurrence after p
                nxt = _next_within(field.positions[ch], p, limits[k])
            p = nxt
        matched.append(p)
    return matched


def _rate(matched: List[int], field: PreparedField) -> float:
    run_starts = [matched[0]] + [
        cur for prev, cur in zip(matched, matched[1:]) if cur != prev + 1
    ]
    runs = len(run_starts)
    m = len(matched)

    contiguity = (m - runs) / (m - 1) if m > 1 else 1.0
    alignment = sum(1 for s in run_starts if is_word_start(field.folded, s)) / runs
    coverage = m / len(field)
    return combine(contiguity, alignment, coverage)


def score(query: str, field: PreparedField) -> MatchResult:
    """
    Score a query fragment against one prepared field.

    Args:
        query (str): Raw query text; case-folded here.
        field (PreparedField): Field prepared by `preparer.prepare_field`.

    Returns:
        MatchResult: NO_MATCH when the query is not an in-order subsequence of
                     the field, otherwise Score with a value in (0, 1].
    """
    folded = query.casefold()
    if not folded or len(folded) > len(field):
        return NO_MATCH
    if folded == field.folded:
        return Score(1.0)

    limits = _latest_positions(folded, field)
    if limits is None:
        return NO_MATCH

    best = 0.0
    for start in field.positions[folded[0]]:
        if start > limits[0]:
            break
        best = max(best, _rate(_align_from(start, folded, field, limits), field))
    return Score(best)
