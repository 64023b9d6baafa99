import math
from typing import List, Optional, Tuple
from loguru import logger

from dairy_search.config import DEFAULT_LIMIT, DEFAULT_THRESHOLD
from dairy_search.matchers.field_matcher import score
from dairy_search.models import EstablishmentRecord, PreparedRecord, Score, SearchHit, SearchIndex


def _clamp_threshold(threshold: float) -> float:
    if threshold is None or math.isnan(threshold) or not 0.0 <= threshold <= 1.0:
        logger.warning(f"Threshold {threshold!r} outside [0, 1], using {DEFAULT_THRESHOLD}")
        return DEFAULT_THRESHOLD
    return threshold


def _clamp_limit(limit: int) -> int:
    if limit is None or limit <= 0:
        logger.warning(f"Limit {limit!r} is not positive, using {DEFAULT_LIMIT}")
        return DEFAULT_LIMIT
    return int(limit)


def best_field_score(query: str, prepared: PreparedRecord) -> Optional[Tuple[float, str]]:
    """
    Reduce a record's per-field matches to its single best score.

    Fields are combined by maximum, not weighted. On a tie the field that comes
    first (regNo, name, adba, cityProv) is reported.

    Returns:
        Optional[Tuple[float, str]]: (score, field name), or None if no field matched.
    """
    best = None
    for field_name, field in prepared.searchable_fields():
        result = score(query, field)
        if isinstance(result, Score) and (best is None or result.value > best[0]):
            best = (result.value, field_name)
    return best


def search_hits(
    index: SearchIndex,
    query: str,
    threshold: float = DEFAULT_THRESHOLD,
    limit: int = DEFAULT_LIMIT,
) -> List[SearchHit]:
    """
    Rank every establishment in the index against a query.

    Args:
        index (SearchIndex): Prepared catalog.
        query (str): Free-text fragment; surrounding whitespace is ignored.
        threshold (float): Minimum normalized score (0-1) for a record to be kept.
        limit (int): Maximum number of hits returned.

    Returns:
        List[SearchHit]: Hits by descending score; equal scores keep catalog order.
    """
    query = (query or "").strip()
    if not query:
        return []

    threshold = _clamp_threshold(threshold)
    limit = _clamp_limit(limit)

    hits = []
    for prepared in index:
        best = best_field_score(query, prepared)
        if best is not None and best[0] >= threshold:
            hits.append(SearchHit(record=prepared.record, score=best[0], matched_field=best[1]))

    # list.sort is stable, so ties stay in catalog order
    hits.sort(key=lambda hit: -hit.score)
    logger.debug(f"Query {query!r}: {len(hits)} of {len(index)} establishments above {threshold}")
    return hits[:limit]


def search(
    index: SearchIndex,
    query: str,
    threshold: float = DEFAULT_THRESHOLD,
    limit: int = DEFAULT_LIMIT,
) -> List[EstablishmentRecord]:
    """Ranked records for a query, without scores. See `search_hits`."""
    return [hit.record for hit in search_hits(index, query, threshold, limit)]
