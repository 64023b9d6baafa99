"""Field scoring and ranking over a prepared establishment index."""
from dairy_search.matchers.field_matcher import score, combine
from dairy_search.matchers.ranker import search, search_hits

__all__ = ["score", "combine", "search", "search_hits"]
