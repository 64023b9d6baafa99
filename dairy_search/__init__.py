"""Fuzzy search over the Canadian dairy establishment registration catalog."""
from dairy_search.errors import DataIntegrityError
from dairy_search.matchers import search, search_hits
from dairy_search.preparer import prepare

__all__ = ["DataIntegrityError", "prepare", "search", "search_hits"]
