"""
Exceptions raised while loading and preparing the establishment catalog.
Query-time code never raises; see matchers.ranker.
"""


class DataIntegrityError(ValueError):
    """The catalog cannot be turned into a usable search index."""


class CatalogFormatError(DataIntegrityError):
    """The catalog file is in a format the loader does not understand."""
