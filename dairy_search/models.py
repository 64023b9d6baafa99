"""
Typed data models for the establishment search engine.
All data structures used throughout the codebase should be defined here.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class EstablishmentRecord:
    """One registered dairy establishment, as loaded from the catalog."""
    reg_no: Union[int, str]
    name: str
    adba: Optional[str] = None  # "also doing business as"
    street_addr: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    telephone: Optional[str] = None


@dataclass(frozen=True)
class PreparedField:
    """
    A searchable field value plus the lookup tables the field matcher uses.

    `positions` maps each character of `folded` to the ascending indexes where
    it occurs; `boundary_positions` keeps only the indexes that start a word
    (index 0, or right after a non-alphanumeric character).
    """
    text: str
    folded: str
    positions: Mapping[str, Tuple[int, ...]]
    boundary_positions: Mapping[str, Tuple[int, ...]]

    def __len__(self) -> int:
        return len(self.folded)


@dataclass(frozen=True)
class PreparedRecord:
    """Catalog record with its four searchable fields pre-indexed."""
    record: EstablishmentRecord
    reg_no: PreparedField
    name: PreparedField
    adba: Optional[PreparedField]
    city_prov: PreparedField

    def searchable_fields(self) -> Iterator[Tuple[str, PreparedField]]:
        """Yield (field name, prepared field) pairs, skipping an absent adba."""
        yield "regNo", self.reg_no
        yield "name", self.name
        if self.adba is not None:
            yield "adba", self.adba
        yield "cityProv", self.city_prov


@dataclass(frozen=True)
class SearchIndex:
    """
    Read-only table of prepared records, in catalog order.

    Built once by `preparer.prepare` and shared by reference between queries.
    """
    records: Tuple[PreparedRecord, ...]
    by_reg_no: Mapping[str, PreparedRecord] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[PreparedRecord]:
        return iter(self.records)

    def get(self, reg_no: Union[int, str]) -> Optional[EstablishmentRecord]:
        prepared = self.by_reg_no.get(str(reg_no).strip())
        return prepared.record if prepared else None


class NoMatch:
    """The query is not a subsequence of the field."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()


@dataclass(frozen=True)
class Score:
    """Normalized relevance of a field match, 0.0 to 1.0 (1.0 = exact)."""
    value: float


MatchResult = Union[NoMatch, Score]


@dataclass(frozen=True)
class SearchHit:
    """A ranked record with the score and field that placed it."""
    record: EstablishmentRecord
    score: float
    matched_field: str
