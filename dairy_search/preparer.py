from types import MappingProxyType
from typing import Dict, Iterable, List, Optional
from loguru import logger

from dairy_search.errors import DataIntegrityError
from dairy_search.matchers.field_matcher import is_word_start
from dairy_search.models import EstablishmentRecord, PreparedField, PreparedRecord, SearchIndex


def prepare_field(text: str) -> PreparedField:
    """
    Case-fold a field value and index where each character occurs.

    Args:
        text (str): Raw field value.

    Returns:
        PreparedField: Folded text plus character and word-boundary position tables.
    """
    folded = text.casefold()
    positions: Dict[str, List[int]] = {}
    boundary_positions: Dict[str, List[int]] = {}
    for i, ch in enumerate(folded):
        positions.setdefault(ch, []).append(i)
        if is_word_start(folded, i):
            boundary_positions.setdefault(ch, []).append(i)

    return PreparedField(
        text=text,
        folded=folded,
        positions=MappingProxyType({ch: tuple(idx) for ch, idx in positions.items()}),
        boundary_positions=MappingProxyType({ch: tuple(idx) for ch, idx in boundary_positions.items()}),
    )


def _city_prov(record: EstablishmentRecord) -> str:
    return " ".join(part.strip() for part in (record.city, record.province) if part and part.strip())


def _reg_no_key(reg_no) -> Optional[str]:
    if reg_no is None:
        return None
    key = str(reg_no).strip()
    return key or None


def prepare(records: Iterable[EstablishmentRecord]) -> SearchIndex:
    """
    Build the read-only search index from the full catalog.

    Every record is validated before any index is returned, so callers never
    see a partially built table.

    Args:
        records (Iterable[EstablishmentRecord]): Catalog records in display order.

    Returns:
        SearchIndex: One PreparedRecord per record, keyed by registration number.

    Raises:
        DataIntegrityError: A record has a missing or duplicate reg_no, or an empty name.
    """
    prepared: List[PreparedRecord] = []
    by_reg_no: Dict[str, PreparedRecord] = {}

    for position, record in enumerate(records):
        key = _reg_no_key(record.reg_no)
        if key is None:
            raise DataIntegrityError(f"Record #{position} ({record.name!r}) has no registration number")
        if key in by_reg_no:
            raise DataIntegrityError(f"Duplicate registration number {key!r} at record #{position}")
        if not record.name or not record.name.strip():
            raise DataIntegrityError(f"Record #{position} (reg. {key}) has an empty name")

        entry = PreparedRecord(
            record=record,
            reg_no=prepare_field(key),
            name=prepare_field(record.name),
            adba=prepare_field(record.adba) if record.adba and record.adba.strip() else None,
            city_prov=prepare_field(_city_prov(record)),
        )
        prepared.append(entry)
        by_reg_no[key] = entry

    logger.debug(f"Prepared search index with {len(prepared)} establishments")
    return SearchIndex(records=tuple(prepared), by_reg_no=MappingProxyType(by_reg_no))
