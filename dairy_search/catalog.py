from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd
from loguru import logger

from dairy_search.errors import CatalogFormatError, DataIntegrityError
from dairy_search.models import EstablishmentRecord

# Catalog column -> EstablishmentRecord attribute
COLUMNS = {
    "regNo": "reg_no",
    "name": "name",
    "adba": "adba",
    "streetAddr": "street_addr",
    "city": "city",
    "province": "province",
    "postalCode": "postal_code",
    "telephone": "telephone",
}
REQUIRED_COLUMNS = ("regNo", "name")


def _parse_reg_no(value) -> Optional[Union[int, str]]:
    """Parse a registration number from the types pandas may hand back."""
    if value is None:
        return None
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        if np.isnan(value):
            return None
        return int(value) if float(value).is_integer() else str(value)
    s = str(value).strip()
    if not s:
        return None
    return int(s) if s.isdigit() and not s.startswith("0") else s


def _text(value) -> Optional[str]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    s = str(value).strip()
    return s or None


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, dtype=str)
    if suffix == ".json":
        return pd.read_json(path, orient="records", dtype=False)
    raise CatalogFormatError(f"Unsupported catalog format '{suffix}' for {path}")


def records_from_frame(df: pd.DataFrame) -> List[EstablishmentRecord]:
    """
    Convert a catalog DataFrame into EstablishmentRecord objects.

    Missing optional columns and NaN cells become None. Validation of
    registration numbers and names is left to `preparer.prepare`.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise DataIntegrityError(f"Catalog is missing required column(s): {', '.join(missing)}")

    records = []
    for _, row in df.iterrows():
        values = {attr: row[col] if col in row.index else None for col, attr in COLUMNS.items()}
        records.append(EstablishmentRecord(
            reg_no=_parse_reg_no(values.pop("reg_no")),
            name=_text(values.pop("name")) or "",
            **{attr: _text(v) for attr, v in values.items()},
        ))
    return records


def load_catalog(file_path: Union[str, Path]) -> List[EstablishmentRecord]:
    """
    Load the establishment catalog from a CSV or JSON file.

    Args:
        file_path (Union[str, Path]): Path to a .csv file, or a .json array of objects.

    Returns:
        List[EstablishmentRecord]: Records in file order.

    Raises:
        CatalogFormatError: Unsupported file extension.
        DataIntegrityError: Required columns are missing.
    """
    path = Path(file_path)
    df = _read_frame(path)
    records = records_from_frame(df)
    logger.debug(f"Loaded {len(records)} establishments from {path}")
    return records
