import json
from pathlib import Path
from unittest.mock import patch

import pytest

from dairy_search.catalog import load_catalog
from dairy_search.errors import CatalogFormatError, DataIntegrityError
from dairy_search.matchers.ranker import search
from main import build_index, main

SAMPLE_CATALOG = Path(__file__).resolve().parent.parent / "data" / "establishments.csv"


def test_load_sample_catalog():
    records = load_catalog(SAMPLE_CATALOG)

    assert len(records) == 12
    acme = records[0]
    assert acme.reg_no == 1234
    assert acme.name == "Acme Dairy"
    assert acme.adba is None
    assert acme.city == "Toronto"
    assert acme.postal_code == "M5J 2N1"
    # quoted field containing a comma
    assert records[8].name == "Rocky Ridge Dairies, Ltd."
    assert records[8].adba == "Ridge Ice Cream"


def test_load_csv_keeps_leading_zero_reg_no(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text("regNo,name,city,province\n0123,Tiny Creamery,Nelson,BC\n")

    records = load_catalog(path)

    assert records[0].reg_no == "0123"
    assert records[0].adba is None
    assert records[0].telephone is None


def test_load_json_catalog(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([
        {"regNo": 1560, "name": "Island Creamery", "adba": None, "city": "Charlottetown", "province": "PE"},
        {"regNo": 1612, "name": "Red River Butter Company", "adba": "Red River", "city": "Winnipeg", "province": "MB"},
    ]))

    records = load_catalog(path)

    assert [r.reg_no for r in records] == [1560, 1612]
    assert isinstance(records[0].reg_no, int)
    assert records[0].adba is None
    assert records[1].adba == "Red River"


def test_missing_required_column_raises(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text("regNo,city\n1,Guelph\n")

    with pytest.raises(DataIntegrityError, match="name"):
        load_catalog(path)


def test_unsupported_format_raises(tmp_path):
    path = tmp_path / "catalog.txt"
    path.write_text("regNo,name\n1,Acme\n")

    with pytest.raises(CatalogFormatError):
        load_catalog(path)


def test_missing_name_cell_fails_preparation(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text("regNo,name\n1,Acme Dairy\n2,\n")

    with pytest.raises(DataIntegrityError, match="empty name"):
        build_index(str(path))


def test_build_index_from_sample_catalog():
    index = build_index(str(SAMPLE_CATALOG))

    assert len(index) == 12
    assert search(index, "1402")[0].name == "Maritime Dairy Co-operative"


@pytest.mark.asyncio
@pytest.mark.parametrize("file_name, content", [
    ("empty.csv", ""),
    ("broken.json", "[{\"regNo\": 1, \"name\": "),
    ("no_name.csv", "regNo,city\n1,Guelph\n"),
])
async def test_main_exits_cleanly_on_malformed_catalog(tmp_path, file_name, content):
    path = tmp_path / file_name
    path.write_text(content)

    with patch("main.CATALOG_PATH", str(path)), patch("main.logger") as mock_logger:
        assert await main(["acme"]) == 1

    assert mock_logger.error.called


@pytest.mark.asyncio
async def test_main_one_shot_search(capsys):
    with patch("main.CATALOG_PATH", str(SAMPLE_CATALOG)), patch("main.logger"):
        assert await main(["acme"]) == 0

    assert "Acme Dairy" in capsys.readouterr().out
