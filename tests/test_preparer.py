import dataclasses

import pytest

from dairy_search.errors import DataIntegrityError
from dairy_search.models import EstablishmentRecord
from dairy_search.preparer import prepare, prepare_field


def make_record(reg_no, name="Acme Dairy", **kwargs) -> EstablishmentRecord:
    kwargs.setdefault("city", "Toronto")
    kwargs.setdefault("province", "ON")
    return EstablishmentRecord(reg_no=reg_no, name=name, **kwargs)


def test_prepare_builds_one_entry_per_record():
    records = [make_record(1234), make_record("1245", name="Laiterie Beauce", adba="Fromagerie de la Beauce")]
    index = prepare(records)

    assert len(index) == 2
    assert [p.record for p in index] == records
    assert index.get(1234) is records[0]
    assert index.get("1245") is records[1]
    assert index.get(9999) is None


def test_prepared_fields():
    index = prepare([make_record(1234)])
    prepared = index.records[0]

    assert prepared.reg_no.text == "1234"
    assert prepared.name.folded == "acme dairy"
    assert prepared.adba is None
    assert prepared.city_prov.text == "Toronto ON"
    assert [name for name, _ in prepared.searchable_fields()] == ["regNo", "name", "cityProv"]


def test_adba_included_when_present():
    prepared = prepare([make_record(1, adba="Valley Fresh")]).records[0]
    assert [name for name, _ in prepared.searchable_fields()] == ["regNo", "name", "adba", "cityProv"]


def test_blank_adba_is_treated_as_absent():
    prepared = prepare([make_record(1, adba="   ")]).records[0]
    assert prepared.adba is None


def test_city_prov_with_missing_province():
    prepared = prepare([make_record(1, province=None)]).records[0]
    assert prepared.city_prov.text == "Toronto"


def test_field_position_tables():
    field = prepare_field("Acme Dairy")
    assert field.positions["a"] == (0, 6)
    assert dict(field.boundary_positions) == {"a": (0,), "d": (5,)}


def test_duplicate_reg_no_raises():
    with pytest.raises(DataIntegrityError, match="Duplicate"):
        prepare([make_record(1234), make_record("1234", name="Other Dairy")])


@pytest.mark.parametrize("reg_no", [None, "", "   "])
def test_missing_reg_no_raises(reg_no):
    with pytest.raises(DataIntegrityError, match="registration number"):
        prepare([make_record(reg_no)])


@pytest.mark.parametrize("name", ["", "  "])
def test_empty_name_raises(name):
    with pytest.raises(DataIntegrityError, match="empty name"):
        prepare([make_record(1, name=name)])


def test_index_is_read_only():
    index = prepare([make_record(1234)])
    with pytest.raises(dataclasses.FrozenInstanceError):
        index.records = ()
    with pytest.raises(TypeError):
        index.by_reg_no["9999"] = index.records[0]
    with pytest.raises(TypeError):
        index.records[0].name.positions["z"] = (0,)
