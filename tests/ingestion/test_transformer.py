"""Tests for RecordTransformer: row -> canonical project record."""

from datetime import date
from decimal import Decimal

import pytest

from praxis_ingestion.domain import RawRow, ReferenceIndex
from praxis_ingestion.exceptions import TransformError
from praxis_ingestion.mapping import IMPORTED_FROM, INITIAL_STATUS, RecordTransformer, TransformDefaults
from tests.conftest import FIXED_NOW, praxis_row


@pytest.fixture
def transformer(catalog, deterministic_clock):
    return RecordTransformer(catalog, deterministic_clock)


@pytest.fixture
def refs(catalog, dealers, users):
    return ReferenceIndex.build(dealers, users, catalog.factory_labels)


class TestTransform:
    def test_fields_coerced_by_category(self, transformer, refs):
        record = transformer.transform(RawRow(2, praxis_row()), refs)
        assert record["name"] == "14x65 INL Restroom Facility"
        assert record["praxis_quote_number"] == "NW-0061-2025"
        assert record["building_width"] == 14
        assert record["material_cost"] == Decimal("85303.59")
        assert record["contract_value"] == Decimal("184824.33")
        assert record["has_plumbing"] is True
        assert record["sold_date"] == date(2025, 5, 8)

    def test_missing_optional_values(self, transformer, refs):
        record = transformer.transform(RawRow(2, praxis_row()), refs)
        assert record["serial_number"] is None
        assert record["building_height"] is None
        assert record["requires_ttp"] is False
        assert record["drawings_due_date"] is None

    def test_lookups_become_foreign_keys(self, transformer, refs):
        record = transformer.transform(RawRow(2, praxis_row(Dealer_Code="pmsi", Estimator="HANK SMITH")), refs)
        assert record["dealer_id"] == "dealer-pmsi"
        assert record["estimator_id"] == "user-hank"
        assert "dealer_code" not in record.fields
        assert "estimator_name" not in record.fields

    def test_factory_code_kept_and_label_resolved(self, transformer, refs):
        record = transformer.transform(RawRow(2, praxis_row(Factory_Code="PMI")), refs)
        assert record["praxis_source_factory"] == "PMI"
        assert record["factory"] == "PMI - Phoenix Modular"

    def test_unknown_factory_code_passes_through(self, transformer, refs):
        record = transformer.transform(RawRow(2, praxis_row(Factory_Code="XYZ")), refs)
        assert record["factory"] == "XYZ"

    def test_factory_table_falls_back_to_catalog(self, transformer):
        record = transformer.transform(RawRow(2, praxis_row(Factory_Code="nw")), ReferenceIndex.build())
        assert record["factory"] == "NWBS - Northwest Building Systems"

    def test_default_factory_when_code_blank(self, small_catalog, deterministic_clock):
        transformer = RecordTransformer(small_catalog, deterministic_clock)
        row = RawRow(2, {"Name": "Shed", "Plant": ""})
        assert transformer.transform(row, ReferenceIndex.build())["factory"] is None
        record = transformer.transform(
            row, ReferenceIndex.build(), TransformDefaults(default_factory="PMI - Phoenix Modular")
        )
        assert record["factory"] == "PMI - Phoenix Modular"

    def test_blank_required_value_raises(self, transformer, refs):
        with pytest.raises(TransformError) as exc:
            transformer.transform(RawRow(6, praxis_row(Building_Description="")), refs)
        assert exc.value.row_number == 6
        assert exc.value.code == "TRANSFORM_ERROR"
        assert str(exc.value) == 'Row 6: Missing required field "Building Description"'

    def test_provenance_and_status(self, transformer, refs):
        record = transformer.transform(RawRow(7, praxis_row()), refs)
        assert record["status"] == INITIAL_STATUS == "Pre-PM"
        assert record.imported_from == IMPORTED_FROM == "csv_import"
        assert record.imported_at == FIXED_NOW
        assert record.source_row_number == 7

    def test_lenient_numeric_garbage_becomes_none(self, transformer, refs):
        row = RawRow(2, praxis_row(**{"Interior Wall LF": "n/a", "Engineering Cost": "TBD"}))
        record = transformer.transform(row, refs)
        assert record["interior_wall_lf"] is None
        assert record["engineering_cost"] is None

    def test_integer_columns_round(self, transformer, refs):
        record = transformer.transform(RawRow(2, praxis_row(Width="13.5", Length="64.4")), refs)
        assert record["building_width"] == 14
        assert record["building_length"] == 64

    def test_to_dict_plain_is_json_ready(self, transformer, refs):
        data = transformer.transform(RawRow(2, praxis_row()), refs).to_dict(plain=True)
        assert data["material_cost"] == "85303.59"
        assert data["sold_date"] == "2025-05-08"
        assert data["imported_at"] == FIXED_NOW.isoformat()
        assert data["source_row_number"] == 2


class TestUnresolvedReferences:
    def test_unknown_dealer_and_estimator_warn(self, transformer, refs):
        row = RawRow(4, praxis_row(Dealer_Code="ZZZ", Estimator="Nobody"))
        record = transformer.transform(row, refs)
        assert record["dealer_id"] is None
        assert record["estimator_id"] is None
        issues = transformer.unresolved_references(row, refs)
        assert [i.render() for i in issues] == [
            'Row 4: Dealer code "ZZZ" not found; dealer will be left empty',
            'Row 4: Estimator "Nobody" not found; estimator will be left empty',
        ]
        assert all(not i.is_error for i in issues)

    def test_blank_lookups_do_not_warn(self, transformer, refs):
        row = RawRow(2, praxis_row(Dealer_Code="", Estimator=""))
        assert transformer.unresolved_references(row, refs) == []

    def test_resolved_lookups_do_not_warn(self, transformer, refs):
        assert transformer.unresolved_references(RawRow(2, praxis_row()), refs) == []
