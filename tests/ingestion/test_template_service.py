"""Tests for import template generation (CSV and XLSX)."""

import csv
import io

import openpyxl
import pytest

from praxis_ingestion.adapters import parse_tabular
from praxis_ingestion.adapters.parser import MIN_ROWS_MESSAGE
from praxis_ingestion.services import ImportOptions, ImportService, TemplateService, media_type, template_filename
from praxis_ingestion.services.template_service import (
    CSV_MEDIA_TYPE,
    IMPORT_SHEET_TITLE,
    INSTRUCTIONS_SHEET_TITLE,
    XLSX_MEDIA_TYPE,
)


@pytest.fixture
def service(catalog):
    return TemplateService(catalog)


def _csv_rows(content: bytes) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content.decode("utf-8"))))


class TestCsvTemplate:
    def test_header_order_matches_catalog(self, service, catalog):
        rows = _csv_rows(service.generate_csv())
        assert rows[0] == list(catalog.headers)
        assert len(rows) == 2

    def test_sample_row(self, service, catalog):
        rows = _csv_rows(service.generate_csv())
        sample = dict(zip(rows[0], rows[1]))
        assert sample["Quote Number"] == "NW-0061-2025"
        assert sample["Factory Code"] == "NW"
        assert sample["Has Plumbing"] == "Yes"
        assert sample["Dealer Code"] == "PMSI"

    def test_generation_is_idempotent(self, service):
        assert service.generate_csv() == service.generate_csv()
        assert service.generate("csv") == service.generate_csv()

    def test_no_internal_fields(self, service):
        header = _csv_rows(service.generate_csv())[0]
        for internal in ("id", "imported_from", "imported_at", "status", "dealer_id", "factory"):
            assert internal not in header

    def test_parses_cleanly_against_its_catalog(self, service, catalog):
        result = parse_tabular(service.generate_csv(), catalog)
        assert result.ok and result.warnings == ()
        assert result.headers == catalog.headers

    def test_sample_row_imports_without_issues(self, catalog, dealers, users, deterministic_clock):
        content = TemplateService(catalog).generate_csv()
        result = ImportService(catalog, deterministic_clock).run(content, ImportOptions(dealers=dealers, users=users))
        assert result.success
        assert result.warnings == ()
        assert result.records[0]["factory"] == "NWBS - Northwest Building Systems"


class TestXlsxTemplate:
    def _load(self, content: bytes):
        return openpyxl.load_workbook(io.BytesIO(content))

    def test_sheets_and_header_row(self, service, catalog):
        wb = self._load(service.generate_xlsx())
        assert wb.sheetnames == [IMPORT_SHEET_TITLE, INSTRUCTIONS_SHEET_TITLE]
        ws = wb[IMPORT_SHEET_TITLE]
        assert [c.value for c in ws[1]] == list(catalog.headers)
        assert ws.max_row == 1
        assert ws.freeze_panes == "A2"
        assert ws["A1"].font.bold

    def test_header_order_stable_across_calls(self, service):
        first = self._load(service.generate_xlsx())[IMPORT_SHEET_TITLE]
        second = self._load(service.generate("xlsx"))[IMPORT_SHEET_TITLE]
        assert [c.value for c in first[1]] == [c.value for c in second[1]]

    def test_instructions_sheet(self, service):
        ws = self._load(service.generate_xlsx())[INSTRUCTIONS_SHEET_TITLE]
        lines = [row[0] for row in ws.iter_rows(values_only=True)]
        assert lines[0] == "Praxis Import Template - Instructions"
        assert "Required Fields:" in lines
        assert "- Building Description: Project name" in lines
        assert "- Set Type: PAD, PIERS, ABOVE GRADE SET" in lines
        assert "- NW/NWBS: NWBS - Northwest Building Systems" in lines
        assert "- Factory Code: factory code, required" in lines

    def test_header_only_workbook_is_rejected_on_import(self, service, catalog):
        assert parse_tabular(service.generate_xlsx(), catalog).errors == (MIN_ROWS_MESSAGE,)


class TestTemplateHelpers:
    def test_filenames(self):
        assert template_filename("csv") == "praxis_import_template.csv"
        assert template_filename("XLSX") == "praxis_import_template.xlsx"

    def test_media_types(self):
        assert media_type("csv") == CSV_MEDIA_TYPE == "text/csv"
        assert media_type(".xlsx") == XLSX_MEDIA_TYPE

    def test_unknown_format_rejected(self, service):
        with pytest.raises(ValueError):
            template_filename("pdf")
        with pytest.raises(ValueError):
            service.generate("json")

    def test_alternate_catalog(self, small_catalog):
        rows = _csv_rows(TemplateService(small_catalog).generate_csv())
        assert rows == [["Name", "Count", "Kind", "Plant"], ["Shed", "2", "A", "NW"]]
