"""
Record export: canonical records back to the import template's CSV shape.

Inverse of the transformer for review and re-import. Columns follow catalog
order; foreign keys are turned back into dealer codes and estimator names
through the same ``ReferenceIndex`` the import used.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable

from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.references import ReferenceIndex
from praxis_ingestion.domain.types import CanonicalRecord, FieldCategory, FieldMapEntry
from praxis_ingestion.mapping.transformer import DEALER_FIELD, ESTIMATOR_FIELD


def format_cell(value: Any) -> str:
    """Template text for one coerced value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


class RecordExporter:
    """Renders records as template rows for one catalog."""

    def __init__(self, catalog: FieldMappingCatalog, refs: ReferenceIndex | None = None):
        self._catalog = catalog
        self._refs = refs or ReferenceIndex.build(factories=catalog.factory_labels)

    def row_for(self, record: CanonicalRecord) -> list[str]:
        return [self._cell(record, entry) for entry in self._catalog]

    def _cell(self, record: CanonicalRecord, entry: FieldMapEntry) -> str:
        if entry.category is FieldCategory.LOOKUP_DEALER:
            return self._refs.dealer_code_for(record.get(DEALER_FIELD)) or ""
        if entry.category is FieldCategory.LOOKUP_ESTIMATOR:
            return self._refs.estimator_name_for(record.get(ESTIMATOR_FIELD)) or ""
        return format_cell(record.get(entry.target_field))

    def export_csv(self, records: Iterable[CanonicalRecord]) -> bytes:
        buf = io.StringIO(newline="")
        writer = csv.writer(buf, lineterminator="\r\n")
        writer.writerow(self._catalog.headers)
        for record in records:
            writer.writerow(self.row_for(record))
        return buf.getvalue().encode("utf-8")


def export_records_csv(
    records: Iterable[CanonicalRecord],
    catalog: FieldMappingCatalog,
    refs: ReferenceIndex | None = None,
) -> bytes:
    return RecordExporter(catalog, refs).export_csv(records)
