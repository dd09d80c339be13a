"""
Record transformer: validated ``RawRow`` -> ``CanonicalRecord``.

Every catalog column except the dealer and estimator lookup columns is
coerced by category and assigned to its target field. The lookups become
foreign keys (``dealer_id``, ``estimator_id``) and the factory code is
resolved to its canonical label (``factory``). Records are stamped with
import provenance and the initial workflow status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from praxis_ingestion.clock import Clock, SystemClock
from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.references import ReferenceIndex, resolve_factory
from praxis_ingestion.domain.types import (
    CanonicalRecord,
    FieldCategory,
    IssueSeverity,
    RawRow,
    ValidationIssue,
)
from praxis_ingestion.exceptions import TransformError
from praxis_ingestion.mapping.coercion import coerce_value

IMPORTED_FROM = "csv_import"
INITIAL_STATUS = "Pre-PM"

DEALER_FIELD = "dealer_id"
ESTIMATOR_FIELD = "estimator_id"
FACTORY_FIELD = "factory"
STATUS_FIELD = "status"

# Resolved into foreign keys rather than copied onto the record.
_REFERENCE_ONLY = (FieldCategory.LOOKUP_DEALER, FieldCategory.LOOKUP_ESTIMATOR)


@dataclass(frozen=True)
class TransformDefaults:
    default_factory: str | None = None


class RecordTransformer:
    """Turns validated rows into canonical project records for one catalog."""

    def __init__(self, catalog: FieldMappingCatalog, clock: Clock | None = None):
        self._catalog = catalog
        self._clock = clock or SystemClock()
        self._dealer_entry = catalog.lookup_entry(FieldCategory.LOOKUP_DEALER)
        self._estimator_entry = catalog.lookup_entry(FieldCategory.LOOKUP_ESTIMATOR)
        self._factory_entry = catalog.lookup_entry(FieldCategory.LOOKUP_FACTORY)

    def transform(
        self,
        row: RawRow,
        refs: ReferenceIndex,
        defaults: TransformDefaults | None = None,
    ) -> CanonicalRecord:
        """
        Build the record for one row.

        Raises ``TransformError`` when a required column has no usable value,
        which only happens for rows that skipped validation.
        """
        defaults = defaults or TransformDefaults()
        fields: dict[str, Any] = {}

        for entry in self._catalog:
            if entry.category in _REFERENCE_ONLY:
                continue
            value = coerce_value(row.value(entry), entry.category)
            if entry.required and value is None:
                raise TransformError(row.row_number, f'Missing required field "{entry.source_header}"')
            fields[entry.target_field] = value

        fields[DEALER_FIELD] = self._dealer_id(row, refs)
        fields[ESTIMATOR_FIELD] = self._estimator_id(row, refs)

        factory_code = row.value(self._factory_entry) if self._factory_entry else ""
        if factory_code:
            fields[FACTORY_FIELD] = resolve_factory(factory_code, refs.factories or self._catalog.factory_labels)
        else:
            fields[FACTORY_FIELD] = defaults.default_factory or None

        fields[STATUS_FIELD] = INITIAL_STATUS

        return CanonicalRecord(
            fields=fields,
            imported_from=IMPORTED_FROM,
            imported_at=self._clock.now(),
            source_row_number=row.row_number,
        )

    def unresolved_references(self, row: RawRow, refs: ReferenceIndex) -> list[ValidationIssue]:
        """Warnings for dealer codes or estimator names that are present but unknown."""
        issues: list[ValidationIssue] = []
        if self._dealer_entry is not None:
            code = row.value(self._dealer_entry)
            if code and refs.resolve_dealer(code) is None:
                issues.append(ValidationIssue(
                    row.row_number,
                    self._dealer_entry.source_header,
                    IssueSeverity.WARNING,
                    "UNRESOLVED_DEALER",
                    f'Dealer code "{code}" not found; dealer will be left empty',
                ))
        if self._estimator_entry is not None:
            name = row.value(self._estimator_entry)
            if name and refs.resolve_estimator(name) is None:
                issues.append(ValidationIssue(
                    row.row_number,
                    self._estimator_entry.source_header,
                    IssueSeverity.WARNING,
                    "UNRESOLVED_ESTIMATOR",
                    f'Estimator "{name}" not found; estimator will be left empty',
                ))
        return issues

    def _dealer_id(self, row: RawRow, refs: ReferenceIndex) -> Any | None:
        if self._dealer_entry is None:
            return None
        return refs.resolve_dealer(row.value(self._dealer_entry))

    def _estimator_id(self, row: RawRow, refs: ReferenceIndex) -> Any | None:
        if self._estimator_entry is None:
            return None
        return refs.resolve_estimator(row.value(self._estimator_entry))
