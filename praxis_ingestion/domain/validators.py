"""
Row validation for Praxis import rows.

Rules run per row in a fixed order (required, enumeration, numeric, date,
format hint); the order governs message order only. Errors block
transformation; unknown enumeration values and identifier format mismatches
are warnings and never block an import.

Architecture: praxis_ingestion/domain. ZERO I/O. Rows are never mutated.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.types import (
    BatchValidationResult,
    FieldCategory,
    IssueSeverity,
    RawRow,
    RowValidationResult,
    ValidationIssue,
)
from praxis_ingestion.mapping.coercion import is_date, is_number

NO_DATA_ROWS_MESSAGE = "No data rows found in file"

RowRule = Callable[[RawRow, FieldMappingCatalog], list[ValidationIssue]]


def _error(row: RawRow, field: str, code: str, message: str) -> ValidationIssue:
    return ValidationIssue(row.row_number, field, IssueSeverity.ERROR, code, message)


def _warning(row: RawRow, field: str, code: str, message: str) -> ValidationIssue:
    return ValidationIssue(row.row_number, field, IssueSeverity.WARNING, code, message)


# -----------------------------------------------------------------------------
# Rules (one row at a time)
# -----------------------------------------------------------------------------


def check_required_fields(row: RawRow, catalog: FieldMappingCatalog) -> list[ValidationIssue]:
    return [
        _error(row, e.source_header, "MISSING_REQUIRED_FIELD", f'Missing required field "{e.source_header}"')
        for e in catalog.required_entries
        if not row.value(e)
    ]


def check_enumerations(row: RawRow, catalog: FieldMappingCatalog) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for entry in catalog:
        value = row.value(entry)
        if value and not entry.allows(value):
            issues.append(_warning(
                row,
                entry.source_header,
                "UNKNOWN_ENUM_VALUE",
                f'Unknown {entry.source_header.lower()} "{value}", will be stored as-is',
            ))
    return issues


def check_numeric_fields(row: RawRow, catalog: FieldMappingCatalog) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for entry in catalog.of_category(FieldCategory.INTEGER, FieldCategory.FLOAT):
        value = row.value(entry)
        if entry.strict and value and not is_number(value):
            issues.append(_error(
                row, entry.source_header, "INVALID_NUMBER", f'Invalid number for "{entry.source_header}": {value}',
            ))
    return issues


def check_date_fields(row: RawRow, catalog: FieldMappingCatalog) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for entry in catalog.of_category(FieldCategory.DATE):
        value = row.value(entry)
        if entry.strict and value and not is_date(value):
            issues.append(_error(
                row, entry.source_header, "INVALID_DATE", f'Invalid date for "{entry.source_header}": {value}',
            ))
    return issues


def check_format_hints(row: RawRow, catalog: FieldMappingCatalog) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for entry in catalog:
        hint = entry.format_hint
        value = row.value(entry)
        if hint is None or not value or hint.matches(value):
            continue
        label = entry.source_header[:1].upper() + entry.source_header[1:].lower()
        issues.append(_warning(
            row,
            entry.source_header,
            "FORMAT_MISMATCH",
            f'{label} "{value}" doesn\'t match expected format (e.g., {hint.example})',
        ))
    return issues


DEFAULT_RULES: tuple[RowRule, ...] = (
    check_required_fields,
    check_enumerations,
    check_numeric_fields,
    check_date_fields,
    check_format_hints,
)


# -----------------------------------------------------------------------------
# Validator
# -----------------------------------------------------------------------------


class RowValidator:
    """Applies the rule set to rows against one catalog."""

    def __init__(
        self,
        catalog: FieldMappingCatalog,
        rules: Sequence[RowRule] = DEFAULT_RULES,
        max_workers: int | None = None,
    ):
        self._catalog = catalog
        self._rules = tuple(rules)
        self._max_workers = max_workers

    def check_row(self, row: RawRow) -> tuple[ValidationIssue, ...]:
        issues: list[ValidationIssue] = []
        for rule in self._rules:
            issues.extend(rule(row, self._catalog))
        return tuple(issues)

    def validate_row(self, row: RawRow) -> RowValidationResult:
        return RowValidationResult(issues=self.check_row(row))

    def validate_all(self, rows: Sequence[RawRow]) -> BatchValidationResult:
        """Validate every row; output ordered by row, then rule order."""
        if not rows:
            return BatchValidationResult(issues=(
                ValidationIssue(None, None, IssueSeverity.ERROR, "NO_DATA_ROWS", NO_DATA_ROWS_MESSAGE),
            ))

        if self._max_workers and self._max_workers > 1 and len(rows) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                per_row = list(pool.map(self.check_row, rows))
        else:
            per_row = [self.check_row(row) for row in rows]

        issues: list[ValidationIssue] = []
        invalid: set[int] = set()
        for row, row_issues in zip(rows, per_row):
            issues.extend(row_issues)
            if any(i.is_error for i in row_issues):
                invalid.add(row.row_number)
        return BatchValidationResult(issues=tuple(issues), invalid_rows=frozenset(invalid))
