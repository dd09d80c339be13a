"""
praxis_ingestion.domain.types -- Pure frozen dataclasses for the import pipeline.

ZERO I/O. Every value here is immutable once built; rows, issues and results
can be shared between threads without copying.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

# =============================================================================
# Field categories
# =============================================================================


class FieldCategory(str, Enum):
    """Semantic type governing how a column is validated and coerced."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "numeric-integer"
    FLOAT = "numeric-float"
    DATE = "date"
    LOOKUP_DEALER = "lookup-dealer"
    LOOKUP_ESTIMATOR = "lookup-estimator"
    LOOKUP_FACTORY = "lookup-factory"

    @property
    def is_numeric(self) -> bool:
        return self in (FieldCategory.INTEGER, FieldCategory.FLOAT)

    @property
    def is_lookup(self) -> bool:
        return self in (
            FieldCategory.LOOKUP_DEALER,
            FieldCategory.LOOKUP_ESTIMATOR,
            FieldCategory.LOOKUP_FACTORY,
        )


class IssueSeverity(str, Enum):
    """Errors block transformation of their row; warnings never do."""

    ERROR = "error"
    WARNING = "warning"


# =============================================================================
# Field mapping
# =============================================================================


@dataclass(frozen=True)
class FormatHint:
    """Expected shape of a free-text identifier. Mismatch is only a warning."""

    pattern: str
    example: str

    def matches(self, value: str) -> bool:
        return re.fullmatch(self.pattern, value) is not None


@dataclass(frozen=True)
class FieldMapEntry:
    """Single column of the import template: source header -> target field."""

    source_header: str
    target_field: str
    category: FieldCategory
    required: bool = False
    allowed_values: tuple[str, ...] | None = None
    strict: bool = True  # numeric/date: malformed value is a row error
    format_hint: FormatHint | None = None
    sample: str = ""  # Illustrative template value
    description: str = ""

    def allows(self, value: str) -> bool:
        """Case-insensitive enumeration membership; True when no enumeration is declared."""
        if not self.allowed_values:
            return True
        folded = value.casefold()
        return any(folded == allowed.casefold() for allowed in self.allowed_values)


# =============================================================================
# Rows and issues
# =============================================================================


@dataclass(frozen=True)
class RawRow:
    """
    One data row from the source table.

    ``row_number`` is the 1-based physical position in the source file with
    the header row counted as row 1, so the first data row is row 2.
    """

    row_number: int
    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, header: str, default: str = "") -> str:
        return self.values.get(header, default)

    def value(self, entry: FieldMapEntry) -> str:
        """Trimmed cell text for a catalog column ("" when absent)."""
        return self.values.get(entry.source_header, "").strip()

    def is_blank(self, header: str) -> bool:
        return not self.values.get(header, "").strip()

    def is_empty(self) -> bool:
        return all(not v.strip() for v in self.values.values())


@dataclass(frozen=True)
class ValidationIssue:
    """A single classified problem, traceable to a source row."""

    row_number: int | None  # None for batch-scope issues (e.g. no data rows)
    field: str | None
    severity: IssueSeverity
    code: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity is IssueSeverity.ERROR

    def render(self) -> str:
        """User-facing text, prefixed with the row number when there is one."""
        if self.row_number is None:
            return self.message
        return f"Row {self.row_number}: {self.message}"


@dataclass(frozen=True)
class ParseResult:
    """Output of the tabular parser. Non-empty ``errors`` halts the pipeline."""

    headers: tuple[str, ...] = ()
    rows: tuple[RawRow, ...] = ()
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class RowValidationResult:
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def errors(self) -> list[str]:
        return [i.render() for i in self.issues if i.is_error]

    @property
    def warnings(self) -> list[str]:
        return [i.render() for i in self.issues if not i.is_error]

    @property
    def is_valid(self) -> bool:
        return not any(i.is_error for i in self.issues)


@dataclass(frozen=True)
class BatchValidationResult:
    issues: tuple[ValidationIssue, ...] = ()
    invalid_rows: frozenset[int] = frozenset()

    @property
    def errors(self) -> list[str]:
        return [i.render() for i in self.issues if i.is_error]

    @property
    def warnings(self) -> list[str]:
        return [i.render() for i in self.issues if not i.is_error]

    @property
    def is_valid(self) -> bool:
        return not any(i.is_error for i in self.issues)


# =============================================================================
# Output records
# =============================================================================


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class CanonicalRecord:
    """Destination-schema project record built from one imported row."""

    fields: Mapping[str, Any]
    imported_from: str
    imported_at: datetime
    source_row_number: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def to_dict(self, *, plain: bool = False) -> dict[str, Any]:
        """
        Flatten to the destination row shape.

        With ``plain=True`` dates and decimals become strings so the result is
        JSON-serializable as-is.
        """
        data = dict(self.fields)
        data["imported_from"] = self.imported_from
        data["imported_at"] = self.imported_at
        data["source_row_number"] = self.source_row_number
        if plain:
            data = {k: _plain(v) for k, v in data.items()}
        return data


@dataclass(frozen=True)
class ImportStats:
    total: int = 0
    valid: int = 0
    invalid: int = 0


RESULT_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class ImportResult:
    """
    Sole output of an import call.

    ``success`` is true iff ``errors`` is empty. ``issues`` carries the
    structured form of every row-scoped error and warning.
    """

    success: bool
    records: tuple[CanonicalRecord, ...] = ()
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    stats: ImportStats = field(default_factory=ImportStats)
    issues: tuple[ValidationIssue, ...] = ()
    cancelled: bool = False
    schema_version: int = RESULT_SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "success": self.success,
            "cancelled": self.cancelled,
            "records": [r.to_dict(plain=True) for r in self.records],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "stats": {
                "total": self.stats.total,
                "valid": self.stats.valid,
                "invalid": self.stats.invalid,
            },
        }
