"""
Import service: parse -> validate -> transform -> result manifest.

Orchestrates the tabular parser, row validator and record transformer for one
Praxis export. The pipeline performs no I/O: the caller passes file content
and the dealer/user lookups it has already fetched, and receives an immutable
``ImportResult``. Nothing is written anywhere; persisting records is the
caller's job.

Batch policy: fail-closed by default. One row error means no records at all
(``stats.invalid == total``). ``allow_partial=True`` transforms the rows that
passed and reports the rest, with ``success`` still false.

Uses structured logging (LogContext, get_logger("ingestion.*")).
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Sequence
from uuid import uuid4

from praxis_ingestion.adapters.parser import TabularParser
from praxis_ingestion.clock import Clock, SystemClock
from praxis_ingestion.config.loader import default_catalog
from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.references import ReferenceIndex
from praxis_ingestion.domain.types import (
    CanonicalRecord,
    ImportResult,
    ImportStats,
    IssueSeverity,
    RawRow,
    ValidationIssue,
)
from praxis_ingestion.domain.validators import RowValidator
from praxis_ingestion.exceptions import TransformError
from praxis_ingestion.logging_config import LogContext, get_logger
from praxis_ingestion.mapping.transformer import RecordTransformer, TransformDefaults

logger = get_logger("ingestion.import_service")

CANCELLED_MESSAGE = "Import cancelled"


class CancelToken:
    """Cooperative cancellation flag, checked between stages and between rows."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class ImportOptions:
    """Per-call inputs. Lookups are plain ``{"code"|"name", "id"}`` records."""

    dealers: Sequence[Any] = ()
    users: Sequence[Any] = ()
    default_factory: str | None = None
    allow_partial: bool = False
    max_workers: int | None = None  # >1 validates/transforms rows on a thread pool
    cancel_token: CancelToken | None = None
    source_filename: str | None = None
    actor_id: str | None = None


def _order_by_row(issues: list[ValidationIssue]) -> list[ValidationIssue]:
    # Stable: batch-scope issues first, then by source row, keeping stage order within a row.
    return sorted(issues, key=lambda i: -1 if i.row_number is None else i.row_number)


class _RunState:
    """Append-only accumulators for one run."""

    def __init__(self, total: int = 0):
        self.total = total
        self.issues: list[ValidationIssue] = []
        self.records: list[CanonicalRecord] = []

    def add(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues.extend(issues)

    def result(self, *, invalid: int | None = None, cancelled: bool = False) -> ImportResult:
        issues = _order_by_row(self.issues)
        if cancelled:
            issues.append(ValidationIssue(None, None, IssueSeverity.ERROR, "CANCELLED", CANCELLED_MESSAGE))
        errors = tuple(i.render() for i in issues if i.is_error)
        warnings = tuple(i.render() for i in issues if not i.is_error)
        valid = len(self.records)
        return ImportResult(
            success=not errors,
            records=tuple(self.records),
            errors=errors,
            warnings=warnings,
            stats=ImportStats(
                total=self.total,
                valid=valid,
                invalid=self.total - valid if invalid is None else invalid,
            ),
            issues=tuple(issues),
            cancelled=cancelled,
        )


class ImportService:
    """Runs one Praxis import against a catalog. Stateless between calls."""

    def __init__(
        self,
        catalog: FieldMappingCatalog | None = None,
        clock: Clock | None = None,
        parser: TabularParser | None = None,
    ):
        self._catalog = catalog or default_catalog()
        self._clock = clock or SystemClock()
        self._parser = parser or TabularParser()
        self._transformer = RecordTransformer(self._catalog, self._clock)

    @property
    def catalog(self) -> FieldMappingCatalog:
        return self._catalog

    def run(self, content: bytes | str, options: ImportOptions | None = None) -> ImportResult:
        options = options or ImportOptions()
        with LogContext.bind(
            correlation_id=str(uuid4()),
            producer="ingestion",
            source_filename=options.source_filename,
            actor_id=options.actor_id,
        ):
            return self._run(content, options)

    def _run(self, content: bytes | str, options: ImportOptions) -> ImportResult:
        token = options.cancel_token
        logger.info(
            "import_started",
            extra={"catalog": self._catalog.name, "content_length": len(content), "allow_partial": options.allow_partial},
        )

        # Stage 1: parse
        state = _RunState()
        if token is not None and token.cancelled:
            return self._cancelled(state)
        parsed = self._parser.parse(content, self._catalog)
        state.add([ValidationIssue(None, None, IssueSeverity.WARNING, "UNKNOWN_COLUMN", w) for w in parsed.warnings])
        if parsed.errors:
            state.add([ValidationIssue(None, None, IssueSeverity.ERROR, "STRUCTURAL_ERROR", e) for e in parsed.errors])
            logger.warning("import_parse_failed", extra={"errors": list(parsed.errors)})
            return state.result()

        rows = parsed.rows
        state.total = len(rows)

        # Stage 2: validate every row
        if token is not None and token.cancelled:
            return self._cancelled(state)
        validator = RowValidator(self._catalog, max_workers=options.max_workers)
        validation = validator.validate_all(rows)
        state.add(validation.issues)

        if not validation.is_valid:
            if not options.allow_partial or not rows:
                logger.info(
                    "import_validation_failed",
                    extra={"total_rows": len(rows), "invalid_rows": len(validation.invalid_rows)},
                )
                return state.result(invalid=len(rows))
            rows = tuple(r for r in rows if r.row_number not in validation.invalid_rows)

        # Stage 3: transform rows independently
        refs = ReferenceIndex.build(options.dealers, options.users, self._catalog.factory_labels)
        defaults = TransformDefaults(default_factory=options.default_factory)

        if options.max_workers and options.max_workers > 1 and len(rows) > 1:
            if token is not None and token.cancelled:
                return self._cancelled(state)
            with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
                outcomes = list(pool.map(lambda r: self._transform_one(r, refs, defaults), rows))
            for record, issues in outcomes:
                state.add(issues)
                if record is not None:
                    state.records.append(record)
        else:
            for row in rows:
                if token is not None and token.cancelled:
                    return self._cancelled(state)
                record, issues = self._transform_one(row, refs, defaults)
                state.add(issues)
                if record is not None:
                    state.records.append(record)

        result = state.result()
        logger.info(
            "import_completed",
            extra={
                "success": result.success,
                "total_rows": result.stats.total,
                "valid_rows": result.stats.valid,
                "invalid_rows": result.stats.invalid,
                "warning_count": len(result.warnings),
            },
        )
        return result

    def _transform_one(
        self,
        row: RawRow,
        refs: ReferenceIndex,
        defaults: TransformDefaults,
    ) -> tuple[CanonicalRecord | None, list[ValidationIssue]]:
        try:
            record = self._transformer.transform(row, refs, defaults)
        except Exception as exc:
            logger.warning("row_transform_failed", extra={"source_row": row.row_number}, exc_info=True)
            reason = exc.reason if isinstance(exc, TransformError) else exc
            return None, [ValidationIssue(
                row.row_number, None, IssueSeverity.ERROR, "TRANSFORM_ERROR", f"Transform error - {reason}",
            )]
        logger.debug("row_transformed", extra={"source_row": row.row_number})
        return record, self._transformer.unresolved_references(row, refs)

    def _cancelled(self, state: _RunState) -> ImportResult:
        logger.info("import_cancelled", extra={"records_built": len(state.records)})
        return state.result(cancelled=True)


def process_import(
    content: bytes | str,
    *,
    dealers: Sequence[Any] = (),
    users: Sequence[Any] = (),
    default_factory: str | None = None,
    catalog: FieldMappingCatalog | None = None,
    clock: Clock | None = None,
    **options: Any,
) -> ImportResult:
    """One-call import with the shipped catalog (or ``catalog``)."""
    service = ImportService(catalog=catalog, clock=clock)
    return service.run(
        content,
        ImportOptions(dealers=dealers, users=users, default_factory=default_factory, **options),
    )
