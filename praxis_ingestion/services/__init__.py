"""Praxis import services (import, template generation, export)."""

from praxis_ingestion.services.export_service import RecordExporter, export_records_csv
from praxis_ingestion.services.import_service import (
    CancelToken,
    ImportOptions,
    ImportService,
    process_import,
)
from praxis_ingestion.services.template_service import (
    TemplateService,
    media_type,
    template_filename,
)

__all__ = [
    "CancelToken",
    "ImportOptions",
    "ImportService",
    "RecordExporter",
    "TemplateService",
    "export_records_csv",
    "media_type",
    "process_import",
    "template_filename",
]
