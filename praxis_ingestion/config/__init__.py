"""Declarative field-map configuration (YAML) for the Praxis import template."""

from praxis_ingestion.config.loader import (
    DEFAULT_CATALOG_PATH,
    compute_checksum,
    default_catalog,
    load_catalog,
    parse_catalog,
)

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "compute_checksum",
    "default_catalog",
    "load_catalog",
    "parse_catalog",
]
