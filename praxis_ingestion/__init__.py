"""
praxis_ingestion -- Praxis estimating-system import pipeline.

Turns a Praxis CSV/XLSX export into canonical project records:
parse -> validate -> transform, with row-traceable errors and warnings.
Also generates blank import templates and exports records back to the
template shape.

Architecture:
    domain/    pure types, the field catalog, validators, reference lookup
    mapping/   value coercion and row -> record transformation
    adapters/  CSV/XLSX readers and the tabular parser
    config/    YAML field map loader
    services/  import orchestration, templates, export
Nothing here performs database or network I/O.
"""
