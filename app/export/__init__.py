"""
Export module - Export y agregación de datos del usuario.

Estructura:
    - domains: conjunto cerrado de dominios exportables
    - selection: flags + fechas -> FetchPlan
    - readers: un reader por dominio (SQLAlchemy async)
    - aggregator: fan-out/fan-in de readers -> bundle
    - encoder: bundle -> JSON o CSV
    - summary: conteos por dominio
    - service: fachada usada por la API
"""

from app.export.aggregator import aggregate
from app.export.domains import ExportDomain
from app.export.encoder import (
    ExportFormat,
    TabularFile,
    encode_bundle,
    escape_csv_field,
    flatten_record,
    format_scalar,
    parse_format,
    render_table,
)
from app.export.selection import (
    DEFAULT_HABIT_DAYS,
    DateRange,
    DomainFetch,
    FetchPlan,
    resolve_selection,
)
from app.export.service import ExportService
from app.export.summary import ExportSummary, build_summary, count_records

__all__ = [
    "aggregate",
    "ExportDomain",
    "ExportFormat",
    "TabularFile",
    "encode_bundle",
    "escape_csv_field",
    "flatten_record",
    "format_scalar",
    "parse_format",
    "render_table",
    "DEFAULT_HABIT_DAYS",
    "DateRange",
    "DomainFetch",
    "FetchPlan",
    "resolve_selection",
    "ExportService",
    "ExportSummary",
    "build_summary",
    "count_records",
]
