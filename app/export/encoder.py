"""
Format Encoder - Bundle a JSON (estructurado) o CSV (tabular).

Reglas CSV:
    - Columnas: unión de campos de primer nivel, en orden de aparición
    - Anidados (dict/list): JSON compacto en una sola celda
    - Fechas: ISO-8601; booleanos: true/false; None: celda vacía
    - Números: str() sin formato extra
    - Escape: comillas dobles si hay coma, comilla o salto de línea;
      las comillas internas se duplican
"""

import json
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping
from uuid import UUID

from app.export.domains import ExportDomain
from app.utils.errors import EncodingError, ValidationError

logger = logging.getLogger(__name__)

_NEEDS_QUOTING = (",", '"', "\n", "\r")


class ExportFormat(str, Enum):
    """Formato de salida."""

    JSON = "json"
    CSV = "csv"


@dataclass(frozen=True)
class TabularFile:
    """CSV de un solo dominio, listo para Content-Disposition."""

    filename: str
    content: str
    media_type: str = "text/csv"


def parse_format(value: Any) -> ExportFormat:
    """
    Valida el formato pedido. None o vacío -> JSON.

    Raises:
        ValidationError: si el formato no es json ni csv
    """
    if value is None:
        return ExportFormat.JSON
    if isinstance(value, ExportFormat):
        return value
    if isinstance(value, str):
        raw = value.strip().lower()
        if not raw:
            return ExportFormat.JSON
        try:
            return ExportFormat(raw)
        except ValueError:
            pass
    raise ValidationError(
        f"Formato no soportado: {value!r} (usar json o csv)", field="format"
    )


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    raise TypeError(f"Tipo no serializable: {type(value).__name__}")


def _format_decimal(value: float | Decimal) -> str:
    """Notación posicional (sin exponente): 1e-05 -> 0.00001."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return str(value)
        value = Decimal(repr(value))
    elif not value.is_finite():
        return str(value)
    return format(value, "f")


def format_scalar(value: Any) -> str:
    """Convierte un valor de celda a texto (sin escapar)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return format_scalar(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (float, Decimal)):
        return _format_decimal(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(
            value,
            separators=(",", ":"),
            ensure_ascii=False,
            default=_json_default,
        )
    raise TypeError(f"Tipo no soportado en CSV: {type(value).__name__}")


def escape_csv_field(text: str) -> str:
    """Escapa una celda según la convención CSV estándar."""
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def collect_columns(records: Iterable[Mapping[str, Any]]) -> list[str]:
    """Unión de claves de primer nivel, en orden de primera aparición."""
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def flatten_record(record: Mapping[str, Any], columns: list[str]) -> list[str]:
    """Celdas escapadas de un registro para las columnas dadas."""
    return [escape_csv_field(format_scalar(record.get(column))) for column in columns]


def render_table(
    records: list[Mapping[str, Any]],
    domain: ExportDomain | str | None = None,
) -> str:
    """
    Renderiza registros como CSV (header + filas, separadas por \\n).

    Una lista vacía produce "" (sin header: no hay columnas conocidas).

    Raises:
        EncodingError: si un registro no se puede renderizar
    """
    domain_name = domain.value if isinstance(domain, ExportDomain) else domain

    if not records:
        return ""

    for record in records:
        if not isinstance(record, Mapping):
            raise EncodingError(
                domain_name, f"Registro no tabulable: {type(record).__name__}"
            )

    columns = collect_columns(records)
    lines = [",".join(escape_csv_field(column) for column in columns)]

    for record in records:
        try:
            lines.append(",".join(flatten_record(record, columns)))
        except (TypeError, ValueError) as e:
            raise EncodingError(
                domain_name,
                f"No se pudo renderizar registro de {domain_name}: {e}",
                record_id=record.get("id"),
            ) from e

    return "\n".join(lines)


def encode_bundle(
    bundle: Mapping[str, list[Mapping[str, Any]]],
    fmt: ExportFormat,
) -> dict[str, Any]:
    """
    Codifica el bundle completo.

    JSON devuelve el bundle tal cual; CSV devuelve {filename: contenido}
    con un archivo por dominio presente.
    """
    if fmt == ExportFormat.JSON:
        return dict(bundle)

    files: dict[str, str] = {}
    for key, records in bundle.items():
        domain = ExportDomain.from_key(key)
        if domain is None:
            raise EncodingError(key, f"Dominio desconocido en bundle: {key}")
        files[domain.filename] = render_table(records, domain)

    logger.debug(f"CSV generado: {list(files)}")
    return files


def encode_records(
    domain: ExportDomain,
    records: list[Mapping[str, Any]],
    fmt: ExportFormat,
    filename: str | None = None,
) -> list[Mapping[str, Any]] | TabularFile:
    """Codifica un único dominio (exports por dominio)."""
    if fmt == ExportFormat.JSON:
        return records
    return TabularFile(
        filename=filename or domain.filename,
        content=render_table(records, domain),
    )
