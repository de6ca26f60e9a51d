"""
Selection Resolver - De flags y fechas crudas a un plan de lectura.

Modelo opt-in: un dominio sin flag queda fuera del export. Las fechas
se validan aquí, antes de invocar cualquier reader.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping

from sqlalchemy import Date

from app.export.domains import ExportDomain
from app.utils.errors import ValidationError

DEFAULT_HABIT_DAYS = 30


@dataclass(frozen=True)
class DateRange:
    """Rango inclusivo [start, end]; un extremo None queda abierto."""

    start: date | None = None
    end: date | None = None

    def contains(self, value: date | datetime | None) -> bool:
        if value is None:
            return False
        if isinstance(value, datetime):
            value = value.date()
        if self.start and value < self.start:
            return False
        if self.end and value > self.end:
            return False
        return True

    def clauses(self, column) -> list:
        """Condiciones SQLAlchemy para filtrar `column` por el rango."""
        conditions = []
        if isinstance(column.type, Date):
            if self.start:
                conditions.append(column >= self.start)
            if self.end:
                conditions.append(column <= self.end)
            return conditions

        # DateTime: `end` incluye el día completo
        if self.start:
            conditions.append(column >= datetime.combine(self.start, time.min))
        if self.end:
            conditions.append(
                column < datetime.combine(self.end + timedelta(days=1), time.min)
            )
        return conditions


@dataclass(frozen=True)
class DomainFetch:
    """Qué leer de un dominio y con qué restricciones."""

    domain: ExportDomain
    included: bool
    date_range: DateRange | None = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FetchPlan:
    """Plan de lectura: una entrada por dominio, en orden del enum."""

    entries: tuple[DomainFetch, ...]

    @property
    def included(self) -> list[DomainFetch]:
        return [entry for entry in self.entries if entry.included]

    @property
    def domains(self) -> list[ExportDomain]:
        return [entry.domain for entry in self.included]

    def get(self, domain: ExportDomain) -> DomainFetch | None:
        for entry in self.entries:
            if entry.domain == domain:
                return entry
        return None


def parse_date_bound(value: Any, field_name: str) -> date | None:
    """
    Parsea un extremo del rango de fechas.

    Acepta None/"" (extremo abierto), date, datetime o un string ISO-8601
    (fecha o fecha-hora, truncada a su fecha).

    Raises:
        ValidationError: si el valor no es una fecha de calendario válida
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(
            f"Fecha inválida en {field_name}: {value!r}", field=field_name
        )

    raw = value.strip()
    if not raw:
        return None

    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(
            f"Fecha inválida en {field_name}: {value!r}", field=field_name
        ) from None


def resolve_date_range(date_from: Any = None, date_to: Any = None) -> DateRange | None:
    """Construye el rango validado; None si no se dio ningún extremo."""
    start = parse_date_bound(date_from, "dateFrom")
    end = parse_date_bound(date_to, "dateTo")

    if start is None and end is None:
        return None

    if start and end and start > end:
        raise ValidationError(
            f"Rango de fechas invertido: {start.isoformat()} > {end.isoformat()}",
            field="dateFrom",
        )

    return DateRange(start=start, end=end)


def normalize_days(days: Any) -> int:
    """Ventana de días para hábitos; valores inválidos caen al default."""
    if days is None or isinstance(days, bool):
        return DEFAULT_HABIT_DAYS
    try:
        value = int(days)
    except (TypeError, ValueError):
        return DEFAULT_HABIT_DAYS
    return value if value > 0 else DEFAULT_HABIT_DAYS


def resolve_selection(
    selection: Mapping[str, Any] | None,
    date_from: Any = None,
    date_to: Any = None,
    days: Any = None,
) -> FetchPlan:
    """
    Resuelve la selección del request a un FetchPlan.

    Las claves pueden ser de dominio ("habits") o flags ("includeHabits");
    las desconocidas se ignoran. Los valores deben ser booleanos (None
    equivale a ausente); si ambas formas aparecen, basta una en true.

    Raises:
        ValidationError: fecha inválida o flag no booleano
    """
    date_range = resolve_date_range(date_from, date_to)

    flags: dict[ExportDomain, bool] = {}
    for key, value in (selection or {}).items():
        domain = ExportDomain.from_key(key)
        if domain is None or value is None:
            continue
        if not isinstance(value, bool):
            raise ValidationError(
                f"Flag de selección no booleano en {key}: {value!r}", field=key
            )
        flags[domain] = flags.get(domain, False) or value

    entries = []
    for domain in ExportDomain:
        options: dict[str, Any] = {}
        if domain == ExportDomain.HABITS:
            options["days"] = normalize_days(days)
        entries.append(
            DomainFetch(
                domain=domain,
                included=flags.get(domain, False),
                date_range=date_range,
                options=options,
            )
        )

    return FetchPlan(entries=tuple(entries))


def single_domain_plan(
    domain: ExportDomain,
    date_range: DateRange | None = None,
    **options: Any,
) -> FetchPlan:
    """Plan con un único dominio incluido (exports por dominio)."""
    return FetchPlan(
        entries=(
            DomainFetch(
                domain=domain,
                included=True,
                date_range=date_range,
                options=options,
            ),
        )
    )
