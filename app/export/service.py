"""
Export Service - Orquesta selección, agregación y codificación.

Todas las validaciones (formato, fechas, año) ocurren antes de leer
cualquier dominio.
"""

import logging
from typing import Any, Callable, Mapping

from app.export.aggregator import Bundle, aggregate
from app.export.domains import ExportDomain
from app.export.encoder import (
    ExportFormat,
    TabularFile,
    encode_bundle,
    encode_records,
    parse_format,
)
from app.export.readers import DomainReader, ProfileReader, build_readers
from app.export.selection import (
    normalize_days,
    resolve_selection,
    single_domain_plan,
)
from app.export.summary import ExportSummary, build_summary
from app.utils.errors import DomainReadError, ErrorCategory, ValidationError, log_error

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 9999


class ExportService:
    """Export de datos del usuario en JSON o CSV."""

    def __init__(
        self,
        readers: Mapping[ExportDomain, DomainReader] | None = None,
        session_factory: Callable | None = None,
        profile_reader: ProfileReader | None = None,
    ):
        self.readers = readers if readers is not None else build_readers(session_factory)
        self.profile_reader = profile_reader or ProfileReader(session_factory)

    async def export_user_data(
        self,
        user_id: str,
        selection: Mapping[str, Any] | None,
        format: Any = None,
        date_from: Any = None,
        date_to: Any = None,
        days: Any = None,
    ) -> Bundle | dict[str, str]:
        """
        Exporta los dominios seleccionados.

        Returns:
            JSON: dict dominio -> registros
            CSV: dict filename -> contenido CSV
        """
        fmt = parse_format(format)
        plan = resolve_selection(selection, date_from, date_to, days)

        logger.info(
            f"Exportando datos de {user_id}: dominios={[d.value for d in plan.domains]} "
            f"formato={fmt.value}"
        )

        bundle = await aggregate(plan, user_id, self.readers)
        return encode_bundle(bundle, fmt)

    async def _export_single(
        self,
        user_id: str,
        domain: ExportDomain,
        fmt: ExportFormat,
        filename: str | None = None,
        **options: Any,
    ) -> list[dict[str, Any]] | TabularFile:
        logger.info(f"Exportando {domain.value} de {user_id} formato={fmt.value}")
        plan = single_domain_plan(domain, **options)
        bundle = await aggregate(plan, user_id, self.readers)
        return encode_records(domain, bundle[domain.value], fmt, filename=filename)

    async def export_financial_goals(self, user_id: str, format: Any = None):
        """Exporta todas las metas financieras."""
        fmt = parse_format(format)
        return await self._export_single(user_id, ExportDomain.FINANCIAL_GOALS, fmt)

    async def export_habits(self, user_id: str, format: Any = None, days: Any = None):
        """Exporta hábitos con check-ins de los últimos `days` días."""
        fmt = parse_format(format)
        return await self._export_single(
            user_id, ExportDomain.HABITS, fmt, days=normalize_days(days)
        )

    async def export_budgets(self, user_id: str, year: Any, format: Any = None):
        """Exporta los presupuestos de un año."""
        fmt = parse_format(format)
        year = _validate_year(year)
        return await self._export_single(
            user_id,
            ExportDomain.BUDGETS,
            fmt,
            filename=f"budgets_{year}.csv",
            year=year,
        )

    async def get_export_summary(self, user_id: str) -> ExportSummary:
        """Conteo de registros por dominio."""
        logger.info(f"Resumen de export para {user_id}")
        return await build_summary(user_id, self.readers)

    async def get_profile(self, user_id: str) -> dict[str, Any] | None:
        """Perfil del usuario para el envelope JSON; None si no existe."""
        try:
            return await self.profile_reader.fetch(user_id)
        except Exception as e:
            log_error(
                e,
                "export.read.profile",
                ErrorCategory.DOMAIN_READ,
                extra={"domain": "profile", "user_id": user_id},
            )
            raise DomainReadError("profile", f"Error leyendo perfil: {e}") from e


def _validate_year(year: Any) -> int:
    if isinstance(year, bool):
        raise ValidationError(f"Año inválido: {year!r}", field="year")
    try:
        value = int(year)
    except (TypeError, ValueError):
        raise ValidationError(f"Año inválido: {year!r}", field="year") from None
    if not MIN_YEAR <= value <= MAX_YEAR:
        raise ValidationError(f"Año fuera de rango: {value}", field="year")
    return value
