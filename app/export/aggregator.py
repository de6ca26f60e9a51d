"""
Aggregator - Fan-out/fan-in sobre los Domain Readers.

Todas las lecturas corren dentro de un TaskGroup: si una falla, las
demás se cancelan y no se devuelve ningún bundle parcial.
"""

import asyncio
import logging
from typing import Any, Mapping

from app.export.domains import ExportDomain
from app.export.readers import DomainReader
from app.export.selection import DomainFetch, FetchPlan
from app.utils.errors import DomainReadError, ErrorCategory, log_error

logger = logging.getLogger(__name__)

Bundle = dict[str, list[dict[str, Any]]]


async def _read_domain(
    entry: DomainFetch,
    user_id: str,
    readers: Mapping[ExportDomain, DomainReader],
) -> list[dict[str, Any]]:
    """Lee un dominio y traduce cualquier falla a DomainReadError."""
    reader = readers.get(entry.domain)
    if reader is None:
        raise DomainReadError(
            entry.domain.value, f"No hay reader registrado para {entry.domain.value}"
        )

    try:
        records = await reader.fetch(user_id, entry.date_range, **entry.options)
    except DomainReadError:
        raise
    except Exception as e:
        log_error(
            e,
            f"export.read.{entry.domain.value}",
            ErrorCategory.DOMAIN_READ,
            extra={"domain": entry.domain.value, "user_id": user_id},
        )
        raise DomainReadError(
            entry.domain.value,
            f"Error leyendo {entry.domain.value}: {e}",
        ) from e

    return list(records)


async def aggregate(
    plan: FetchPlan,
    user_id: str,
    readers: Mapping[ExportDomain, DomainReader],
) -> Bundle:
    """
    Ejecuta el plan y arma el bundle.

    Args:
        plan: Plan resuelto (solo se leen los dominios incluidos)
        user_id: Identidad ya autenticada
        readers: Registro de readers por dominio

    Returns:
        Dict dominio -> registros, en orden del plan. Los dominios
        excluidos no aparecen (ni siquiera como lista vacía).

    Raises:
        DomainReadError: si cualquier reader falla
    """
    included = plan.included
    if not included:
        return {}

    tasks: dict[ExportDomain, asyncio.Task] = {}
    try:
        async with asyncio.TaskGroup() as group:
            for entry in included:
                tasks[entry.domain] = group.create_task(
                    _read_domain(entry, user_id, readers),
                    name=f"export-{entry.domain.value}",
                )
    except ExceptionGroup as eg:
        failures = [e for e in eg.exceptions if isinstance(e, DomainReadError)]
        if not failures:
            raise
        raise failures[0]

    bundle: Bundle = {}
    for entry in included:
        bundle[entry.domain.value] = tasks[entry.domain].result()

    logger.info(
        f"Bundle armado para {user_id}: "
        + ", ".join(f"{k}={len(v)}" for k, v in bundle.items())
    )
    return bundle
