"""Summary Counter - Conteo de registros por dominio (sin traer filas)."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Mapping

from app.export.domains import ExportDomain
from app.export.readers import DomainReader
from app.utils.errors import DomainReadError, ErrorCategory, log_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportSummary:
    """Conteos por dominio, check-ins de hábitos y el total."""

    counts: dict[str, int]
    habit_check_ins: int = 0

    @property
    def total_records(self) -> int:
        return sum(self.counts.values()) + self.habit_check_ins


async def _count(
    domain: ExportDomain,
    counter: Callable[[str], Awaitable[int]] | None,
    user_id: str,
) -> int:
    if counter is None:
        raise DomainReadError(domain.value, f"No hay reader registrado para {domain.value}")
    try:
        return await counter(user_id)
    except Exception as e:
        log_error(
            e,
            f"export.count.{domain.value}",
            ErrorCategory.DOMAIN_READ,
            extra={"domain": domain.value, "user_id": user_id},
        )
        raise DomainReadError(domain.value, f"Error contando {domain.value}: {e}") from e


async def build_summary(
    user_id: str,
    readers: Mapping[ExportDomain, DomainReader],
) -> ExportSummary:
    """Una query de conteo por dominio más los check-ins, todas en paralelo."""
    habits = readers.get(ExportDomain.HABITS)
    tasks: dict[ExportDomain, asyncio.Task] = {}
    try:
        async with asyncio.TaskGroup() as group:
            for domain in ExportDomain:
                reader = readers.get(domain)
                tasks[domain] = group.create_task(
                    _count(domain, reader.count if reader else None, user_id)
                )
            check_ins = group.create_task(
                _count(
                    ExportDomain.HABITS,
                    habits.count_check_ins if habits else None,
                    user_id,
                )
            )
    except ExceptionGroup as eg:
        failures = [e for e in eg.exceptions if isinstance(e, DomainReadError)]
        if not failures:
            raise
        raise failures[0]

    return ExportSummary(
        counts={domain.value: tasks[domain].result() for domain in ExportDomain},
        habit_check_ins=check_ins.result(),
    )


async def count_records(
    user_id: str,
    readers: Mapping[ExportDomain, DomainReader],
) -> dict[str, int]:
    """Solo los conteos por dominio, en orden del enum."""
    summary = await build_summary(user_id, readers)
    return summary.counts
