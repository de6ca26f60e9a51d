"""
Export API endpoints.

- GET  /export/summary          conteos por dominio
- POST /export/all              export multi-dominio (json | csv)
- GET  /export/financial-goals  metas financieras
- GET  /export/habits           hábitos + check-ins (ventana de días)
- GET  /export/budgets/{year}   presupuestos de un año
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import get_current_user_id, get_export_service
from app.config import get_settings
from app.export.domains import ExportDomain
from app.export.encoder import ExportFormat, TabularFile, parse_format
from app.export.service import ExportService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/export", tags=["export"])


class ExportRequest(BaseModel):
    """Body de POST /export/all: mapa `include` y/o flags include* sueltos."""

    model_config = ConfigDict(populate_by_name=True)

    format: str | None = "json"
    include: dict[str, bool] = Field(default_factory=dict)
    date_from: str | None = Field(default=None, alias="dateFrom")
    date_to: str | None = Field(default=None, alias="dateTo")
    days: Any = None

    include_financial_goals: bool | None = Field(default=None, alias="includeFinancialGoals")
    include_fitness_goals: bool | None = Field(default=None, alias="includeFitnessGoals")
    include_habits: bool | None = Field(default=None, alias="includeHabits")
    include_systems: bool | None = Field(default=None, alias="includeSystems")
    include_budgets: bool | None = Field(default=None, alias="includeBudgets")
    include_snapshots: bool | None = Field(default=None, alias="includeSnapshots")
    include_achievements: bool | None = Field(default=None, alias="includeAchievements")
    include_journals: bool | None = Field(default=None, alias="includeJournals")

    def selection(self) -> dict[str, bool]:
        flags: dict[str, bool] = dict(self.include)
        for domain in ExportDomain:
            value = getattr(self, _FLAG_FIELDS[domain])
            if value is not None:
                flags[domain.flag] = value
        return flags


_FLAG_FIELDS: dict[ExportDomain, str] = {
    ExportDomain.FINANCIAL_GOALS: "include_financial_goals",
    ExportDomain.FITNESS_GOALS: "include_fitness_goals",
    ExportDomain.HABITS: "include_habits",
    ExportDomain.SYSTEMS: "include_systems",
    ExportDomain.BUDGETS: "include_budgets",
    ExportDomain.SNAPSHOTS: "include_snapshots",
    ExportDomain.ACHIEVEMENTS: "include_achievements",
    ExportDomain.JOURNALS: "include_journals",
}


def _csv_response(file: TabularFile) -> Response:
    return Response(
        content=file.content,
        media_type=file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{file.filename}"'},
    )


@router.get("/summary")
async def export_summary(
    user_id: str = Depends(get_current_user_id),
    service: ExportService = Depends(get_export_service),
):
    """Conteo de registros por dominio."""
    summary = await service.get_export_summary(user_id)
    return {
        "summary": summary.counts,
        "habit_check_ins": summary.habit_check_ins,
        "total_records": summary.total_records,
    }


@router.post("/all")
async def export_all(
    body: ExportRequest,
    user_id: str = Depends(get_current_user_id),
    service: ExportService = Depends(get_export_service),
):
    """Exporta los dominios seleccionados."""
    fmt = parse_format(body.format)
    data = await service.export_user_data(
        user_id,
        body.selection(),
        format=fmt,
        date_from=body.date_from,
        date_to=body.date_to,
        days=body.days,
    )

    if fmt == ExportFormat.CSV:
        return {"files": data}

    profile = await service.get_profile(user_id)

    return {
        "data": data,
        "profile": profile,
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "version": settings.export_version,
    }


@router.get("/financial-goals")
async def export_financial_goals(
    format: str | None = None,
    user_id: str = Depends(get_current_user_id),
    service: ExportService = Depends(get_export_service),
):
    """Exporta metas financieras."""
    result = await service.export_financial_goals(user_id, format)
    if isinstance(result, TabularFile):
        return _csv_response(result)
    return {"goals": result}


@router.get("/habits")
async def export_habits(
    format: str | None = None,
    days: str | None = None,
    user_id: str = Depends(get_current_user_id),
    service: ExportService = Depends(get_export_service),
):
    """Exporta hábitos con check-ins de los últimos `days` días (default 30)."""
    result = await service.export_habits(user_id, format, days)
    if isinstance(result, TabularFile):
        return _csv_response(result)
    return {"habits": result}


@router.get("/budgets/{year}")
async def export_budgets(
    year: str,
    format: str | None = None,
    user_id: str = Depends(get_current_user_id),
    service: ExportService = Depends(get_export_service),
):
    """Exporta presupuestos de un año."""
    result = await service.export_budgets(user_id, year, format)
    if isinstance(result, TabularFile):
        return _csv_response(result)
    return {"budgets": result}
