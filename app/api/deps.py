"""Dependencias compartidas de la API."""

from fastapi import Header, HTTPException

from app.export.service import ExportService


async def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """
    Identidad ya autenticada por el gateway.

    La autenticación vive fuera de este servicio; aquí solo se exige
    que el header exista.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Usuario no autenticado")
    return x_user_id.strip()


def get_export_service() -> ExportService:
    """ExportService con los readers por defecto (sesiones de app.db)."""
    return ExportService()
