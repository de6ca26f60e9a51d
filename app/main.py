"""
LifeOS - Export API

FastAPI application: export y agregación de datos del usuario.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.api.export import router as export_router
from app.config import get_settings
from app.utils.errors import ErrorCategory, LifeOSError

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.DOMAIN_READ: 502,
    ErrorCategory.ENCODING: 500,
    ErrorCategory.DATABASE: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle de la aplicación."""
    logger.info("Iniciando LifeOS - Export API")

    from app.db.database import init_db
    await init_db()

    yield

    logger.info("Deteniendo LifeOS - Export API...")

    from app.db.database import close_db
    await close_db()


# Crear aplicación FastAPI
app = FastAPI(
    title="LifeOS - Export API",
    description="Export de metas, hábitos, presupuestos y progreso del usuario",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(export_router)


@app.exception_handler(LifeOSError)
async def lifeos_error_handler(request: Request, exc: LifeOSError):
    """Traduce errores del dominio a respuestas HTTP."""
    status_code = STATUS_BY_CATEGORY.get(exc.category, 500)

    if status_code >= 500:
        logger.error(f"Error en {request.url.path}: {exc}")
    else:
        logger.warning(f"Request inválido en {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "status": "error",
            "category": exc.category.value,
            "message": exc.message,
            "details": exc.details,
        }),
    )


# ==================== ROUTES ====================


@app.get("/health")
async def health_check():
    """Health check básico."""
    return {"status": "healthy", "service": "lifeos-export"}


@app.get("/health/detailed")
async def health_check_detailed():
    """Health check con estado de la base de datos."""
    from app.db.database import check_db_connection

    db_ok = await check_db_connection()

    return {
        "status": "healthy" if db_ok else "degraded",
        "service": "lifeos-export",
        "version": "1.0.0",
        "environment": settings.app_env,
        "checks": {
            "database": {"status": "healthy" if db_ok else "unhealthy"},
        },
    }


# ==================== DEV MODE ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
