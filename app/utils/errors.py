"""Manejo centralizado de errores y excepciones."""

import logging
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy.exc import DisconnectionError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    """Categorías de errores."""

    VALIDATION = "validation"
    DOMAIN_READ = "domain_read"
    ENCODING = "encoding"
    DATABASE = "database"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Contexto de un error para logging."""

    category: ErrorCategory
    operation: str
    error_type: str
    message: str
    details: dict[str, Any] | None = None
    traceback_str: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convierte a diccionario para logging."""
        return {
            "category": self.category.value,
            "operation": self.operation,
            "error_type": self.error_type,
            "message": self.message,
            "details": self.details,
        }


class LifeOSError(Exception):
    """Excepción base para LifeOS."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.message}"


class ValidationError(LifeOSError):
    """Error de validación de datos de entrada."""

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, ErrorCategory.VALIDATION, details)
        self.field = field


class DomainReadError(LifeOSError):
    """Falló la lectura de un dominio; el export completo se aborta."""

    def __init__(self, domain: str, message: str, details: dict[str, Any] | None = None):
        details = details or {}
        details["domain"] = domain
        super().__init__(message, ErrorCategory.DOMAIN_READ, details)
        self.domain = domain


class EncodingError(LifeOSError):
    """Un registro no se pudo renderizar en el formato pedido."""

    def __init__(
        self,
        domain: str | None,
        message: str,
        record_id: Any = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["domain"] = domain
        details["record_id"] = record_id
        super().__init__(message, ErrorCategory.ENCODING, details)
        self.domain = domain
        self.record_id = record_id


def log_error(
    error: Exception,
    operation: str,
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    extra: dict[str, Any] | None = None,
) -> ErrorContext:
    """
    Registra un error con contexto estructurado.

    Args:
        error: La excepción capturada
        operation: Nombre de la operación que falló
        category: Categoría del error
        extra: Información adicional

    Returns:
        ErrorContext con los detalles del error
    """
    if isinstance(error, LifeOSError):
        category = error.category
        details = {**(error.details or {}), **(extra or {})}
    else:
        details = extra or {}

    context = ErrorContext(
        category=category,
        operation=operation,
        error_type=type(error).__name__,
        message=str(error),
        details=details,
        traceback_str=traceback.format_exc(),
    )

    logger.error(
        f"Error en {operation}: {error}",
        extra={"error_context": context.to_dict()},
    )

    return context


def retry_database():
    """Retry configurado para errores transitorios de conexión a la BD."""
    return retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type((ConnectionError, TimeoutError, DisconnectionError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
