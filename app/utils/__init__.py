"""Utilidades de LifeOS."""

from app.utils.errors import (
    LifeOSError,
    ValidationError,
    DomainReadError,
    EncodingError,
    ErrorCategory,
    ErrorContext,
    log_error,
    retry_database,
)

__all__ = [
    # Errors
    "LifeOSError",
    "ValidationError",
    "DomainReadError",
    "EncodingError",
    "ErrorCategory",
    "ErrorContext",
    "log_error",
    "retry_database",
]
