"""Configuracion de la aplicacion usando Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuracion principal de LifeOS - Export API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "lifeos"
    postgres_user: str = "lifeos"
    postgres_password: str = ""

    # Override completo (ej. sqlite+aiosqlite en tests)
    database_url: str = ""

    # Export
    export_version: str = "1.0"

    @property
    def async_database_url(self) -> str:
        """URL de conexion async a la base de datos."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuracion cacheada."""
    return Settings()
