from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote_plus

from decouple import config, Csv


def _build_database_url() -> Optional[str]:
    url = config("DATABASE_URL", default="")
    if url:
        # plain postgres:// URLs from hosting providers need the async driver
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        return url

    user = config("POSTGRES_USER", default="")
    password = config("POSTGRES_PASSWORD", default="")
    host = config("POSTGRES_HOST", default="localhost")
    port = config("POSTGRES_PORT", default="5432")
    database = config("POSTGRES_DB", default="")
    if not (user and database):
        return None

    safe_password = quote_plus(password)
    return (
        f"postgresql+asyncpg://{user}:{safe_password}"
        f"@{host}:{port}/{database}"
    )


class Settings:
    PROJECT_NAME: str = config("PROJECT_NAME", default="Factory Telemetry API")
    API_PREFIX: str = config("API_PREFIX", default="/api")

    # database; None keeps the app up but every telemetry call fails
    DATABASE_URL: Optional[str] = _build_database_url()
    DB_POOL_SIZE: int = config("DB_POOL_SIZE", default=10, cast=int)
    DB_MAX_OVERFLOW: int = config("DB_MAX_OVERFLOW", default=0, cast=int)
    DB_ECHO: bool = config("DB_ECHO", default=False, cast=bool)
    AUTO_CREATE_TABLES: bool = config("AUTO_CREATE_TABLES", default=True, cast=bool)

    # logging
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")
    LOG_DIR: Optional[str] = config("LOG_DIR", default="") or None

    CORS_ORIGINS: List[str] = config("CORS_ORIGINS", default="*", cast=Csv())

    # vision analytics
    UPTIME_DEFAULT_WINDOW_HOURS: float = config("UPTIME_DEFAULT_WINDOW_HOURS", default=24, cast=float)


@lru_cache
def get_settings():
    return Settings()
