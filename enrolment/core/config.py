# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Centralised settings — read from env vars once."""
import os


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    SERVICE_NAME: str = "enrolment-service"
    SERVICE_VERSION: str = "1.0.0"
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./enrolment.db")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    # Auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "dev-only-enrolment-secret-change-me")
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRY_HOURS: int = int(os.getenv("TOKEN_EXPIRY_HOURS", "168"))
    TOKEN_COOKIE_NAME: str = "token"

    _raw_origins: str = os.getenv("CORS_ORIGINS", "*")
    CORS_ORIGINS: list = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Bulk import
    IMPORT_SLASH_DATE_ORDER: str = os.getenv("IMPORT_SLASH_DATE_ORDER", "MDY").upper()
    IMPORT_MAX_BYTES: int = int(os.getenv("IMPORT_MAX_BYTES", str(10 * 1024 * 1024)))

    SEED_DEMO_DATA: bool = _as_bool(os.getenv("SEED_DEMO_DATA", "false"))


settings = Settings()
