# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "booking-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8005"))

    # "memory" keeps documents in-process, "sql" persists them through SQLAlchemy
    DOCUMENT_STORE: str = os.getenv("DOCUMENT_STORE", "memory").lower()
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://")
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    NOTIFICATION_SERVICE_URL: str = os.getenv(
        "NOTIFICATION_SERVICE_URL", "http://notification-service:8004"
    )
    NOTIFICATION_TIMEOUT: float = float(os.getenv("NOTIFICATION_TIMEOUT", "3.0"))

    OVERTIME_SAME_DAY_ONLY: bool = (
        os.getenv("OVERTIME_SAME_DAY_ONLY", "true").lower() == "true"
    )
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "200"))
    DEFAULT_TIMELINE_LIMIT: int = int(os.getenv("DEFAULT_TIMELINE_LIMIT", "100"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
