"""
Configuration management for DoseKeeper
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "DoseKeeper"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./dosekeeper.db"
    DATABASE_ECHO: bool = False

    # Push delivery
    PUSH_PROVIDER: str = "log"  # "log" or "expo"
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"
    EXPO_ACCESS_TOKEN: Optional[str] = None
    PUSH_TIMEOUT_SECONDS: float = 5.0

    # SOS alerts
    SOS_NOTIFY_WITHOUT_PUSH_TOKEN: bool = False
    MAPS_URL_TEMPLATE: str = "https://maps.google.com/?q={latitude},{longitude}"

    # Listing limits
    DOSE_LOG_HISTORY_LIMIT: int = 50
    NOTIFICATION_PAGE_LIMIT: int = 20

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Database table names
class TableNames:
    USERS = "users"
    PATIENT_CAREGIVERS = "patient_caregivers"
    MEDICATIONS = "medications"
    MEDICATION_SCHEDULES = "medication_schedules"
    DOSE_LOGS = "dose_logs"
    NOTIFICATIONS = "notifications"


settings = get_settings()
