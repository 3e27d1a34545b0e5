"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./fintrack.db"

    # Object storage (receipt uploads)
    storage_api_base: str = "http://localhost:8003"
    storage_bucket: str = "finance-documents"
    storage_api_key: str = ""

    # Service
    service_name: str = "fintrack-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # SMS import
    sms_duplicate_lookback: int = 100  # Recent sms transactions checked for duplicates


settings = Settings()
