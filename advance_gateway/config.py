"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./advance_gateway.db"
    db_echo: bool = False
    auto_create_schema: bool = True

    # Service
    service_name: str = "advance-gateway"
    log_level: str = "INFO"
    cors_origins: Union[List[str], str] = ["http://localhost:3000"]

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 24
    bcrypt_rounds: int = 12

    # Lifecycle
    auto_approve: bool = True
    auto_approver_name: str = "Auto-System"
    credit_limit: Decimal = Decimal("5000.00")

    # Ledger webhook (disabled when unset)
    ledger_webhook_url: Optional[str] = None
    http_timeout_seconds: float = 5.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a comma-separated string as well as a list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


settings = Settings()
