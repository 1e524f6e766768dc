"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from invoice_financing.domain.rates import DEFAULT_BATCH_SIZE


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./invoice_financing.db"

    # Service
    service_name: str = "invoice-financing"
    log_level: str = "INFO"

    # Financing run
    invoice_batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)


settings = Settings()
