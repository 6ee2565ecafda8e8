"""
Application configuration
Read from environment variables (and .env) via pydantic-settings
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Front Desk PMS"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./frontdesk.db"

    # Charge defaults used when no charge_settings row has been saved yet
    DEFAULT_PRICE_PER_KG: float = 100.0
    DEFAULT_EXTRA_PERSON_CHARGE: float = 50.0

    # Extra-person policy for the deposit estimate at check-in (per_stay | per_night)
    INTAKE_EXTRA_PERSON_POLICY: str = "per_stay"

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
