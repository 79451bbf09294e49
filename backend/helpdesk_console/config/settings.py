"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.enums import CustomFieldEntityType


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Helpdesk REST API (system of record for rules and custom fields)
    helpdesk_api_url: str = "http://localhost:5000"
    helpdesk_api_token: str = ""
    # No timeout unless configured - failures surface as rejected calls
    helpdesk_api_timeout_seconds: Optional[float] = None

    # Custom fields merged into the rule builder vocabulary
    custom_field_entity_type: CustomFieldEntityType = CustomFieldEntityType.TICKET

    # Open rule form sessions kept in memory
    form_session_limit: int = 500
    # Forms left in editing this long are dropped when the limit is reached
    form_session_idle_seconds: int = 3600

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"

    # CORS - set to "*" to allow all origins
    cors_origins: str = "*"

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
