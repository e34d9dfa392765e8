from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import os
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    # App settings
    APP_NAME: str = "Procurement API"
    API_PREFIX: str = "/api"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    VERSION: str = "0.1.0"

    # Database settings - PostgreSQL
    # DATABASE_URL takes precedence over the individual DB_* values
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
    DB_SERVER: str = os.getenv("DB_SERVER", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "procurement_db")
    DB_USER: str = os.getenv("DB_USER", "db_user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "db_password")
    DB_ECHO: bool = os.getenv("DB_ECHO", "False").lower() == "true"

    # CORS settings (comma separated)
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment name
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    model_config = SettingsConfigDict(
        # This will look for environment-specific files first, then fall back to the default
        env_file=(".env.{environment}", ".env"),
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator('ENVIRONMENT', mode='before')
    def set_environment(cls, v):
        """Get environment from ENV variable or use default"""
        return os.getenv('ENVIRONMENT', v)

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def __init__(self, **kwargs):
        # Replace {environment} placeholder with actual environment name
        if isinstance(self.model_config['env_file'], tuple):
            env_files = []
            for file in self.model_config['env_file']:
                if '{environment}' in file:
                    env = os.getenv('ENVIRONMENT', 'development')
                    file = file.format(environment=env)
                env_files.append(file)
            self.model_config['env_file'] = tuple(env_files)

        super().__init__(**kwargs)


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached settings instance to avoid loading .env file on each request
    """
    return Settings()


settings = get_settings()
