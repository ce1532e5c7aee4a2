"""
Configuration management for the account service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Account service configuration loaded from environment variables"""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"
    DB_ECHO: bool = False

    # Password hashing (passlib scheme names, first one is used for new hashes)
    PASSWORD_SCHEMES: List[str] = ["pbkdf2_sha256"]

    # Return raw database error text to clients (legacy behaviour)
    EXPOSE_ERROR_DETAILS: bool = False

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


# Global settings instance
settings = Settings()
