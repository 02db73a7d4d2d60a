"""
ClientLedger application settings.
All environment variables are read in one place.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Main application settings.
    Values are loaded from environment variables or the .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )
    
    # Application
    APP_NAME: str = "ClientLedger"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    # Server
    HOST: str = "0.0.0.0"
    
    # Persistence (single key-value slot)
    DATABASE_URL: str = "sqlite:///./clientledger.db"
    STORAGE_KEY: str = "app-storage"
    
    # Business rules
    DEBT_DUE_DAYS: int = 30
    RECENT_ITEMS_LIMIT: int = 5
    RECENT_SERVICES_DAYS: int = 30
    
    # Backup
    BACKUP_VERSION: str = "1.0"
    
    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]
    
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"
    
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Return a single settings instance.
    The LRU cache avoids re-reading the environment on every call.
    """
    return Settings()


# Global settings instance
settings = get_settings()
