from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    APP_NAME: str = "Product Catalog API"
    APP_VERSION: str = "1.0.0"

    # DB
    DATABASE_URL: str = "sqlite:///./database.db"
    DB_POOL_SIZE: int = 5
    DB_ECHO: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
