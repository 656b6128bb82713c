"""Application settings, read from the environment (prefix KRED_) or a .env file."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="KRED_", env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(default="sqlite:///./kred.db", description="SQLAlchemy database URL")
    sql_echo: bool = Field(default=False, description="Log every SQL statement")


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
