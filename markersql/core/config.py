"""
Settings for markersql, read from ``MARKERSQL_*`` environment variables and
an optional ``.env`` file.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProductTypeEnum(str, Enum):
    """Supported database product types (postgres, mysql)."""

    POSTGRES = "postgres"
    MYSQL = "mysql"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MARKERSQL_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Escaper used by QueryBuilder when none is passed: "mysql" or "standard"
    DEFAULT_ESCAPER: str = "mysql"
    # Compiled template LRU size; 0 disables caching
    TEMPLATE_CACHE_SIZE: int = Field(default=512, ge=0)


settings = Settings()
