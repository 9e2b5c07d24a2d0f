"""Configuration management for pgmodel-cli."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.pgmodel-cli/.env
    3. Package directory (where this file is located)
    """
    if os.path.exists(".env"):
        return ".env"

    user_env = Path.home() / ".pgmodel-cli" / ".env"
    if user_env.exists():
        return str(user_env)

    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # PostgreSQL connection
    pg_host: str = Field(
        default="localhost",
        description="PostgreSQL server host"
    )
    pg_port: int = Field(
        default=5432,
        description="PostgreSQL server port"
    )
    pg_user: str = Field(
        default="postgres",
        description="PostgreSQL user name"
    )
    pg_password: Optional[str] = Field(
        default=None,
        description="PostgreSQL password"
    )
    pg_database: Optional[str] = Field(
        default=None,
        description="Database to extract the entity model from"
    )
    pg_ssl: bool = Field(
        default=False,
        description="Require SSL for the PostgreSQL connection"
    )

    # Extraction
    schema_names: List[str] = Field(
        default_factory=lambda: ["public"],
        description="Schemas whose base tables are extracted"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level for extraction diagnostics"
    )

    class Config:
        env_file = _find_env_file()
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
