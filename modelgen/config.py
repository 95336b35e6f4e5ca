"""Configuration management for modelgen."""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.modelgen/.env
    3. Package directory (where this file is located)
    """
    if os.path.exists(".env"):
        return ".env"

    user_env = Path.home() / ".modelgen" / ".env"
    if user_env.exists():
        return str(user_env)

    package_env = Path(__file__).parent.parent / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database connection
    db_dialect: str = Field(
        default="postgres",
        description="Database engine: postgres, mysql, mariadb or sqlite"
    )
    db_host: str = Field(
        default="localhost",
        description="Database host"
    )
    db_port: Optional[int] = Field(
        default=None,
        description="Database port (engine default when unset)"
    )
    db_user: Optional[str] = Field(
        default=None,
        description="Database user"
    )
    db_password: Optional[str] = Field(
        default=None,
        description="Database password"
    )
    db_name: Optional[str] = Field(
        default=None,
        description="Database name"
    )
    db_storage: Optional[str] = Field(
        default=None,
        description="SQLite database file"
    )

    # Generation
    output_directory: str = Field(
        default="./models",
        description="Directory to write model files to"
    )
    max_workers: int = Field(
        default=10,
        description="Maximum number of tables introspected concurrently"
    )
    camel_case: bool = Field(
        default=False,
        description="Render table and column names in camelCase"
    )
    indentation: int = Field(
        default=1,
        description="Indentation width of generated files"
    )
    use_spaces: bool = Field(
        default=False,
        description="Indent generated files with spaces instead of tabs"
    )
    created_at_field: str = Field(
        default="createdAt",
        description="Created timestamp column name (empty to disable)"
    )
    updated_at_field: str = Field(
        default="updatedAt",
        description="Updated timestamp column name (empty to disable)"
    )
    deleted_at_field: str = Field(
        default="deletedAt",
        description="Deleted timestamp column name (empty to disable)"
    )

    # Run logging
    run_logging_enabled: bool = Field(
        default=True,
        description="Record generation runs in a local SQLite database"
    )
    run_logging_db_path: Optional[str] = Field(
        default=None,
        description="Path to runs database file (default: ~/.modelgen/runs.db)"
    )
    run_logging_retention_days: int = Field(
        default=30,
        description="Number of days to retain run log entries"
    )

    class Config:
        env_file = _find_env_file()
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
