"""Configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .exporter.settings import PROPERTY_NAMES, ExporterSettings

ENV_PROPERTY_PREFIX = "SQLEXPORT_"


@dataclass
class DatabaseConfig:
    """Database connection configuration."""

    host: str
    port: int
    database: str
    user: str
    schema: str = "public"


@dataclass
class AppConfig:
    """Application configuration."""

    db: DatabaseConfig
    exporter: ExporterSettings = field(default_factory=ExporterSettings)
    dialect: str = "generic"
    connection_ttl_minutes: int = 30
    log_level: str = "INFO"
    lob_threshold: int = 4000
    output_dir: Path = field(
        default_factory=lambda: Path.home() / ".sqlexport" / "exports"
    )


def load_exporter_settings() -> ExporterSettings:
    """
    Read exporter properties from SQLEXPORT_<PROPERTY> environment variables.

    For example SQLEXPORT_ROWS_IN_STATEMENT=50 or
    SQLEXPORT_INSERT_VARIANT="ON CONFLICT".
    """
    properties = {}
    for name in PROPERTY_NAMES:
        value = os.getenv(ENV_PROPERTY_PREFIX + name.upper())
        if value is not None:
            properties[name] = value
    return ExporterSettings.from_properties(properties)


def load_config() -> AppConfig:
    """
    Load configuration from environment variables and .env file.

    Returns:
        AppConfig instance with loaded configuration
    """
    load_dotenv()

    db_config = DatabaseConfig(
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "5432")),
        database=os.getenv("DB_NAME", ""),
        user=os.getenv("DB_USER", ""),
        schema=os.getenv("DB_SCHEMA", "public"),
    )

    output_dir = Path(
        os.getenv(
            "SQLEXPORT_OUTPUT_DIR", str(Path.home() / ".sqlexport" / "exports")
        )
    )

    return AppConfig(
        db=db_config,
        exporter=load_exporter_settings(),
        dialect=os.getenv("SQL_DIALECT", "generic"),
        connection_ttl_minutes=int(os.getenv("CONNECTION_TTL_MINUTES", "30")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        lob_threshold=int(os.getenv("SQLEXPORT_LOB_THRESHOLD", "4000")),
        output_dir=output_dir,
    )
