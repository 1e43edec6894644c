from __future__ import annotations

import os
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigurationError
from .geometry.contract import CONNECTION_TOLERANCE, LOOP_MATCH_TOLERANCE

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

DEFAULT_CONFIG_PATH = Path("config/default.yaml")
CONFIG_ENV_VAR = "BLUEPRINT_CONFIG"


class TopologySettings(BaseModel):
    loop_tolerance: float = Field(LOOP_MATCH_TOLERANCE, gt=0.0, le=1.0, description="Exterior loop endpoint tolerance (m)")
    connection_tolerance: float = Field(CONNECTION_TOLERANCE, gt=0.0, le=1.0, description="Interior connectivity tolerance (m)")


class OpeningSettings(BaseModel):
    strict: bool = False


class ComplianceSettings(BaseModel):
    language: str = Field("en", description="Message language for CLI output (en or da)")
    include_checks: bool = True

    @field_validator("language")
    @classmethod
    def _supported_language(cls, value: str) -> str:
        value = value.lower()
        if value not in ("en", "da"):
            raise ValueError(f"Unsupported language '{value}'")
        return value


class ExportSettings(BaseModel):
    encoding: str = "utf-8"
    issue_date: date | None = None

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            "".encode(value)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding '{value}'") from exc
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    log_file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        return str(value or "INFO").upper()


class Settings(BaseModel):
    topology: TopologySettings = Field(default_factory=TopologySettings)
    openings: OpeningSettings = Field(default_factory=OpeningSettings)
    compliance: ComplianceSettings = Field(default_factory=ComplianceSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from a YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses the
                BLUEPRINT_CONFIG environment variable or config/default.yaml.

        Returns:
            Settings instance. Built-in defaults are used when no path was
            requested and config/default.yaml is absent.

        Raises:
            ConfigurationError: If an explicitly requested file does not exist
                or the configuration is invalid.
        """
        env_path = os.getenv(CONFIG_ENV_VAR)
        explicit = path is not None or bool(env_path)
        config_path = path or Path(env_path or DEFAULT_CONFIG_PATH)
        if not config_path.exists():
            if explicit:
                raise ConfigurationError(
                    f"Configuration file not found: {config_path}",
                    {"path": str(config_path)},
                )
            return cls()
        with config_path.open("r", encoding="utf-8") as fp:
            try:
                payload = yaml.safe_load(fp) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}", {"path": str(config_path)}) from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}", {"path": str(config_path)})
        try:
            return cls(**payload)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", {"path": str(config_path)}) from exc


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "TopologySettings",
    "OpeningSettings",
    "ComplianceSettings",
    "ExportSettings",
    "LoggingSettings",
    "get_settings",
]
