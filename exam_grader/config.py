"""
Configuration management for the Exam Grader system.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportFormat(str, Enum):
    """Output format for result reports."""

    JSON = "json"
    MARKDOWN = "markdown"
    CSV = "csv"
    TEXT = "text"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Variables use the EXAM_GRADER_ prefix, e.g. EXAM_GRADER_LOG_LEVEL=DEBUG.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXAM_GRADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Grading Configuration
    # ==========================================================================
    validate_before_grading: bool = Field(
        default=True,
        description="Run the exam validator before grading and refuse exams with issues",
    )

    # ==========================================================================
    # Output Configuration
    # ==========================================================================
    output_directory: Path = Field(
        default=Path("./output"),
        description="Directory for output reports and audit records",
    )

    report_format: ReportFormat = Field(
        default=ReportFormat.JSON,
        description="Default report format",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================
    log_level: str = Field(
        default="WARNING",
        description="Log level name for the exam_grader loggers",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the log level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("output_directory")
    @classmethod
    def validate_output_directory(cls, v: Path) -> Path:
        """Ensure output directory exists or can be created."""
        v.mkdir(parents=True, exist_ok=True)
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
