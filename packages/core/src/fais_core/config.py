"""Configuration system for the FAIS affidavit engine.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for template loading, PDF output
and logging.

Usage:
    from fais_core.config import FaisConfig, configure_logging

    # Load from environment variables and .env file
    config = FaisConfig()
    configure_logging(config)

    print(config.templates.directory)
"""

import logging
from pathlib import Path

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TemplateConfig(BaseSettings):
    """Official form template settings.

    The two templates are revision-specific binary assets supplied by the
    court. They are consumed, never generated.

    Environment Variables:
        FAIS_TEMPLATE_DIRECTORY: Directory holding the official form PDFs
        FAIS_TEMPLATE_SHORT_FILENAME: File name of the short form
        FAIS_TEMPLATE_LONG_FILENAME: File name of the long form
        FAIS_TEMPLATE_INSTRUCTION_PAGES: Leading instruction pages to strip
    """

    model_config = SettingsConfigDict(
        env_prefix="FAIS_TEMPLATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    directory: Path = Field(
        default=Path("./private/forms"),
        description="Directory containing the official affidavit form PDFs",
    )
    short_filename: str = Field(
        default="fl-financial-affidavit-short.pdf",
        description="File name of the short-form affidavit template",
    )
    long_filename: str = Field(
        default="fl-financial-affidavit-long.pdf",
        description="File name of the long-form affidavit template",
    )
    instruction_pages: int = Field(
        default=3,
        ge=0,
        le=20,
        description="Number of leading instruction pages removed from the output",
    )

    @field_validator("short_filename", "long_filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Ensure template file names are not empty."""
        if not v or not v.strip():
            raise ValueError("Template filename cannot be empty")
        return v.strip()

    def path_for(self, form: str) -> Path:
        """Return the template path for a ``short`` or ``long`` form key."""
        filename = self.short_filename if form == "short" else self.long_filename
        return self.directory / filename


class PdfConfig(BaseSettings):
    """Filled PDF output settings.

    Environment Variables:
        FAIS_PDF_FLATTEN: Bake field values into page content after filling
    """

    model_config = SettingsConfigDict(
        env_prefix="FAIS_PDF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    flatten: bool = Field(
        default=True,
        description="Flatten the filled form so fields are no longer editable",
    )


class FaisConfig(BaseSettings):
    """Root configuration for the FAIS affidavit engine.

    Environment Variables:
        FAIS_ENV: Environment name (development, staging, production, test)
        FAIS_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = FaisConfig(
            templates=TemplateConfig(directory=Path("/srv/forms")),
            pdf=PdfConfig(flatten=False),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="FAIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    templates: TemplateConfig = Field(default_factory=TemplateConfig)
    pdf: PdfConfig = Field(default_factory=PdfConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.env == "development"


def configure_logging(config: FaisConfig) -> None:
    """Configure structlog for the given settings.

    Production renders JSON lines; every other environment uses the
    console renderer.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if config.is_production
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
        cache_logger_on_first_use=False,
    )
