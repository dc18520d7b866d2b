"""Configuration management for the Excel helper.

This module provides centralized configuration using pydantic-settings.
All options can be set via environment variables with the EXCEL_HELPER_
prefix, or via a .env file in the working directory.

Environment Variables:
    EXCEL_HELPER_MAX_FILE_SIZE_MB: Maximum input file size in MB (default: 50)
    EXCEL_HELPER_OUTPUT_SUFFIX: Suffix appended to the output base name (default: _converted)
    EXCEL_HELPER_EXPORT_ENGINE: Writer engine, xlsxwriter or openpyxl (default: xlsxwriter)
    EXCEL_HELPER_TEXT_ONLY_EXPORT: Write every exported cell as text (default: true)
    EXCEL_HELPER_CSV_FALLBACK_ENCODING: Encoding used when CSV is not UTF-8 and detection fails (default: cp1252)
    EXCEL_HELPER_LOG_LEVEL: Logging level (default: INFO)
    EXCEL_HELPER_CORS_ORIGINS: Comma-separated CORS origins (default: *)
    EXCEL_HELPER_SERVER_HOST: Server bind host (default: 0.0.0.0)
    EXCEL_HELPER_SERVER_PORT: Server bind port (default: 8000)
"""

import codecs
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        EXCEL_HELPER_EXPORT_ENGINE=openpyxl
        EXCEL_HELPER_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="EXCEL_HELPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Input Settings
    # =========================================================================

    max_file_size_mb: int = 50
    """Maximum accepted input size in megabytes."""

    csv_fallback_encoding: str = "cp1252"
    """Single-byte encoding used when delimited text is not valid UTF-8."""

    # =========================================================================
    # Export Settings
    # =========================================================================

    output_suffix: str = "_converted"
    """Suffix appended to the input base name to build the output file name."""

    export_engine: Literal["xlsxwriter", "openpyxl"] = "xlsxwriter"
    """Library used to serialize the converted workbook."""

    text_only_export: bool = True
    """Store every exported cell as text, not only the converted ones."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins, or * for all."""

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(sorted(valid_levels))}"
            )
        return upper_v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("csv_fallback_encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate the fallback encoding is known to Python."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum accepted input size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def cors_origin_list(self) -> list[str]:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
