"""
Configuration - Sanitizer and Logging Settings
Centralized configuration management for atomfeed.

This module provides:
- Environment-based configuration
- Type-safe settings with validation
- Sanitizer allow-lists
- Logging configuration
"""
from typing import Dict, List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from enum import Enum


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Console log output formats."""
    JSON = "json"
    COLORED = "colored"
    STANDARD = "standard"


DEFAULT_ALLOWED_TAGS = [
    'p', 'br', 'hr', 'div', 'span', 'strong', 'em', 'u', 'i', 'b', 's', 'small', 'sub', 'sup',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'ul', 'ol', 'li', 'dl', 'dt', 'dd',
    'blockquote', 'q', 'cite', 'code', 'pre', 'abbr', 'a', 'img', 'figure', 'figcaption',
    'table', 'thead', 'tbody', 'tfoot', 'tr', 'th', 'td', 'caption'
]

DEFAULT_ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title', 'rel'],
    'img': ['src', 'alt', 'title', 'width', 'height'],
    'abbr': ['title'],
    'td': ['colspan', 'rowspan'],
    'th': ['colspan', 'rowspan'],
    '*': ['class', 'lang', 'dir']
}


class SanitizerSettings(BaseSettings):
    """HTML sanitizer configuration settings."""

    allowed_tags: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TAGS))
    allowed_attributes: Dict[str, List[str]] = Field(
        default_factory=lambda: {tag: list(attrs) for tag, attrs in DEFAULT_ALLOWED_ATTRIBUTES.items()}
    )
    allowed_protocols: List[str] = Field(default_factory=lambda: ["http", "https", "mailto"])

    # Disallowed tags are removed (True) or escaped (False)
    strip: bool = True
    strip_comments: bool = True

    @field_validator("allowed_tags")
    @classmethod
    def validate_allowed_tags(cls, v):
        if any(not tag.strip() for tag in v):
            raise ValueError("Allowed tags must not contain empty names")
        return [tag.strip().lower() for tag in v]

    @field_validator("allowed_protocols")
    @classmethod
    def normalize_protocols(cls, v):
        return [protocol.strip().lower() for protocol in v if protocol.strip()]

    model_config = SettingsConfigDict(
        env_prefix="ATOMFEED_SANITIZER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.COLORED

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    model_config = SettingsConfigDict(
        env_prefix="ATOMFEED_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Main application settings."""

    app_name: str = "atomfeed"
    app_version: str = "1.0.0"

    # Component settings
    sanitizer: SanitizerSettings = Field(default_factory=SanitizerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="ATOMFEED_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def get_sanitizer_settings() -> SanitizerSettings:
    """Get sanitizer settings."""
    return settings.sanitizer


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return settings.logging
