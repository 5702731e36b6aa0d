"""
Library-wide configuration.

Holds the knobs shared by the relation-name resolver, the URI template
engine and the HAL renderer. Services take an explicit settings argument and
fall back to the process-wide instance returned by ``get_settings``.
"""

import logging
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from halwrap.core.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_PLURAL_SUFFIX,
    DEFAULT_STRIP_SUFFIXES,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    LOGGER_NAME,
    MAX_PAGE_SIZE,
)


class HalSettings(BaseModel):
    """Configuration for relation naming, template expansion and rendering."""

    model_config = ConfigDict(frozen=True)

    strip_suffixes: Tuple[str, ...] = Field(
        default=DEFAULT_STRIP_SUFFIXES,
        description="Type-name suffixes stripped before deriving a relation name",
    )
    plural_suffix: str = Field(
        default=DEFAULT_PLURAL_SUFFIX,
        description="Suffix appended to the singular name for the default plural",
    )
    composite_explode: bool = Field(
        default=False,
        description="Render exploded query variables as name=a,b instead of name=a&name=b",
    )
    exclude_none_fields: bool = Field(
        default=False,
        description="Drop None-valued resource fields when flattening a resource",
    )
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1)


_settings = HalSettings()


def get_settings() -> HalSettings:
    """Get the process-wide settings instance."""
    return _settings


def configure(**overrides) -> HalSettings:
    """
    Replace the process-wide settings.

    Args:
        **overrides: Field values that differ from the current settings

    Returns:
        The new settings instance
    """
    global _settings
    _settings = _settings.model_copy(update=overrides)
    return _settings


def reset_settings() -> HalSettings:
    """Restore the default settings."""
    global _settings
    _settings = HalSettings()
    return _settings


def resolve_settings(settings: Optional[HalSettings] = None) -> HalSettings:
    """Return the explicit settings if given, else the process-wide ones."""
    return settings if settings is not None else _settings


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Attach a stream handler with the library log format to the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
