"""
Core utilities for the HAL wrappers.

Contains shared constants, configuration and exceptions.
"""

from .config import HalSettings, configure, configure_logging, get_settings, reset_settings
from .exceptions import (
    DuplicateRelation,
    HalException,
    HeterogeneousEmbeddedShape,
    InvalidPageParameters,
    MissingMandatoryVariable,
    TemplateSyntaxError,
    UnresolvableRelationName,
)

__all__ = [
    "HalSettings",
    "configure",
    "configure_logging",
    "get_settings",
    "reset_settings",
    "HalException",
    "TemplateSyntaxError",
    "MissingMandatoryVariable",
    "DuplicateRelation",
    "HeterogeneousEmbeddedShape",
    "UnresolvableRelationName",
    "InvalidPageParameters",
]
