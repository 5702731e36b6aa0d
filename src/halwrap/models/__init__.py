"""
HAL Wrappers - Pydantic Models

This module contains the value types used to build HAL documents.
"""

from .link import Link, OperationReference, Origin
from .pagination import HalPageInfo, PageRequest, SortCriteria, SortDirection, SortOrder
from .relation import RelationName
from .uri_template import ExpressionSegment, LiteralSegment, TemplateVariable, UriTemplate, VariableKind
from .wrappers import EmbeddedShape, HalEmbeddedWrapper, HalListWrapper, HalResourceWrapper

__all__ = [
    "Link",
    "OperationReference",
    "Origin",
    "HalPageInfo",
    "PageRequest",
    "SortCriteria",
    "SortDirection",
    "SortOrder",
    "RelationName",
    "ExpressionSegment",
    "LiteralSegment",
    "TemplateVariable",
    "UriTemplate",
    "VariableKind",
    "EmbeddedShape",
    "HalEmbeddedWrapper",
    "HalListWrapper",
    "HalResourceWrapper",
]
