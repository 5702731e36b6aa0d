"""
Services for template expansion, relation naming, pagination, rendering
and assembly of HAL wrappers.
"""

from .assemblers import EmbeddingHalAssembler, HalAssemblerBase, SimpleHalAssembler
from .async_assemblers import AsyncEmbeddingHalAssembler, AsyncHalAssembler
from .hal_renderer import HalRenderer
from .pagination_service import (
    assemble_page_info,
    assemble_page_info_with_page_number,
    derive_navigation_links,
)
from .relation_resolver import (
    RelationNameRegistry,
    default_registry,
    derive_relation_name,
    relation_name,
    resolve_relation_name,
)
from .uri_template_engine import expand_template, expand_template_partially, parse_template

__all__ = [
    "HalAssemblerBase",
    "SimpleHalAssembler",
    "EmbeddingHalAssembler",
    "AsyncHalAssembler",
    "AsyncEmbeddingHalAssembler",
    "HalRenderer",
    "assemble_page_info",
    "assemble_page_info_with_page_number",
    "derive_navigation_links",
    "RelationNameRegistry",
    "default_registry",
    "derive_relation_name",
    "relation_name",
    "resolve_relation_name",
    "expand_template",
    "expand_template_partially",
    "parse_template",
]
