"""
HAL resource wrappers.

Wraps domain objects with links, embedded resources and page metadata and
renders them as application/hal+json documents.
"""

from .api import HalJSONResponse, link_to, register_exception_handlers
from .core import (
    DuplicateRelation,
    HalException,
    HalSettings,
    HeterogeneousEmbeddedShape,
    InvalidPageParameters,
    MissingMandatoryVariable,
    TemplateSyntaxError,
    UnresolvableRelationName,
    configure,
    configure_logging,
    get_settings,
)
from .models import (
    EmbeddedShape,
    HalEmbeddedWrapper,
    HalListWrapper,
    HalPageInfo,
    HalResourceWrapper,
    Link,
    OperationReference,
    Origin,
    PageRequest,
    RelationName,
    SortCriteria,
    SortDirection,
    SortOrder,
    UriTemplate,
)
from .services import (
    AsyncEmbeddingHalAssembler,
    AsyncHalAssembler,
    EmbeddingHalAssembler,
    HalRenderer,
    RelationNameRegistry,
    SimpleHalAssembler,
    assemble_page_info,
    assemble_page_info_with_page_number,
    derive_navigation_links,
    expand_template,
    parse_template,
    relation_name,
    resolve_relation_name,
)

__version__ = "1.0.0"

__all__ = [
    "HalJSONResponse",
    "link_to",
    "register_exception_handlers",
    "HalException",
    "TemplateSyntaxError",
    "MissingMandatoryVariable",
    "DuplicateRelation",
    "HeterogeneousEmbeddedShape",
    "UnresolvableRelationName",
    "InvalidPageParameters",
    "HalSettings",
    "configure",
    "configure_logging",
    "get_settings",
    "EmbeddedShape",
    "HalEmbeddedWrapper",
    "HalListWrapper",
    "HalPageInfo",
    "HalResourceWrapper",
    "Link",
    "OperationReference",
    "Origin",
    "PageRequest",
    "RelationName",
    "SortCriteria",
    "SortDirection",
    "SortOrder",
    "UriTemplate",
    "AsyncEmbeddingHalAssembler",
    "AsyncHalAssembler",
    "EmbeddingHalAssembler",
    "HalRenderer",
    "RelationNameRegistry",
    "SimpleHalAssembler",
    "assemble_page_info",
    "assemble_page_info_with_page_number",
    "derive_navigation_links",
    "expand_template",
    "parse_template",
    "relation_name",
    "resolve_relation_name",
]
