"""
FastAPI integration: HAL responses, links to routes, paging dependencies
and error handlers.
"""

from .dependencies import get_page_request, get_request_link
from .error_handlers import register_exception_handlers
from .link_builder import link_to, resolve_operation
from .responses import HalJSONResponse

__all__ = [
    "HalJSONResponse",
    "get_page_request",
    "get_request_link",
    "link_to",
    "resolve_operation",
    "register_exception_handlers",
]
