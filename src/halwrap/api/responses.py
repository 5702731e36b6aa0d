"""
HAL response class for FastAPI endpoints.

Endpoints return ``HalJSONResponse(wrapper)`` directly; FastAPI's default
encoding would dump the wrapper model itself instead of the HAL document.
"""

from typing import Any, Optional

from fastapi.responses import JSONResponse

from halwrap.core.constants import HAL_MEDIA_TYPE
from halwrap.services.hal_renderer import HalRenderer


class HalJSONResponse(JSONResponse):
    """JSON response rendering HAL wrappers with media type application/hal+json."""

    media_type = HAL_MEDIA_TYPE

    def __init__(self, content: Any, renderer: Optional[HalRenderer] = None, **kwargs: Any):
        self.renderer = renderer or HalRenderer()
        super().__init__(content, **kwargs)

    def render(self, content: Any) -> bytes:
        if hasattr(content, "to_hal"):
            content = content.to_hal(self.renderer)
        return super().render(content)
