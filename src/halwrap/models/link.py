"""
Hypermedia link values.

Links are immutable: every transformation (slash, relation, expansion,
base URL, attributes) returns a new Link.
"""

import re
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

from halwrap.core.config import resolve_settings
from halwrap.core.constants import (
    LINK_DEPRECATED,
    LINK_HREF,
    LINK_HREFLANG,
    LINK_TEMPLATED,
    LINK_TITLE,
    LINK_TYPE,
    PORT_DEFAULTS,
    REL_SELF,
)

_TEMPLATE_EXPRESSION = re.compile(r"\{[^{}]*\}")


def contains_template_expression(href: str) -> bool:
    """Check whether an href still holds unexpanded '{...}' expressions."""
    return _TEMPLATE_EXPRESSION.search(href) is not None


class Origin(BaseModel):
    """Scheme, host and port that relative hrefs are resolved against."""

    model_config = ConfigDict(frozen=True)

    scheme: str = Field(default="http")
    host: str
    port: Optional[int] = Field(default=None, ge=1, le=65535)

    @classmethod
    def from_url(cls, url: str) -> "Origin":
        """Extract the origin of an absolute URL such as 'https://api.example.com:8443/'."""
        parts = urlsplit(url)
        if not parts.scheme or not parts.hostname:
            raise ValueError(f"Not an absolute URL: {url}")
        return cls(scheme=parts.scheme, host=parts.hostname, port=parts.port)

    def __str__(self) -> str:
        if self.port is None or PORT_DEFAULTS.get(self.scheme) == self.port:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"


class OperationReference(BaseModel):
    """A resolved reference to an endpoint: its path template and parameter values."""

    model_config = ConfigDict(frozen=True)

    path_template: str
    path_params: Dict[str, Any] = Field(default_factory=dict)
    query_params: Dict[str, Any] = Field(default_factory=dict)


class Link(BaseModel):
    """Represents a hypermedia link."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    href: str = Field(description="URL or URI template of the linked resource")
    rel: Optional[str] = Field(None, description="Relation type (self, next, orders, ...)")
    title: Optional[str] = Field(None, description="Human-readable title")
    type: Optional[str] = Field(None, description="Media type of the linked resource")
    hreflang: Optional[str] = Field(None, description="Language of the linked resource")
    deprecated: bool = Field(False, description="Whether the link is scheduled for removal")

    @classmethod
    def of(cls, href: Any) -> "Link":
        """Create a link without a relation."""
        return cls(href=str(href))

    @classmethod
    def as_self_of(cls, href: Any) -> "Link":
        """Create a 'self' link."""
        return cls(href=str(href), rel=REL_SELF)

    @classmethod
    def from_operation(cls, operation: OperationReference, composite: Optional[bool] = None) -> "Link":
        """
        Build a link from a resolved endpoint reference.

        Path parameters fill the path template; query parameters are appended
        as optional query variables (list values exploded) and dropped when None.
        """
        template = operation.path_template
        if operation.query_params:
            names = [
                f"{name}*" if isinstance(value, (list, tuple)) else name
                for name, value in operation.query_params.items()
            ]
            template = f"{template}{{?{','.join(names)}}}"

        bindings = dict(operation.query_params)
        bindings.update(operation.path_params)
        return cls.of(template).expand(bindings, composite=composite)

    @property
    def templated(self) -> bool:
        return contains_template_expression(self.href)

    @property
    def variable_names(self) -> Tuple[str, ...]:
        """Template variables of the href, in template order."""
        if not self.templated:
            return ()

        from halwrap.services.uri_template_engine import parse_template

        return parse_template(self.href).variable_names

    def slash(self, segment: Any) -> "Link":
        """Append a path segment, joined by exactly one '/'."""
        return self._replace(href=f"{self.href.rstrip('/')}/{str(segment).lstrip('/')}")

    def with_relation(self, rel: str) -> "Link":
        return self._replace(rel=rel)

    def with_title(self, title: Optional[str]) -> "Link":
        return self._replace(title=title)

    def with_type(self, media_type: Optional[str]) -> "Link":
        return self._replace(type=media_type)

    def with_hreflang(self, hreflang: Optional[str]) -> "Link":
        return self._replace(hreflang=hreflang)

    def with_deprecated(self, deprecated: bool = True) -> "Link":
        return self._replace(deprecated=deprecated)

    def expand(self, *args: Any, composite: Optional[bool] = None, **kwargs: Any) -> "Link":
        """
        Expand the href template.

        Accepts either a single mapping of bindings, positional values bound
        to the template variables in order of appearance, keyword bindings,
        or a mix of a mapping and keywords.

        Args:
            *args: A bindings mapping, or positional variable values
            composite: Render exploded query variables as name=a,b
                (defaults to the configured setting)
            **kwargs: Named variable values

        Returns:
            A new link with the expanded href

        Raises:
            MissingMandatoryVariable: If a path variable stays unbound
        """
        from halwrap.services.uri_template_engine import expand_template, parse_template

        template = parse_template(self.href)
        if len(args) == 1 and isinstance(args[0], Mapping):
            bindings = dict(args[0])
        else:
            bindings = dict(zip(template.variable_names, args))
        bindings.update(kwargs)

        if composite is None:
            composite = resolve_settings().composite_explode

        return self._replace(href=expand_template(template, bindings, composite=composite))

    def prepend_base_url(self, origin: Union[str, Origin]) -> "Link":
        """Make a relative href absolute; absolute hrefs are returned unchanged."""
        parts = urlsplit(self.href)
        if parts.scheme or parts.netloc:
            return self

        base = str(origin).rstrip("/")
        if self.href.startswith("/"):
            return self._replace(href=f"{base}{self.href}")
        return self._replace(href=f"{base}/{self.href}")

    def to_hal(self) -> Dict[str, Any]:
        """Render the link attributes (the relation is the key, not an attribute)."""
        attributes: Dict[str, Any] = {LINK_HREF: self.href}
        if self.title is not None:
            attributes[LINK_TITLE] = self.title
        if self.type is not None:
            attributes[LINK_TYPE] = self.type
        if self.hreflang is not None:
            attributes[LINK_HREFLANG] = self.hreflang
        if self.templated:
            attributes[LINK_TEMPLATED] = True
        if self.deprecated:
            attributes[LINK_DEPRECATED] = True
        return attributes

    def _replace(self, **changes: Any) -> "Link":
        return self.model_copy(update=changes)

    def __str__(self) -> str:
        return self.href
