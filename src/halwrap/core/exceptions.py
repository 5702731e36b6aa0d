"""
Exceptions raised while building hypermedia documents.

All of them signal misuse of the API (a malformed template, a link collection
with clashing relations, ...) and are raised synchronously at construction or
expansion time.
"""

from typing import Any, Optional, Sequence


class HalException(Exception):
    """Base exception for hypermedia construction errors."""
    pass


class TemplateSyntaxError(HalException):
    """Raised when a URI template cannot be parsed."""

    def __init__(self, template: str, position: int, reason: str):
        self.template = template
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid URI template '{template}' at position {position}: {reason}")


class MissingMandatoryVariable(HalException):
    """Raised when a mandatory path variable has no binding."""

    def __init__(self, variable_name: str, template: str):
        self.variable_name = variable_name
        self.template = template
        super().__init__(
            f"Mandatory variable '{variable_name}' is not bound while expanding '{template}'"
        )


class DuplicateRelation(HalException):
    """Raised when two links attached to one wrapper share a relation."""

    def __init__(self, relation: str):
        self.relation = relation
        super().__init__(f"Link relation '{relation}' is already present")


class HeterogeneousEmbeddedShape(HalException):
    """Raised when the items of a list wrapper have different embedded slots."""

    def __init__(self, shapes: Sequence[Any]):
        self.shapes = tuple(shapes)
        names = ", ".join(sorted({str(shape) for shape in self.shapes}))
        super().__init__(f"List items must share one embedded shape, found: {names}")


class UnresolvableRelationName(HalException):
    """Raised when no type and no instance is available to name a resource."""

    def __init__(self, context: Optional[str] = None):
        self.context = context
        message = "Cannot resolve a relation name without a type hint or an instance"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class InvalidPageParameters(HalException, ValueError):
    """Raised when page size, offset or total count are out of range."""

    def __init__(self, message: str):
        super().__init__(message)
