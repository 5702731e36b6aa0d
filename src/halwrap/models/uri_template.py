"""
Parsed URI template structures.

A template is decomposed once into literal text and variable expressions;
expansion only reads this structure.
"""

from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class VariableKind(str, Enum):
    """Where a variable is rendered."""

    PATH = "path"
    QUERY = "query"


class TemplateVariable(BaseModel):
    """A single variable inside a template expression."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Variable name as written in the template")
    kind: VariableKind = Field(description="Mandatory path variable or optional query variable")
    exploded: bool = Field(default=False, description="List-valued variable marked with '*'")


class LiteralSegment(BaseModel):
    """Template text copied verbatim."""

    model_config = ConfigDict(frozen=True)

    text: str


class ExpressionSegment(BaseModel):
    """A '{...}' expression with its operator and variables."""

    model_config = ConfigDict(frozen=True)

    operator: str = Field(default="", description="'' for path, '?' or '&' for query")
    variables: Tuple[TemplateVariable, ...]


Segment = Union[LiteralSegment, ExpressionSegment]


class UriTemplate(BaseModel):
    """An immutable, parsed URI template."""

    model_config = ConfigDict(frozen=True)

    template: str = Field(description="The original template text")
    segments: Tuple[Segment, ...] = ()

    @classmethod
    def parse(cls, template: str) -> "UriTemplate":
        """Parse a template string (cached)."""
        from halwrap.services.uri_template_engine import parse_template

        return parse_template(template)

    @property
    def variables(self) -> Tuple[TemplateVariable, ...]:
        """All variables in template order."""
        return tuple(
            variable
            for segment in self.segments
            if isinstance(segment, ExpressionSegment)
            for variable in segment.variables
        )

    @property
    def variable_names(self) -> Tuple[str, ...]:
        """Distinct variable names in template order."""
        names = []
        for variable in self.variables:
            if variable.name not in names:
                names.append(variable.name)
        return tuple(names)

    @property
    def is_templated(self) -> bool:
        return any(isinstance(segment, ExpressionSegment) for segment in self.segments)

    def expand(
        self,
        bindings: Optional[Mapping[str, Any]] = None,
        composite: bool = False,
    ) -> str:
        """Expand the template against the given bindings."""
        from halwrap.services.uri_template_engine import expand_template

        return expand_template(self, bindings, composite=composite)

    def __str__(self) -> str:
        return self.template
