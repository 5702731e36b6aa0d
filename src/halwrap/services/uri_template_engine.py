"""
URI template engine.

Supports the subset of RFC 6570 used for hypermedia links:

* ``{name}`` and ``{a,b}`` - mandatory path variables
* ``{?a,b}`` and ``{&a,b}`` - optional query variables, omitted when unbound
* ``{?name*}`` - exploded list-valued query variable, rendered as
  ``name=a&name=b`` or, in composite mode, ``name=a,b``

The '?' versus '&' choice follows a single query-string state kept across the
whole expansion, so a literal '?' in the template is continued with '&'.
"""

import logging
import re
from enum import Enum
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from halwrap.core.constants import TEMPLATE_CACHE_SIZE
from halwrap.core.exceptions import MissingMandatoryVariable, TemplateSyntaxError
from halwrap.models.uri_template import (
    ExpressionSegment,
    LiteralSegment,
    TemplateVariable,
    UriTemplate,
    VariableKind,
)

logger = logging.getLogger(__name__)

QUERY_OPERATORS = ("?", "&")
# Operators defined by RFC 6570 that this engine does not expand
UNSUPPORTED_OPERATORS = "+#./;=,!@|"

_VARIABLE_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.\-]*$")

PATH_SAFE_CHARACTERS = ""
QUERY_SAFE_CHARACTERS = ","


@lru_cache(maxsize=TEMPLATE_CACHE_SIZE)
def parse_template(template: str) -> UriTemplate:
    """
    Parse a template string into literal and expression segments.

    Args:
        template: Template text such as '/orders/{id}{?expand*}'

    Returns:
        The parsed, immutable template

    Raises:
        TemplateSyntaxError: On unbalanced braces or unsupported syntax
    """
    logger.debug(f"Parsing URI template '{template}'")

    segments = []
    literal_start = 0
    position = 0

    while position < len(template):
        character = template[position]

        if character == "}":
            raise TemplateSyntaxError(template, position, "unmatched '}'")

        if character != "{":
            position += 1
            continue

        end = template.find("}", position + 1)
        if end == -1:
            raise TemplateSyntaxError(template, position, "unclosed '{'")

        nested = template.find("{", position + 1, end)
        if nested != -1:
            raise TemplateSyntaxError(template, nested, "nested '{'")

        if position > literal_start:
            segments.append(LiteralSegment(text=template[literal_start:position]))

        segments.append(_parse_expression(template, position, template[position + 1:end]))
        position = end + 1
        literal_start = position

    if literal_start < len(template):
        segments.append(LiteralSegment(text=template[literal_start:]))

    return UriTemplate(template=template, segments=tuple(segments))


def _parse_expression(template: str, position: int, body: str) -> ExpressionSegment:
    if not body:
        raise TemplateSyntaxError(template, position, "empty expression")

    operator = ""
    if body[0] in QUERY_OPERATORS:
        operator, body = body[0], body[1:]
    elif body[0] in UNSUPPORTED_OPERATORS:
        raise TemplateSyntaxError(template, position, f"unsupported operator '{body[0]}'")

    kind = VariableKind.QUERY if operator else VariableKind.PATH
    variables = []

    for variable_spec in body.split(","):
        exploded = variable_spec.endswith("*")
        name = variable_spec[:-1] if exploded else variable_spec

        if ":" in name:
            raise TemplateSyntaxError(template, position, f"prefix modifier in '{variable_spec}' is not supported")
        if not _VARIABLE_NAME.match(name):
            raise TemplateSyntaxError(template, position, f"invalid variable name '{variable_spec}'")
        if exploded and kind is VariableKind.PATH:
            raise TemplateSyntaxError(template, position, f"path variable '{name}' cannot be exploded")

        variables.append(TemplateVariable(name=name, kind=kind, exploded=exploded))

    return ExpressionSegment(operator=operator, variables=tuple(variables))


def expand_template(
    template: Union[str, UriTemplate],
    bindings: Optional[Mapping[str, Any]] = None,
    composite: bool = False,
) -> str:
    """
    Expand a template against variable bindings.

    Bindings not referenced by the template are ignored. A value of None or
    an empty list counts as unbound.

    Args:
        template: Template text or an already parsed template
        bindings: Variable values (scalars or lists of scalars)
        composite: Render exploded query variables as 'name=a,b'

    Returns:
        The expanded URI

    Raises:
        TemplateSyntaxError: If a template string cannot be parsed
        MissingMandatoryVariable: If a path variable is unbound
    """
    parsed = template if isinstance(template, UriTemplate) else parse_template(template)
    bindings = bindings or {}

    parts: List[str] = []
    query_open = False

    for segment in parsed.segments:
        if isinstance(segment, LiteralSegment):
            parts.append(segment.text)
            query_open = query_open or "?" in segment.text
            continue

        if not segment.operator:
            parts.append(",".join(
                _expand_path_variable(variable, bindings, parsed.template)
                for variable in segment.variables
            ))
            continue

        for variable in segment.variables:
            for pair in _query_pairs(variable, bindings.get(variable.name), composite):
                parts.append("&" if query_open else "?")
                parts.append(pair)
                query_open = True

    return "".join(parts)


def _is_unbound(value: Any) -> bool:
    return value is None or (isinstance(value, (list, tuple)) and not value)


def _render_scalar(value: Any, safe: str) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, Enum):
        text = str(value.value)
    else:
        text = str(value)
    return quote(text, safe=safe)


def _expand_path_variable(variable: TemplateVariable, bindings: Mapping[str, Any], template: str) -> str:
    value = bindings.get(variable.name)
    if _is_unbound(value):
        raise MissingMandatoryVariable(variable.name, template)

    if isinstance(value, (list, tuple)):
        return ",".join(_render_scalar(item, PATH_SAFE_CHARACTERS) for item in value if item is not None)
    return _render_scalar(value, PATH_SAFE_CHARACTERS)


def _query_pairs(variable: TemplateVariable, value: Any, composite: bool) -> List[str]:
    if _is_unbound(value):
        return []

    if not isinstance(value, (list, tuple)):
        return [f"{variable.name}={_render_scalar(value, QUERY_SAFE_CHARACTERS)}"]

    rendered = [_render_scalar(item, QUERY_SAFE_CHARACTERS) for item in value if item is not None]
    if not rendered:
        return []
    if variable.exploded and not composite:
        return [f"{variable.name}={item}" for item in rendered]
    return [f"{variable.name}={','.join(rendered)}"]


def _render_expression(operator: str, variables: Sequence[TemplateVariable]) -> str:
    names = ",".join(f"{variable.name}*" if variable.exploded else variable.name for variable in variables)
    return f"{{{operator}{names}}}"


def expand_template_partially(
    template: Union[str, UriTemplate],
    bindings: Mapping[str, Any],
    composite: bool = False,
) -> str:
    """
    Expand only the variables named in bindings and keep all other expressions.

    Expanded query pairs are placed where the query string starts: at the
    first query expression, else before the fragment, else at the end.
    Query expressions kept after them become '{&...}' continuations, so the
    result is still a valid template.

    Args:
        template: Template text or an already parsed template
        bindings: Values of the variables to expand; None or an empty list drops a query variable
        composite: Render exploded query variables as 'name=a,b'

    Returns:
        The partially expanded template (a plain URI if nothing was kept)

    Raises:
        TemplateSyntaxError: If a template string cannot be parsed
        MissingMandatoryVariable: If a named path variable is bound to None
    """
    parsed = template if isinstance(template, UriTemplate) else parse_template(template)

    head: List[str] = []
    tail: List[Union[str, ExpressionSegment]] = []
    pairs: List[str] = []
    query_open = False
    at_query = False

    for segment in parsed.segments:
        target = tail if at_query else head

        if isinstance(segment, LiteralSegment):
            if at_query:
                tail.append(segment.text)
                continue
            text, marker, fragment = segment.text.partition("#")
            head.append(text)
            query_open = query_open or "?" in text
            if marker:
                tail.append(f"#{fragment}")
                at_query = True
            continue

        if not segment.operator:
            target.append(",".join(
                _expand_path_variable(variable, bindings, parsed.template)
                if variable.name in bindings
                else _render_expression("", [variable])
                for variable in segment.variables
            ))
            continue

        at_query = True
        kept = []
        for variable in segment.variables:
            if variable.name in bindings:
                pairs.extend(_query_pairs(variable, bindings[variable.name], composite))
            else:
                kept.append(variable)
        if kept:
            tail.append(ExpressionSegment(operator=segment.operator, variables=tuple(kept)))

    expanded = "".join(head)
    if pairs:
        separator = "" if expanded.endswith(("?", "&")) else ("&" if query_open else "?")
        expanded = f"{expanded}{separator}{'&'.join(pairs)}"
        query_open = True

    for piece in tail:
        if isinstance(piece, ExpressionSegment):
            piece = _render_expression("&" if query_open else piece.operator, piece.variables)
        expanded += piece
    return expanded
