"""
Links to FastAPI operations.

Resolves a named route into an OperationReference (path template, path
parameters, query parameters) and builds a Link from it.
"""

from typing import Any, Dict

from fastapi import FastAPI, Request
from starlette.routing import NoMatchFound, Route

from halwrap.models.link import Link, OperationReference


def _find_route(app: FastAPI, route_name: str, params: Dict[str, Any]) -> Route:
    for route in app.routes:
        if isinstance(route, Route) and route.name == route_name:
            return route
    raise NoMatchFound(route_name, params)


def resolve_operation(app: FastAPI, route_name: str, **params: Any) -> OperationReference:
    """
    Resolve a route name into an operation reference.

    Parameters named in the route path become path parameters; all others
    become query parameters.

    Raises:
        NoMatchFound: If no route has this name
    """
    route = _find_route(app, route_name, params)
    path_names = set(route.param_convertors)

    return OperationReference(
        path_template=route.path_format,
        path_params={name: value for name, value in params.items() if name in path_names},
        query_params={name: value for name, value in params.items() if name not in path_names},
    )


def link_to(request: Request, route_name: str, **params: Any) -> Link:
    """
    Build an absolute link to a named route.

    Example:
        link_to(request, "get_order", order_id=7, expand=["items"])
        # http://testserver/orders/7?expand=items
    """
    reference = resolve_operation(request.app, route_name, **params)
    return Link.from_operation(reference).prepend_base_url(str(request.base_url))
