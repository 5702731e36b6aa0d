"""
Error responses for hypermedia construction failures.

Template, relation and shape errors are programming errors and map to 500;
invalid page parameters come from the client and map to 400.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from halwrap.core.exceptions import HalException, InvalidPageParameters

logger = logging.getLogger(__name__)


def create_error_response(status_code: int, error: HalException) -> JSONResponse:
    """
    Create a JSON error response.

    Args:
        status_code: HTTP status code
        error: The error that occurred

    Returns:
        JSONResponse with the error kind and message
    """
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(error), "error": type(error).__name__},
    )


async def handle_hal_exception(request: Request, error: HalException) -> JSONResponse:
    logger.error(f"Failed to build hypermedia response for {request.url.path}: {error}")
    return create_error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error)


async def handle_invalid_page_parameters(request: Request, error: InvalidPageParameters) -> JSONResponse:
    return create_error_response(status.HTTP_400_BAD_REQUEST, error)


def register_exception_handlers(application: FastAPI) -> None:
    """Register the error handlers with the application."""
    application.add_exception_handler(HalException, handle_hal_exception)
    application.add_exception_handler(InvalidPageParameters, handle_invalid_page_parameters)
