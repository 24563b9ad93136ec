"""FastAPI wiring for the error classifier.

Every exception raised while processing a request ends up in
``render_error``, which classifies it and builds the final response.
No stack traces or internal details are exposed to clients.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from customer_api.errors.classifier import RequestContext, classify
from customer_api.errors.exceptions import TransportError
from customer_api.exceptions import CustomerApiError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

_HANDLED_EXCEPTIONS: tuple[type[Exception], ...] = (
    StarletteHTTPException,
    RequestValidationError,
    ResponseValidationError,
    TransportError,
    CustomerApiError,
    Exception,
)


def request_context(request: Request) -> RequestContext:
    """Extract the classification context from a request."""
    return RequestContext(
        method=request.method,
        path=request.url.path,
        content_type=request.headers.get("content-type"),
        matched_route="endpoint" in request.scope,
    )


def render_error(request: Request, exc: Exception) -> Response:
    """Classify ``exc`` and build the response sent to the client."""
    context = request_context(request)
    error = classify(exc, context)
    if error.status_code >= 500:
        logger.error(
            "%s in %s %s: %s",
            error.kind.value,
            context.method,
            context.path,
            exc,
            exc_info=exc,
        )
    else:
        logger.warning(
            "%s in %s %s: %s", error.kind.value, context.method, context.path, exc
        )

    if error.body is None:
        return Response(status_code=error.status_code, headers=error.headers)
    return JSONResponse(status_code=error.status_code, content=error.body, headers=error.headers)


async def handle_error(request: Request, exc: Exception) -> Response:
    """Exception handler shared by every registered exception type."""
    return render_error(request, exc)


def register_error_handlers(app: FastAPI) -> None:
    """Route all request-processing failures through the classifier.

    Args:
        app: The FastAPI application instance.
    """
    for exc_class in _HANDLED_EXCEPTIONS:
        app.add_exception_handler(exc_class, handle_error)
