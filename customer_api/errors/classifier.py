"""Classification of request-processing failures into HTTP error responses.

``classify`` is a pure function of the exception and the request context.
Each failure is first identified as an ``ErrorKind``; ``ERROR_TABLE`` then
gives the kind's default status code and body shape. Every response also
carries the kind in the ``X-Error-Kind`` header so clients can branch on it
without parsing the body.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from fastapi.exceptions import RequestValidationError, ResponseValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from customer_api.errors.exceptions import (
    AsyncRequestTimeoutError,
    NotAcceptableError,
    UnsupportedMediaTypeError,
)
from customer_api.exceptions import ErrorResponseError, MissingIdentifierError
from customer_api.schemas.customer import ID_MAX, ID_MIN

ERROR_KIND_HEADER = "X-Error-Kind"

TYPE_MISMATCH_MESSAGE = 'Invalid request parameter i.e. required @PathVariable("id") Long id'
NOT_WRITABLE_MESSAGE = (
    "there is an issue serializing the response object to JSON or"
    " the response body cannot be written."
)


class ErrorKind(enum.StrEnum):
    """Stable name of a failure category."""

    METHOD_NOT_ALLOWED = "method_not_allowed"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    NOT_ACCEPTABLE = "not_acceptable"
    MISSING_PATH_VARIABLE = "missing_path_variable"
    MISSING_QUERY_PARAMETER = "missing_query_parameter"
    MISSING_REQUEST_PART = "missing_request_part"
    REQUEST_BINDING = "request_binding"
    ARGUMENT_NOT_VALID = "argument_not_valid"
    NO_HANDLER_FOUND = "no_handler_found"
    ASYNC_REQUEST_TIMEOUT = "async_request_timeout"
    ERROR_RESPONSE = "error_response"
    TYPE_MISMATCH = "type_mismatch"
    MESSAGE_NOT_READABLE = "message_not_readable"
    MESSAGE_NOT_WRITABLE = "message_not_writable"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class RequestContext:
    """The parts of a request the classifier may look at.

    ``matched_route`` is set once routing picked an endpoint, so a 404 raised
    by that endpoint is not mistaken for an unknown URL.
    """

    method: str
    path: str
    content_type: str | None = None
    matched_route: bool = False


@dataclass(frozen=True)
class Classification:
    """An identified failure plus the details its body template needs."""

    kind: ErrorKind
    status_code: int | None = None
    name: str | None = None
    message: str | None = None
    acceptable: tuple[str, ...] = ()
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ErrorResponse:
    """Status, body and headers to send back. A ``None`` body means no content."""

    kind: ErrorKind
    status_code: int
    body: Any
    headers: dict[str, str]


@dataclass(frozen=True)
class ErrorTableEntry:
    status_code: int
    render: Callable[[int, Classification], Any]


ERROR_TABLE: dict[ErrorKind, ErrorTableEntry] = {
    ErrorKind.METHOD_NOT_ALLOWED: ErrorTableEntry(
        405, lambda status, _: {"HTTP method not supported": status}
    ),
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: ErrorTableEntry(
        415, lambda status, _: {"Unsupported media type": status}
    ),
    ErrorKind.NOT_ACCEPTABLE: ErrorTableEntry(
        406,
        lambda status, c: {
            "Requested media type is not acceptable.": status,
            "detail": f"Acceptable representations: [{', '.join(c.acceptable)}].",
        },
    ),
    ErrorKind.MISSING_PATH_VARIABLE: ErrorTableEntry(
        400, lambda status, _: {"Path variable is missing": status}
    ),
    ErrorKind.MISSING_QUERY_PARAMETER: ErrorTableEntry(
        400, lambda _, c: {"error": f"Request parameter '{c.name}' is missing."}
    ),
    ErrorKind.MISSING_REQUEST_PART: ErrorTableEntry(
        400, lambda status, c: {f"Required parameter '{c.name}' is missing": status}
    ),
    ErrorKind.REQUEST_BINDING: ErrorTableEntry(
        400, lambda *_: "Error binding request parameters or headers."
    ),
    ErrorKind.ARGUMENT_NOT_VALID: ErrorTableEntry(
        400, lambda *_: "Validation failed for method argument."
    ),
    ErrorKind.NO_HANDLER_FOUND: ErrorTableEntry(
        404, lambda *_: "No handler found for the requested URL i.e. not uri found"
    ),
    ErrorKind.ASYNC_REQUEST_TIMEOUT: ErrorTableEntry(503, lambda *_: None),
    ErrorKind.ERROR_RESPONSE: ErrorTableEntry(500, lambda _, c: c.message),
    ErrorKind.TYPE_MISMATCH: ErrorTableEntry(400, lambda *_: TYPE_MISMATCH_MESSAGE),
    ErrorKind.MESSAGE_NOT_READABLE: ErrorTableEntry(
        400, lambda status, _: {"Invalid JSON data in request body": status}
    ),
    ErrorKind.MESSAGE_NOT_WRITABLE: ErrorTableEntry(
        500, lambda status, _: {NOT_WRITABLE_MESSAGE: status}
    ),
    ErrorKind.UNCLASSIFIED: ErrorTableEntry(500, lambda *_: {"detail": "Internal server error"}),
}

# Highest priority first. A validation error listing several problems is
# reported as the most fundamental one.
_VALIDATION_PRIORITY = (
    ErrorKind.MESSAGE_NOT_READABLE,
    ErrorKind.MISSING_PATH_VARIABLE,
    ErrorKind.MISSING_QUERY_PARAMETER,
    ErrorKind.MISSING_REQUEST_PART,
    ErrorKind.REQUEST_BINDING,
    ErrorKind.TYPE_MISMATCH,
    ErrorKind.ARGUMENT_NOT_VALID,
)


def _is_multipart(content_type: str | None) -> bool:
    return content_type is not None and content_type.lower().startswith("multipart/")


def _outside_id_range(error_type: str, ctx: Mapping[str, Any]) -> bool:
    """Whether a bound failure is the 64-bit range check rather than a business rule."""
    if error_type == "less_than_equal":
        return ctx.get("le") == ID_MAX
    if error_type == "greater_than_equal":
        return ctx.get("ge") == ID_MIN
    return False


def classify_validation_error(
    error: Mapping[str, Any], context: RequestContext
) -> Classification:
    """Identify the failure described by one pydantic error entry."""
    loc = tuple(error.get("loc", ()))
    error_type = str(error.get("type", ""))
    source = loc[0] if loc else None

    if error_type == "json_invalid" or loc == ("body",):
        return Classification(ErrorKind.MESSAGE_NOT_READABLE)
    if error_type == "missing":
        if source == "path":
            return Classification(ErrorKind.MISSING_PATH_VARIABLE, name=str(loc[-1]))
        if source == "query":
            return Classification(ErrorKind.MISSING_QUERY_PARAMETER, name=str(loc[-1]))
        if source == "body" and _is_multipart(context.content_type):
            return Classification(ErrorKind.MISSING_REQUEST_PART, name=str(loc[-1]))
    if source in ("header", "cookie"):
        return Classification(ErrorKind.REQUEST_BINDING)
    if source in ("path", "query") and (
        error_type.endswith(("_parsing", "_type"))
        or _outside_id_range(error_type, error.get("ctx") or {})
    ):
        return Classification(ErrorKind.TYPE_MISMATCH)
    return Classification(ErrorKind.ARGUMENT_NOT_VALID)


def _classify_request_validation(
    exc: RequestValidationError, context: RequestContext
) -> Classification:
    candidates = [classify_validation_error(error, context) for error in exc.errors()]
    if not candidates:
        return Classification(ErrorKind.ARGUMENT_NOT_VALID)
    return min(candidates, key=lambda c: _VALIDATION_PRIORITY.index(c.kind))


def identify(exc: Exception, context: RequestContext) -> Classification:
    """Identify which kind of failure ``exc`` is."""
    if isinstance(exc, StarletteHTTPException):
        headers = dict(exc.headers or {})
        if exc.status_code == 405:
            return Classification(ErrorKind.METHOD_NOT_ALLOWED, headers=headers)
        if exc.status_code == 404 and not context.matched_route:
            return Classification(ErrorKind.NO_HANDLER_FOUND, headers=headers)
        return Classification(
            ErrorKind.ERROR_RESPONSE,
            status_code=exc.status_code,
            message=str(exc.detail),
            headers=headers,
        )
    if isinstance(exc, UnsupportedMediaTypeError):
        return Classification(ErrorKind.UNSUPPORTED_MEDIA_TYPE)
    if isinstance(exc, NotAcceptableError):
        return Classification(ErrorKind.NOT_ACCEPTABLE, acceptable=exc.acceptable)
    if isinstance(exc, AsyncRequestTimeoutError):
        return Classification(ErrorKind.ASYNC_REQUEST_TIMEOUT)
    if isinstance(exc, MissingIdentifierError):
        return Classification(ErrorKind.MISSING_PATH_VARIABLE, name=exc.variable_name)
    if isinstance(exc, ErrorResponseError):
        return Classification(
            ErrorKind.ERROR_RESPONSE, status_code=exc.status_code, message=exc.message
        )
    if isinstance(exc, RequestValidationError):
        return _classify_request_validation(exc, context)
    if isinstance(exc, ResponseValidationError):
        return Classification(ErrorKind.MESSAGE_NOT_WRITABLE)
    return Classification(ErrorKind.UNCLASSIFIED)


def classify(exc: Exception, context: RequestContext) -> ErrorResponse:
    """Map a failure to the status code, body and headers of its error response."""
    classification = identify(exc, context)
    entry = ERROR_TABLE[classification.kind]
    status_code = classification.status_code or entry.status_code
    headers = {**classification.headers, ERROR_KIND_HEADER: classification.kind.value}
    return ErrorResponse(
        kind=classification.kind,
        status_code=status_code,
        body=entry.render(status_code, classification),
        headers=headers,
    )
