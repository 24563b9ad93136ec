"""Content negotiation dependencies: Accept and Content-Type checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from customer_api.errors.exceptions import NotAcceptableError, UnsupportedMediaTypeError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

JSON_MEDIA_TYPES = ("application/json", "application/*+json")


def _split(media_type: str) -> tuple[str, str]:
    main, _, sub = media_type.strip().lower().partition("/")
    return main, sub or "*"


def _subtypes_compatible(first: str, second: str) -> bool:
    if "*" in (first, second) or first == second:
        return True
    for wildcard, other in ((first, second), (second, first)):
        if wildcard.startswith("*+"):
            suffix = wildcard[2:]
            if other == suffix or other.endswith("+" + suffix):
                return True
    return False


def media_types_compatible(first: str, second: str) -> bool:
    """Whether two media ranges (``*/*``, ``type/*``, ``type/*+suffix``) overlap."""
    first_main, first_sub = _split(first)
    second_main, second_sub = _split(second)
    if "*" not in (first_main, second_main) and first_main != second_main:
        return False
    return _subtypes_compatible(first_sub, second_sub)


def parse_accept(header: str) -> list[str]:
    """Media ranges listed in an Accept header, excluding those with ``q=0``."""
    ranges: list[str] = []
    for item in header.split(","):
        media_type, *params = item.split(";")
        if not media_type.strip():
            continue
        refused = False
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    refused = float(value) == 0
                except ValueError:
                    refused = False
        if not refused:
            ranges.append(media_type.strip())
    return ranges


def produces(*media_types: str) -> Callable[[Request], Awaitable[None]]:
    """Dependency rejecting requests whose Accept header excludes ``media_types``."""

    async def check_accept(request: Request) -> None:
        header = request.headers.get("accept")
        if not header or not header.strip():
            return
        accepted = parse_accept(header)
        if any(media_types_compatible(a, p) for a in accepted for p in media_types):
            return
        raise NotAcceptableError(media_types)

    return check_accept


def consumes(*media_types: str) -> Callable[[Request], Awaitable[None]]:
    """Dependency rejecting request bodies whose Content-Type is not in ``media_types``.

    A request without Content-Type is read as JSON.
    """

    async def check_content_type(request: Request) -> None:
        header = request.headers.get("content-type")
        if header is None:
            return
        content_type = header.split(";", 1)[0].strip()
        if content_type and any(media_types_compatible(content_type, m) for m in media_types):
            return
        raise UnsupportedMediaTypeError(content_type, media_types)

    return check_content_type
