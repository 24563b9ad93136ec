"""Transport-level errors raised while routing and negotiating a request."""

from __future__ import annotations


class TransportError(Exception):
    """Base error for request failures detected before business logic runs."""


class UnsupportedMediaTypeError(TransportError):
    """Raised when the request body's content type cannot be consumed."""

    def __init__(self, content_type: str, supported: tuple[str, ...]) -> None:
        super().__init__(
            f"Content type '{content_type}' not supported, expected one of: "
            f"{', '.join(supported)}"
        )


class NotAcceptableError(TransportError):
    """Raised when no representation the endpoint produces matches the Accept header."""

    def __init__(self, acceptable: tuple[str, ...]) -> None:
        super().__init__("No acceptable representation")
        self.acceptable = acceptable


class AsyncRequestTimeoutError(TransportError):
    """Raised when a request outlives the configured deadline."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"Request exceeded {timeout_seconds:g}s deadline")
