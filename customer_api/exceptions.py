"""Domain exception types raised by customer operations.

Convention:
- ``ErrorResponseError`` carries its own HTTP status; the central error
  classifier answers with that status and the error's message.
- ``MissingIdentifierError`` is reported as a missing path variable.

No framework imports belong here.
"""

from __future__ import annotations


class CustomerApiError(Exception):
    """Base error for all customer domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ErrorResponseError(CustomerApiError):
    """Domain error with an attached HTTP status code."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class CustomerNotFoundError(ErrorResponseError):
    """Raised when no customer record matches the requested identifier."""

    def __init__(self, customer_id: int) -> None:
        super().__init__(404, f"Customer not found: {customer_id}")
        self.customer_id = customer_id


class MissingIdentifierError(CustomerApiError):
    """Raised when a lookup is attempted without a customer identifier."""

    def __init__(self, variable_name: str = "customerId") -> None:
        super().__init__(f"Required path variable '{variable_name}' is missing")
        self.variable_name = variable_name
