"""SQLAlchemy ORM models for the customer API."""

from customer_api.models.base import Base
from customer_api.models.customer import Customer

__all__ = [
    "Base",
    "Customer",
]
