"""Customer service: CRUD orchestration over the persistence gateway."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from customer_api.database import READ, WRITE
from customer_api.exceptions import CustomerNotFoundError, MissingIdentifierError
from customer_api.models.customer import Customer
from customer_api.schemas.customer import CustomerResponse

if TYPE_CHECKING:
    from customer_api.repositories.customer_repository import CustomerRepository
    from customer_api.schemas.customer import CustomerPayload

logger = logging.getLogger(__name__)


async def create_customer(
    repository: CustomerRepository, payload: CustomerPayload
) -> CustomerResponse:
    """Persist a new customer and return it with its assigned id."""
    customer = await repository.save(Customer(**payload.model_dump()), WRITE)
    logger.info("Created customer %d", customer.id)
    return CustomerResponse.model_validate(customer)


async def get_customer(
    repository: CustomerRepository, customer_id: int | None
) -> CustomerResponse:
    """Get a single customer by id.

    Raises MissingIdentifierError when no id was bound, CustomerNotFoundError
    when no record matches.
    """
    if customer_id is None:
        raise MissingIdentifierError("customerId")
    customer = await repository.find_by_id(customer_id, READ)
    if customer is None:
        raise CustomerNotFoundError(customer_id)
    return CustomerResponse.model_validate(customer)


async def get_customer_by_query(
    repository: CustomerRepository, customer_id: int
) -> CustomerResponse:
    """Get a customer looked up through a query parameter."""
    customer = await repository.find_by_id(customer_id, READ)
    if customer is None:
        raise CustomerNotFoundError(customer_id)
    return CustomerResponse.model_validate(customer)


async def update_customer(
    repository: CustomerRepository, customer_id: int, payload: CustomerPayload
) -> CustomerResponse:
    """Replace the full record stored under ``customer_id``."""
    customer = await repository.save(Customer(id=customer_id, **payload.model_dump()), WRITE)
    logger.info("Replaced customer %d", customer.id)
    return CustomerResponse.model_validate(customer)


async def delete_customer(repository: CustomerRepository, customer_id: int) -> None:
    """Delete a customer. Deleting an absent customer is not an error."""
    await repository.delete_by_id(customer_id, WRITE)
    logger.info("Deleted customer %d", customer_id)


async def list_customers(repository: CustomerRepository) -> list[CustomerResponse]:
    """List all customers."""
    customers = await repository.find_all(READ)
    return [CustomerResponse.model_validate(customer) for customer in customers]
