"""Customer API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.responses import PlainTextResponse

from customer_api.api.deps import get_customer_repository
from customer_api.api.negotiation import JSON_MEDIA_TYPES, consumes, produces
from customer_api.repositories.customer_repository import CustomerRepository
from customer_api.schemas.customer import (
    ID_MAX,
    ID_MIN,
    ContactCard,
    CustomerPayload,
    CustomerResponse,
)
from customer_api.services.customer_service import (
    create_customer,
    delete_customer,
    get_customer,
    get_customer_by_query,
    list_customers,
    update_customer,
)

router = APIRouter(prefix="/customers", tags=["customers"])

_PRODUCES_JSON = Depends(produces(*JSON_MEDIA_TYPES))
_CONSUMES_JSON = Depends(consumes(*JSON_MEDIA_TYPES))

Repository = Annotated[CustomerRepository, Depends(get_customer_repository)]
CustomerId = Annotated[int, Path(ge=1, le=ID_MAX)]
AnyCustomerId = Annotated[int, Path(ge=ID_MIN, le=ID_MAX)]


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=201,
    dependencies=[_PRODUCES_JSON, _CONSUMES_JSON],
)
async def create_customer_endpoint(
    body: CustomerPayload,
    repository: Repository,
) -> CustomerResponse:
    """Create a customer; the id is assigned by the server."""
    return await create_customer(repository, body)


# Declared before /with/{customer_id} so the literal segment wins.
@router.get(
    "/with/request-param",
    response_model=CustomerResponse,
    dependencies=[_PRODUCES_JSON],
)
async def get_customer_by_request_param(
    customer_id: Annotated[int, Query(alias="customerId", ge=ID_MIN, le=ID_MAX)],
    repository: Repository,
) -> CustomerResponse:
    """Get a customer by id given as the ``customerId`` query parameter."""
    return await get_customer_by_query(repository, customer_id)


@router.get("/with/", response_model=CustomerResponse, dependencies=[_PRODUCES_JSON])
async def get_customer_without_id(repository: Repository) -> CustomerResponse:
    """Route matched without an id segment; always reports the missing path variable."""
    return await get_customer(repository, None)


@router.get("/with/{customer_id}", response_model=CustomerResponse, dependencies=[_PRODUCES_JSON])
async def get_customer_endpoint(
    customer_id: CustomerId,
    repository: Repository,
) -> CustomerResponse:
    """Get a customer by id."""
    return await get_customer(repository, customer_id)


@router.get(
    "/get-all-customers",
    response_model=list[CustomerResponse],
    dependencies=[_PRODUCES_JSON],
)
async def list_customers_endpoint(repository: Repository) -> list[CustomerResponse]:
    """List all customers."""
    return await list_customers(repository)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[_PRODUCES_JSON, _CONSUMES_JSON],
)
async def update_customer_endpoint(
    customer_id: CustomerId,
    body: CustomerPayload,
    repository: Repository,
) -> CustomerResponse:
    """Replace a customer. The id in the path wins over anything in the body."""
    return await update_customer(repository, customer_id, body)


@router.delete("/{customer_id}", status_code=204)
async def delete_customer_endpoint(
    customer_id: AnyCustomerId,
    repository: Repository,
) -> Response:
    """Delete a customer. Deleting an unknown id still answers 204."""
    await delete_customer(repository, customer_id)
    return Response(status_code=204)


@router.get("/serialize", response_model=ContactCard, dependencies=[_PRODUCES_JSON])
async def serialize_contact_card() -> dict[str, str]:
    """Return a contact card with none of its required fields populated.

    Rendering the response fails, which is answered as an unwritable body.
    """
    return {}


@router.get("/example", response_class=PlainTextResponse)
async def example_with_param(param: Annotated[int, Query()]) -> str:
    """Echo an integer query parameter."""
    return f"message sent : {param}"


@router.get("/example/{example_id}", response_class=PlainTextResponse)
async def example_with_path(example_id: Annotated[int, Path()]) -> str:
    """Echo an integer path segment."""
    return f"message sent : {example_id}"
