"""Tests for customer operations over a mocked persistence gateway."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from customer_api.database import READ, WRITE, Isolation
from customer_api.exceptions import CustomerNotFoundError, MissingIdentifierError
from customer_api.models.customer import Customer
from customer_api.repositories.customer_repository import CustomerRepository
from customer_api.schemas.customer import CustomerPayload
from customer_api.services.customer_service import (
    create_customer,
    delete_customer,
    get_customer,
    get_customer_by_query,
    list_customers,
    update_customer,
)


@pytest.fixture
def repository() -> AsyncMock:
    return AsyncMock(spec=CustomerRepository)


class TestTransactionOptions:
    def test_writes_are_read_committed(self) -> None:
        assert WRITE.isolation is Isolation.READ_COMMITTED
        assert WRITE.read_only is False

    def test_reads_use_default_isolation(self) -> None:
        assert READ.isolation is Isolation.DEFAULT
        assert READ.read_only is True


class TestCreateCustomer:
    async def test_create_returns_assigned_id(self, repository: AsyncMock) -> None:
        repository.save.return_value = Customer(id=3, name="Ann")
        result = await create_customer(repository, CustomerPayload(name="Ann"))

        assert result.id == 3
        assert result.name == "Ann"
        saved, options = repository.save.await_args.args
        assert saved.id is None
        assert options == WRITE


class TestGetCustomer:
    async def test_missing_identifier(self, repository: AsyncMock) -> None:
        with pytest.raises(MissingIdentifierError) as exc_info:
            await get_customer(repository, None)
        assert exc_info.value.variable_name == "customerId"
        repository.find_by_id.assert_not_awaited()

    async def test_not_found(self, repository: AsyncMock) -> None:
        repository.find_by_id.return_value = None
        with pytest.raises(CustomerNotFoundError) as exc_info:
            await get_customer(repository, 5)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Customer not found: 5"
        repository.find_by_id.assert_awaited_once_with(5, READ)

    async def test_found(self, repository: AsyncMock) -> None:
        repository.find_by_id.return_value = Customer(id=5, name="Ann", email="a@example.com")
        result = await get_customer(repository, 5)
        assert result.email == "a@example.com"

    async def test_query_lookup_not_found_raises_instead_of_crashing(
        self, repository: AsyncMock
    ) -> None:
        repository.find_by_id.return_value = None
        with pytest.raises(CustomerNotFoundError):
            await get_customer_by_query(repository, 8)


class TestUpdateCustomer:
    async def test_update_forces_path_id(self, repository: AsyncMock) -> None:
        repository.save.side_effect = lambda customer, options: customer
        result = await update_customer(repository, 11, CustomerPayload(name="Bob"))

        assert result.id == 11
        saved, options = repository.save.await_args.args
        assert saved.id == 11
        assert saved.email is None
        assert options == WRITE


class TestDeleteAndList:
    async def test_delete_is_a_write(self, repository: AsyncMock) -> None:
        await delete_customer(repository, 4)
        repository.delete_by_id.assert_awaited_once_with(4, WRITE)

    async def test_list_reads(self, repository: AsyncMock) -> None:
        repository.find_all.return_value = [Customer(id=1, name="Ann"), Customer(id=2, name="Bob")]
        result = await list_customers(repository)
        assert [c.name for c in result] == ["Ann", "Bob"]
        repository.find_all.assert_awaited_once_with(READ)
