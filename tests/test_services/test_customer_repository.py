"""Tests for the customer persistence gateway against SQLite."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from customer_api.database import READ, WRITE
from customer_api.models.customer import Customer
from customer_api.repositories.customer_repository import CustomerRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def _count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Customer))
    return result.scalar_one()


class TestSave:
    async def test_insert_assigns_id(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        stored = await repo.save(Customer(name="Ann"), WRITE)
        assert stored.id is not None
        assert stored.id >= 1

    async def test_save_with_id_upserts(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        await repo.save(Customer(id=10, name="Ann", email="ann@example.com"), WRITE)
        await repo.save(Customer(id=10, name="Annabel", email=None), WRITE)

        found = await repo.find_by_id(10, READ)
        assert found is not None
        assert found.name == "Annabel"
        assert found.email is None
        assert await _count(db_session) == 1


class TestReads:
    async def test_find_missing_returns_none(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        assert await repo.find_by_id(404, READ) is None

    async def test_read_results_are_detached_and_usable(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        created = await repo.save(Customer(name="Ann"), WRITE)

        found = await repo.find_by_id(created.id, READ)
        assert found is not None
        assert found not in db_session
        assert found.name == "Ann"

    async def test_find_all_orders_by_id(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        await repo.save(Customer(id=2, name="Bob"), WRITE)
        await repo.save(Customer(id=1, name="Ann"), WRITE)

        customers = await repo.find_all(READ)
        assert [c.name for c in customers] == ["Ann", "Bob"]

    async def test_read_only_call_does_not_persist_changes(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        created = await repo.save(Customer(name="Ann"), WRITE)

        found = await repo.find_by_id(created.id, READ)
        assert found is not None
        found.name = "Changed"

        again = await repo.find_by_id(created.id, READ)
        assert again is not None
        assert again.name == "Ann"


class TestDelete:
    async def test_delete_existing(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        created = await repo.save(Customer(name="Ann"), WRITE)
        await repo.delete_by_id(created.id, WRITE)
        assert await repo.find_by_id(created.id, READ) is None

    async def test_delete_absent_is_noop(self, db_session: AsyncSession) -> None:
        repo = CustomerRepository(db_session)
        await repo.delete_by_id(999, WRITE)
        assert await _count(db_session) == 0
