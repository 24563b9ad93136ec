"""Persistence gateway for customer records."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import delete, select

from customer_api.database import transaction_execution_options
from customer_api.models.customer import Customer

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from customer_api.database import TransactionOptions

logger = logging.getLogger(__name__)


class CustomerRepository:
    """CRUD access to stored customers.

    Every call runs in its own transaction configured by the ``TransactionOptions``
    passed in. Write calls commit; read-only calls detach what they loaded and roll
    back, so nothing they touched can be flushed.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def _transaction(self, options: TransactionOptions) -> AsyncGenerator[AsyncSession]:
        dialect_name = self._session.get_bind().dialect.name
        execution_options = transaction_execution_options(dialect_name, options)
        if execution_options:
            await self._session.connection(execution_options=execution_options)
        try:
            yield self._session
        except Exception:
            await self._session.rollback()
            raise
        if options.read_only:
            self._session.expunge_all()
            await self._session.rollback()
        else:
            await self._session.commit()

    async def save(self, customer: Customer, options: TransactionOptions) -> Customer:
        """Insert a new customer, or replace the stored record with the same id."""
        async with self._transaction(options) as session:
            if customer.id is None:
                session.add(customer)
                await session.flush()
                stored = customer
            else:
                stored = await session.merge(customer)
                await session.flush()
        logger.debug("Saved customer %d", stored.id)
        return stored

    async def find_by_id(self, customer_id: int, options: TransactionOptions) -> Customer | None:
        async with self._transaction(options) as session:
            return await session.get(Customer, customer_id)

    async def find_all(self, options: TransactionOptions) -> Sequence[Customer]:
        async with self._transaction(options) as session:
            result = await session.execute(select(Customer).order_by(Customer.id))
            return result.scalars().all()

    async def delete_by_id(self, customer_id: int, options: TransactionOptions) -> None:
        """Delete a customer; deleting an absent id is a no-op."""
        async with self._transaction(options) as session:
            result = await session.execute(delete(Customer).where(Customer.id == customer_id))
        logger.debug("Deleted %d row(s) for customer %d", result.rowcount, customer_id)
