"""Shared API dependencies: DB session, customer repository."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from customer_api.repositories.customer_repository import CustomerRepository


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """Get a database session."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


def get_customer_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CustomerRepository:
    """Get the customer persistence gateway bound to the request's session."""
    return CustomerRepository(session)
