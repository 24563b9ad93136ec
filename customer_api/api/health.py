"""Liveness and database reachability probe."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from customer_api import __version__
from customer_api.api.deps import get_session
from customer_api.models.customer import Customer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    database: str
    dialect: str
    customers: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check(
    session: Annotated[AsyncSession, Depends(get_session)],
    response: Response,
) -> HealthResponse:
    dialect = session.get_bind().dialect.name
    try:
        count = await session.scalar(select(func.count()).select_from(Customer))
    except SQLAlchemyError:
        logger.warning("Health check could not query the customers table", exc_info=True)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(
            status="degraded", version=__version__, database="error", dialect=dialect
        )
    finally:
        await session.rollback()

    return HealthResponse(
        status="ok",
        version=__version__,
        database="ok",
        dialect=dialect,
        customers=count,
    )
