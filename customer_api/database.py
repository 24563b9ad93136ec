"""Database engine, session management and per-call transaction options."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from customer_api.config import Settings

logger = logging.getLogger(__name__)


class Isolation(enum.Enum):
    """Transaction isolation level requested by a gateway call."""

    DEFAULT = "DEFAULT"
    READ_UNCOMMITTED = "READ UNCOMMITTED"
    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"


@dataclass(frozen=True)
class TransactionOptions:
    """Isolation and read-only flag for a single persistence call."""

    isolation: Isolation = Isolation.DEFAULT
    read_only: bool = False


READ = TransactionOptions(isolation=Isolation.DEFAULT, read_only=True)
WRITE = TransactionOptions(isolation=Isolation.READ_COMMITTED, read_only=False)

_ALL_LEVELS = frozenset(level for level in Isolation if level is not Isolation.DEFAULT)

# SQLite transactions are always serializable, so no level is ever set there.
_SUPPORTED_ISOLATION: dict[str, frozenset[Isolation]] = {
    "postgresql": _ALL_LEVELS,
    "mysql": _ALL_LEVELS,
    "mariadb": _ALL_LEVELS,
    "mssql": _ALL_LEVELS,
    "oracle": frozenset({Isolation.READ_COMMITTED, Isolation.SERIALIZABLE}),
}


def transaction_execution_options(dialect_name: str, options: TransactionOptions) -> dict[str, Any]:
    """Translate transaction options into SQLAlchemy execution options for a dialect.

    Levels the dialect cannot honour are dropped and the dialect's own default applies.
    """
    execution_options: dict[str, Any] = {}
    if options.isolation is not Isolation.DEFAULT:
        if options.isolation in _SUPPORTED_ISOLATION.get(dialect_name, frozenset()):
            execution_options["isolation_level"] = options.isolation.value
        else:
            logger.debug(
                "Dialect %s does not take isolation level %s; using its default",
                dialect_name,
                options.isolation.value,
            )
    if options.read_only and dialect_name == "postgresql":
        execution_options["postgresql_readonly"] = True
    return execution_options


def create_engine(
    settings: Settings,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Build the engine and the session factory repositories draw sessions from.

    SQL statements are logged through the ``sqlalchemy.engine`` logger set up
    by ``configure_logging`` rather than the engine's own ``echo`` switch.
    Sessions keep loaded attributes after commit so endpoint handlers can
    serialize saved customers without another round trip.
    """
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    logger.debug("Database engine created for dialect %s", engine.dialect.name)
    return engine, session_factory
