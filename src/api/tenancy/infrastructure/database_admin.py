"""PostgreSQL implementation of IDatabaseAdministrator.

CREATE DATABASE and DROP DATABASE cannot run inside a transaction, so all
statements go through the AUTOCOMMIT administrative engine.
"""

from __future__ import annotations

import re

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.exceptions import DatabaseError
from infrastructure.database.switchboard import TenantEngineRegistry
from tenancy.ports.provisioning import IDatabaseAdministrator

_DATABASE_NAME = re.compile(r"^[a-z][a-z0-9_]{0,62}$")


class PostgresDatabaseAdministrator(IDatabaseAdministrator):
    """Creates and drops tenant databases on the PostgreSQL server."""

    def __init__(
        self,
        admin_engine: AsyncEngine,
        engines: TenantEngineRegistry | None = None,
    ) -> None:
        """Initialize with the administrative engine.

        Args:
            admin_engine: AUTOCOMMIT engine connected to the landlord database
            engines: Tenant engine registry; pooled connections to a database
                are disposed before it is dropped
        """
        self._admin_engine = admin_engine
        self._engines = engines

    async def database_exists(self, name: str) -> bool:
        async with self._admin_engine.connect() as connection:
            result = await connection.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": name},
            )
            return result.scalar() is not None

    async def create_database(self, name: str) -> None:
        statement = f"CREATE DATABASE {self._quote(name)} ENCODING 'UTF8'"
        try:
            async with self._admin_engine.connect() as connection:
                await connection.execute(text(statement))
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to create database '{name}'") from e

    async def drop_database(self, name: str) -> None:
        if self._engines is not None:
            await self._engines.evict(name)

        statement = f"DROP DATABASE IF EXISTS {self._quote(name)} WITH (FORCE)"
        try:
            async with self._admin_engine.connect() as connection:
                await connection.execute(text(statement))
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to drop database '{name}'") from e

    def _quote(self, name: str) -> str:
        if not _DATABASE_NAME.match(name):
            raise DatabaseError(f"Refusing unsafe database name '{name}'")
        return self._admin_engine.dialect.identifier_preparer.quote(name)
