"""Provisioning ports.

Physical database administration happens on the server (outside any
tenant database), while schema and seed operations run inside a tenant
database through a session handed out by the connection switchboard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class IDatabaseAdministrator(Protocol):
    """Creates and drops tenant databases on the database server."""

    async def database_exists(self, name: str) -> bool:
        """Whether a physical database with this name exists."""
        ...

    async def create_database(self, name: str) -> None:
        """Create an empty database.

        Raises:
            DatabaseError: If the server refuses to create it
        """
        ...

    async def drop_database(self, name: str) -> None:
        """Drop a database if it exists."""
        ...


@runtime_checkable
class ITenantSchemaManager(Protocol):
    """Applies the tenant schema and baseline seed data."""

    async def migrate(self, session: AsyncSession, fresh: bool = False) -> None:
        """Create the tenant tables, dropping existing ones first when ``fresh``."""
        ...

    async def seed_roles(self, session: AsyncSession) -> int:
        """Insert baseline roles and permissions; return the number of roles.

        Idempotent: existing roles and permissions are left in place.
        """
        ...
