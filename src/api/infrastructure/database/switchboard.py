"""Tenant connection switchboard.

Every company owns a physical database on the same server. Instead of
mutating one process-wide "tenant" connection, the switchboard splits the
concern in two:

- ``TenantEngineRegistry`` is shared by the whole process and owns one
  async engine (connection pool) per tenant database, created on demand.
- ``ConnectionSwitchboard`` is owned by exactly one unit of work (an HTTP
  request, one CLI iteration, one provisioning run). It records which tenant
  database that unit of work is bound to and hands out its session.

Concurrent requests therefore never share a binding, and resetting one
switchboard cannot affect another.
"""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.engines import create_tenant_engine
from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    SwitchboardStateError,
)
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
    DefaultSwitchboardProbe,
    SwitchboardProbe,
)
from infrastructure.settings import DatabaseSettings

EngineFactory = Callable[[DatabaseSettings, str, int], AsyncEngine]


class TenantEngineRegistry:
    """Process-wide pool of tenant engines keyed by database name.

    Engines are created lazily on first use. Creation is guarded by a lock
    with double-checked lookup, the same way the landlord engine singleton
    is initialized.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        pool_size: int = 5,
        engine_factory: EngineFactory | None = None,
        probe: ConnectionProbe | None = None,
    ) -> None:
        self._settings = settings
        self._pool_size = pool_size
        self._engine_factory = engine_factory or create_tenant_engine
        self._probe = probe or DefaultConnectionProbe()
        self._engines: dict[str, AsyncEngine] = {}
        self._lock = threading.Lock()

    @property
    def databases(self) -> list[str]:
        """Names of databases with an open engine."""
        return sorted(self._engines)

    def get_engine(self, database: str) -> AsyncEngine:
        """Return the engine for a tenant database, creating it if needed."""
        if not database:
            raise SwitchboardStateError("Tenant database name must not be empty")

        engine = self._engines.get(database)
        if engine is None:
            with self._lock:
                engine = self._engines.get(database)
                if engine is None:
                    engine = self._engine_factory(
                        self._settings, database, self._pool_size
                    )
                    self._engines[database] = engine
                    self._probe.engine_created(database, self._pool_size)
        return engine

    async def evict(self, database: str) -> None:
        """Dispose and forget the engine for a database.

        Must be called before dropping a database so no pooled connection
        keeps it open.
        """
        with self._lock:
            engine = self._engines.pop(database, None)
        if engine is not None:
            await engine.dispose()
            self._probe.engine_disposed(database)

    async def dispose_all(self) -> None:
        """Dispose every tenant engine (application shutdown)."""
        with self._lock:
            engines = list(self._engines.items())
            self._engines.clear()
        for database, engine in engines:
            await engine.dispose()
            self._probe.engine_disposed(database)


class ConnectionSwitchboard:
    """Per-unit-of-work binding of the tenant connection to one database.

    Lifecycle:
        switchboard = ConnectionSwitchboard(registry)
        await switchboard.activate("tenant_ahmed_tech", verify=True)
        session = switchboard.session()
        ...
        await switchboard.reset()

    ``generation`` increases on every change of binding so callers can detect
    that a session obtained earlier belongs to a previous binding.
    """

    def __init__(
        self,
        engines: TenantEngineRegistry,
        probe: SwitchboardProbe | None = None,
        connection_probe: ConnectionProbe | None = None,
    ) -> None:
        self._engines = engines
        self._probe = probe or DefaultSwitchboardProbe()
        self._connection_probe = connection_probe or DefaultConnectionProbe()
        self._target: str | None = None
        self._engine: AsyncEngine | None = None
        self._session: AsyncSession | None = None
        self._generation = 0

    @property
    def current_target(self) -> str | None:
        """Database the tenant connection is bound to, or None."""
        return self._target

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_active(self) -> bool:
        return self._target is not None

    async def activate(self, database: str, verify: bool = False) -> None:
        """Bind the tenant connection to ``database``.

        Activating the database that is already bound is a no-op. Switching
        while the current session has an open transaction raises
        SwitchboardStateError.

        Args:
            database: Physical tenant database name
            verify: Run a connectivity probe after binding

        Raises:
            SwitchboardStateError: If a transaction is open on the current binding
            DatabaseConnectionError: If verify is set and the database is unreachable
        """
        if self._session is not None and self._session.in_transaction():
            self._probe.activation_rejected(
                current=self._target,
                requested=database,
                reason="transaction_open",
            )
            raise SwitchboardStateError(
                f"Cannot switch tenant database from '{self._target}' to "
                f"'{database}' while a transaction is open"
            )

        if database == self._target:
            self._probe.activation_reused(database)
        else:
            await self._discard_session()
            self._engine = self._engines.get_engine(database)
            self._target = database
            self._generation += 1
            self._probe.database_activated(database, self._generation)

        if verify:
            await self.verify()

    async def verify(self) -> None:
        """Probe the bound database with ``SELECT 1``.

        Raises:
            SwitchboardStateError: If nothing is bound
            DatabaseConnectionError: If the database is unreachable or missing
        """
        if self._engine is None or self._target is None:
            raise SwitchboardStateError("No tenant database is active")

        try:
            async with self._engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            self._connection_probe.connection_failed(self._target, e)
            raise DatabaseConnectionError(
                f"Unable to connect to database '{self._target}'",
                database=self._target,
            ) from e

        self._connection_probe.connection_verified(self._target)

    def session(self) -> AsyncSession:
        """Return this unit of work's session on the bound tenant database.

        The session is created on first use and reused until the binding
        changes or is reset.

        Raises:
            SwitchboardStateError: If nothing is bound
        """
        if self._engine is None:
            raise SwitchboardStateError("No tenant database is active")
        if self._session is None:
            self._session = AsyncSession(self._engine, expire_on_commit=False)
        return self._session

    async def reset(self) -> None:
        """Close the session and unbind. Safe to call repeatedly."""
        previous = self._target
        try:
            await self._discard_session()
        finally:
            self._engine = None
            self._target = None
            if previous is not None:
                self._generation += 1
                self._probe.switchboard_reset(previous, self._generation)

    async def _discard_session(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            await session.close()


@asynccontextmanager
async def tenant_scope(
    switchboard: ConnectionSwitchboard,
    database: str,
    verify: bool = True,
) -> AsyncIterator[ConnectionSwitchboard]:
    """Run a block of work against one tenant database.

    Activates (and optionally verifies) the database on entry and always
    resets the switchboard on exit, including when the block raises or is
    cancelled.
    """
    try:
        await switchboard.activate(database, verify=verify)
        yield switchboard
    finally:
        await switchboard.reset()
