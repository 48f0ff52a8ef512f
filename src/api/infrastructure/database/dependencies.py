"""Database dependency injection for FastAPI.

Provides the landlord session factory, the administrative engine used for
CREATE/DROP DATABASE, and the process-wide tenant engine registry.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import (
    create_admin_engine,
    create_landlord_engine,
)
from infrastructure.database.switchboard import TenantEngineRegistry
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings, get_tenancy_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instances (created on first use)
_landlord_engine: AsyncEngine | None = None
_admin_engine: AsyncEngine | None = None
_tenant_engines: TenantEngineRegistry | None = None

# Module-level sessionmaker (created with the landlord engine)
_landlord_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_landlord_engine() -> AsyncEngine:
    """Get the landlord database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.

    Returns:
        Configured async engine for the company registry
    """
    global _landlord_engine, _landlord_sessionmaker
    if _landlord_engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _landlord_engine is None:
                settings = get_database_settings()
                _landlord_engine = create_landlord_engine(settings)
                _landlord_sessionmaker = async_sessionmaker(
                    _landlord_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
    return _landlord_engine


def get_landlord_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the landlord sessionmaker, initializing the engine if needed."""
    get_landlord_engine()
    assert _landlord_sessionmaker is not None
    return _landlord_sessionmaker


def get_admin_engine() -> AsyncEngine:
    """Get the AUTOCOMMIT engine used to create and drop tenant databases."""
    global _admin_engine
    if _admin_engine is None:
        with _engine_lock:
            if _admin_engine is None:
                _admin_engine = create_admin_engine(get_database_settings())
    return _admin_engine


def get_tenant_engine_registry() -> TenantEngineRegistry:
    """Get the process-wide tenant engine registry (singleton)."""
    global _tenant_engines
    if _tenant_engines is None:
        with _engine_lock:
            if _tenant_engines is None:
                _tenant_engines = TenantEngineRegistry(
                    settings=get_database_settings(),
                    pool_size=get_tenancy_settings().tenant_pool_size,
                    probe=_probe,
                )
    return _tenant_engines


async def get_landlord_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a landlord session (FastAPI dependency).

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()`.

    Yields:
        AsyncSession bound to the landlord database
    """
    async with get_landlord_sessionmaker()() as session:
        yield session


async def close_database_connections() -> None:
    """Close all database engine connections.

    Should be called on application shutdown to properly cleanup connections.
    Also resets singletons to allow reinitialization.
    """
    global _landlord_engine, _admin_engine, _tenant_engines, _landlord_sessionmaker

    if _tenant_engines is not None:
        await _tenant_engines.dispose_all()
        _tenant_engines = None

    if _admin_engine is not None:
        await _admin_engine.dispose()
        _admin_engine = None

    if _landlord_engine is not None:
        await _landlord_engine.dispose()
        _probe.pool_closed(get_database_settings().database)
        _landlord_engine = None
        _landlord_sessionmaker = None
