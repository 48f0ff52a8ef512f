"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_landlord_session,
    get_tenant_engine_registry,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from tenancy.dependencies.tenant_context import open_tenant_resolver
from tenancy.presentation.errors import install_error_handlers
from tenancy.presentation.middleware import TenantContextMiddleware
from tenancy.presentation.routes import build_tenant_router, landlord_router

settings = get_settings()


@asynccontextmanager
async def salesdesk_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Landlord, admin and tenant engine lifecycle (created lazily, closed on shutdown)
    """
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()
    probe.application_started(
        version=__version__,
        resolution_strategy=settings.tenancy.resolution_strategy.value,
        root_domain=settings.tenancy.root_domain,
    )

    yield

    probe.application_stopping(
        tenant_engines=len(get_tenant_engine_registry().databases)
    )
    await close_database_connections()


app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant CRM backend with a database per company",
    version=__version__,
    lifespan=salesdesk_lifespan,
)

install_error_handlers(app)

app.add_middleware(
    TenantContextMiddleware,
    resolver_factory=open_tenant_resolver,
    engine_registry=get_tenant_engine_registry,
    verify_connection=settings.tenancy.verify_connection_on_activate,
)

# Landlord routes (no tenant context)
app.include_router(landlord_router)

# Tenant routes (behind the tenant context guard)
app.include_router(build_tenant_router(settings.tenancy.resolution_strategy))


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_landlord_session)],
) -> dict:
    """Check landlord database connection health."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return {
            "status": "error",
            "connected": False,
            "error": type(e).__name__,
        }
    return {
        "status": "ok",
        "connected": True,
        "database": settings.database.database,
    }
