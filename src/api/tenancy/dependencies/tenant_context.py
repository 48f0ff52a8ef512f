"""Tenant context FastAPI dependencies.

The tenant context guard middleware publishes the resolved ``TenantContext``
and the request's ``ConnectionSwitchboard`` in ``request.state``. These
dependencies hand them to routes explicitly; nothing downstream reaches
for a global "current tenant".

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        tenant: Annotated[TenantContext, Depends(get_tenant_context)],
        session: Annotated[AsyncSession, Depends(get_tenant_session)],
    ):
        # session is bound to tenant.database
        ...
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_landlord_sessionmaker
from infrastructure.database.switchboard import ConnectionSwitchboard
from infrastructure.settings import get_tenancy_settings
from shared_kernel.middleware import (
    TENANT_CONTEXT_STATE_KEY,
    TENANT_SWITCHBOARD_STATE_KEY,
    TenantContext,
)
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from tenancy.application.resolution import TenantResolver
from tenancy.infrastructure.company_repository import CompanyRepository
from tenancy.presentation.errors import ApiError


@asynccontextmanager
async def open_tenant_resolver() -> AsyncIterator[TenantResolver]:
    """Yield a resolver reading the registry through a fresh landlord session.

    Used by the tenant context guard; the session is closed before the
    request reaches its route.
    """
    settings = get_tenancy_settings()
    async with get_landlord_sessionmaker()() as session:
        yield TenantResolver(
            repository=CompanyRepository(session),
            strategy=settings.resolution_strategy,
            root_domain=settings.root_domain,
            reserved_prefixes=settings.reserved_path_prefixes,
        )


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance.

    Returns:
        DefaultTenantContextProbe instance for observability
    """
    return DefaultTenantContextProbe()


def get_tenant_context(request: Request) -> TenantContext:
    """Return the tenant context published by the guard.

    Raises:
        ApiError: 400 if the request was not routed to a tenant
    """
    context = getattr(request.state, TENANT_CONTEXT_STATE_KEY, None)
    if context is None:
        raise ApiError(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company could not be determined from the request",
            code="tenant_context_missing",
        )
    return context


def get_tenant_switchboard(
    request: Request,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
) -> ConnectionSwitchboard:
    """Return the switchboard bound to the request's tenant database."""
    switchboard = getattr(request.state, TENANT_SWITCHBOARD_STATE_KEY, None)
    if switchboard is None or switchboard.current_target != context.database:
        raise ApiError(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Tenant database is not active",
            code="tenant_database_inactive",
        )
    return switchboard


def get_tenant_session(
    switchboard: Annotated[ConnectionSwitchboard, Depends(get_tenant_switchboard)],
) -> AsyncSession:
    """Return the session on the request's tenant database."""
    return switchboard.session()


def require_company_slug_match(
    request: Request,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> TenantContext:
    """Check that the ``{company_slug}`` path parameter names the resolved company.

    Routes without the path parameter (host mode) always pass.

    Raises:
        ApiError: 400 on mismatch
    """
    path_slug = request.path_params.get("company_slug")
    if path_slug is not None and path_slug != context.slug:
        probe.company_slug_mismatch(path_slug, context.slug)
        raise ApiError(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company slug does not match the resolved company",
            code="company_slug_mismatch",
        )
    return context

