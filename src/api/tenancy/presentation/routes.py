"""Tenancy presentation layer - slice-based organization.

Landlord routes (registration) are served without a tenant context. Tenant
routes (account, auth, modules) are mounted under the prefix of the active
resolution strategy and only run after the tenant context guard has bound
the company's database.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from infrastructure.settings import ResolutionStrategy
from tenancy.dependencies.tenant_context import require_company_slug_match
from tenancy.presentation import account, auth, modules, registration
from tenancy.presentation.routing import tenant_api_prefix

landlord_router = APIRouter()
landlord_router.include_router(registration.router)


def build_tenant_router(strategy: ResolutionStrategy) -> APIRouter:
    """Create the router holding every tenant-scoped route.

    In path mode the ``{company_slug}`` prefix parameter is checked
    against the resolved company on every route.
    """
    router = APIRouter(
        prefix=tenant_api_prefix(strategy),
        dependencies=[Depends(require_company_slug_match)],
    )
    router.include_router(account.router)
    router.include_router(auth.router)
    router.include_router(modules.router)
    return router


__all__ = ["build_tenant_router", "landlord_router"]
