"""Provisioning dependencies for the registration routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    get_admin_engine,
    get_landlord_session,
    get_tenant_engine_registry,
)
from infrastructure.database.switchboard import ConnectionSwitchboard
from infrastructure.settings import get_tenancy_settings
from tenancy.application.observability import (
    DefaultProvisioningProbe,
    ProvisioningProbe,
)
from tenancy.application.services import ProvisioningService, SlugAllocator
from tenancy.dependencies.company import (
    get_company_details_repository,
    get_company_repository,
)
from tenancy.infrastructure.company_details_repository import (
    CompanyDetailsRepository,
)
from tenancy.infrastructure.company_repository import CompanyRepository
from tenancy.infrastructure.database_admin import PostgresDatabaseAdministrator
from tenancy.infrastructure.tenant_schema import TenantSchemaManager
from tenancy.infrastructure.tenant_user_repository import TenantUserRepository


def get_slug_allocator(
    company_repo: Annotated[CompanyRepository, Depends(get_company_repository)],
) -> SlugAllocator:
    settings = get_tenancy_settings()
    return SlugAllocator(
        repository=company_repo,
        database_prefix=settings.database_prefix,
        max_suffix_attempts=settings.max_slug_suffix_attempts,
    )


def get_provisioning_probe() -> ProvisioningProbe:
    """Get ProvisioningProbe instance.

    Returns:
        DefaultProvisioningProbe instance for observability
    """
    return DefaultProvisioningProbe()


def get_provisioning_service(
    session: Annotated[AsyncSession, Depends(get_landlord_session)],
    company_repo: Annotated[CompanyRepository, Depends(get_company_repository)],
    details_repo: Annotated[
        CompanyDetailsRepository, Depends(get_company_details_repository)
    ],
    allocator: Annotated[SlugAllocator, Depends(get_slug_allocator)],
    probe: Annotated[ProvisioningProbe, Depends(get_provisioning_probe)],
) -> ProvisioningService:
    """Get ProvisioningService instance.

    Each registration gets its own switchboard; the engine registry and
    the administrative engine are process-wide.

    Returns:
        ProvisioningService instance
    """
    settings = get_tenancy_settings()
    engines = get_tenant_engine_registry()
    return ProvisioningService(
        session=session,
        company_repository=company_repo,
        details_repository=details_repo,
        slug_allocator=allocator,
        database_admin=PostgresDatabaseAdministrator(get_admin_engine(), engines),
        schema_manager=TenantSchemaManager(),
        switchboard=ConnectionSwitchboard(engines),
        user_repository_factory=TenantUserRepository,
        database_prefix=settings.database_prefix,
        trial_days=settings.trial_days,
        verify_connection=settings.verify_connection_on_activate,
        probe=probe,
    )
