"""Company registry dependencies for FastAPI routes.

Registry access always goes through the landlord session, even inside
tenant-scoped routes.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Annotated, Any

from fastapi import Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_landlord_session
from infrastructure.settings import get_tenancy_settings
from shared_kernel.middleware import TenantContext
from shared_kernel.middleware.observability import TenantContextProbe
from tenancy.application.observability import (
    CompanyServiceProbe,
    DefaultCompanyServiceProbe,
)
from tenancy.application.services import CompanyService
from tenancy.dependencies.tenant_context import (
    get_tenant_context,
    get_tenant_context_probe,
)
from tenancy.domain.aggregates import Company
from tenancy.domain.value_objects import CompanyId
from tenancy.infrastructure.company_details_repository import (
    CompanyDetailsRepository,
)
from tenancy.infrastructure.company_repository import CompanyRepository
from tenancy.presentation.errors import ApiError


def get_company_repository(
    session: Annotated[AsyncSession, Depends(get_landlord_session)],
) -> CompanyRepository:
    """Get CompanyRepository instance.

    Args:
        session: Landlord database session

    Returns:
        CompanyRepository bound to the landlord database
    """
    return CompanyRepository(session=session)


def get_company_details_repository(
    session: Annotated[AsyncSession, Depends(get_landlord_session)],
) -> CompanyDetailsRepository:
    return CompanyDetailsRepository(session=session)


def get_company_service_probe() -> CompanyServiceProbe:
    """Get CompanyServiceProbe instance.

    Returns:
        DefaultCompanyServiceProbe instance for observability
    """
    return DefaultCompanyServiceProbe()


def get_company_service(
    session: Annotated[AsyncSession, Depends(get_landlord_session)],
    company_repo: Annotated[CompanyRepository, Depends(get_company_repository)],
    details_repo: Annotated[
        CompanyDetailsRepository, Depends(get_company_details_repository)
    ],
    probe: Annotated[CompanyServiceProbe, Depends(get_company_service_probe)],
) -> CompanyService:
    """Get CompanyService instance.

    Args:
        session: Landlord session (shared with the repositories via
            FastAPI dependency caching)
        company_repo: Company registry repository
        details_repo: Company details repository
        probe: Company service probe for observability

    Returns:
        CompanyService instance
    """
    return CompanyService(
        session=session,
        company_repository=company_repo,
        details_repository=details_repo,
        probe=probe,
    )


async def get_current_company(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    company_repo: Annotated[CompanyRepository, Depends(get_company_repository)],
) -> Company:
    """Load the company the request was resolved to.

    Raises:
        ApiError: 404 if the company disappeared after resolution
    """
    company = await company_repo.get_by_id(CompanyId(value=context.company_id))
    if company is None:
        raise ApiError(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found",
            code="tenant_not_found",
        )
    return company


def require_active_subscription(
    company: Annotated[Company, Depends(get_current_company)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> Company:
    """Refuse companies that are past trial, grace period and subscription.

    Raises:
        ApiError: 403 with the trial and subscription end dates
    """
    grace_days = get_tenancy_settings().grace_days
    if company.has_active_subscription(grace_days=grace_days):
        return company

    probe.subscription_inactive(company.id.value)
    raise ApiError(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Your subscription has expired",
        code="subscription_inactive",
        extra={
            "trial_ends_at": _isoformat(company.trial_ends_at),
            "subscription_ends_at": _isoformat(company.subscription_ends_at),
        },
    )


def require_module(module: str) -> Callable[..., Coroutine[Any, Any, Company]]:
    """Build a dependency refusing companies without ``module`` enabled.

    Usage:
        @router.get("/leads", dependencies=[Depends(require_module("sales"))])
    """

    async def _require_module(
        company: Annotated[Company, Depends(get_current_company)],
        probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
    ) -> Company:
        if not company.has_module(module):
            probe.module_disabled(company.id.value, module)
            raise ApiError(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"The {module} module is not enabled for this company",
                code="module_disabled",
                extra={"module": module},
            )
        return company

    return _require_module


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
