"""HTTP routes for a company's own account settings (tenant routes)."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from shared_kernel.middleware import TenantContext
from tenancy.application.services import CompanyService
from tenancy.dependencies.authentication import get_current_user, require_permission
from tenancy.dependencies.company import get_company_service
from tenancy.dependencies.tenant_context import get_tenant_context
from tenancy.domain.authorization import Permission
from tenancy.domain.exceptions import ImmutableCompanyFieldError
from tenancy.domain.value_objects import CompanyId
from tenancy.ports.exceptions import CompanyNotFoundError
from tenancy.presentation.account.models import (
    CompanyDetailsResponse,
    CompanyResponse,
    UpdateCompanyDetailsRequest,
    UpdateCompanyRequest,
)
from tenancy.presentation.errors import ApiError

router = APIRouter(
    prefix="/account",
    tags=["account"],
    dependencies=[Depends(get_current_user)],
)


def _company_id(context: TenantContext) -> CompanyId:
    return CompanyId(value=context.company_id)


def _not_found() -> ApiError:
    return ApiError(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Company not found",
        code="tenant_not_found",
    )


def _immutable(error: ImmutableCompanyFieldError) -> ApiError:
    return ApiError(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail="Some fields cannot be updated",
        code="immutable_fields",
        extra={"fields": sorted(error.fields)},
    )


@router.get("/company")
async def get_company(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service)],
) -> CompanyResponse:
    """Get the account settings of the current company."""
    try:
        company = await service.get_company(_company_id(context))
    except CompanyNotFoundError as e:
        raise _not_found() from e
    return CompanyResponse.from_domain(company)


@router.patch(
    "/company",
    dependencies=[Depends(require_permission(Permission.EDIT_COMPANY_INFO))],
)
async def update_company(
    request: UpdateCompanyRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service)],
) -> CompanyResponse:
    """Update the account settings of the current company.

    Raises:
        ApiError: 403 without the edit_company_info permission
        ApiError: 404 if the company no longer exists
    """
    try:
        company = await service.update_company(_company_id(context), request.changes())
    except CompanyNotFoundError as e:
        raise _not_found() from e
    except ImmutableCompanyFieldError as e:
        raise _immutable(e) from e
    return CompanyResponse.from_domain(company)


@router.get("/company-details")
async def get_company_details(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service)],
) -> CompanyDetailsResponse:
    """Get the extended profile of the current company."""
    details = await service.get_details(_company_id(context))
    return CompanyDetailsResponse.from_domain(details)


@router.patch(
    "/company-details",
    dependencies=[Depends(require_permission(Permission.MANAGE_COMPANY_DETAILS))],
)
async def update_company_details(
    request: UpdateCompanyDetailsRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service)],
) -> CompanyDetailsResponse:
    """Create or update the extended profile of the current company."""
    try:
        details = await service.update_details(_company_id(context), request.changes())
    except CompanyNotFoundError as e:
        raise _not_found() from e
    except ImmutableCompanyFieldError as e:
        raise _immutable(e) from e
    return CompanyDetailsResponse.from_domain(details)
