"""HTTP routes for company registration (landlord routes, no tenant)."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from infrastructure.settings import get_tenancy_settings
from tenancy.application.exceptions import (
    DatabaseCreateFailedError,
    InvalidSlugError,
    PostSetupFailedError,
    RegistryWriteFailedError,
    SlugConflictError,
)
from tenancy.application.services import ProvisioningService, SlugAllocator
from tenancy.dependencies.provisioning import (
    get_provisioning_service,
    get_slug_allocator,
)
from tenancy.domain import slugs
from tenancy.domain.authorization import Role
from tenancy.domain.exceptions import ModuleNotAvailableError
from tenancy.domain.value_objects import (
    INDUSTRY_OPTIONS,
    MODULE_CATALOGUE,
    STAFF_COUNT_OPTIONS,
    CompanyStatus,
    Plan,
)
from tenancy.presentation.errors import ApiError
from tenancy.presentation.registration.models import (
    CheckSlugRequest,
    CheckSlugResponse,
    ModuleResponse,
    RegisterRequest,
    RegisterResponse,
    RegistrationOptionsResponse,
    SuggestSlugRequest,
    SuggestSlugResponse,
)
from tenancy.presentation.routing import tenant_api_base

router = APIRouter(
    prefix="/registration",
    tags=["registration"],
)


@router.get("/options")
async def get_registration_options() -> RegistrationOptionsResponse:
    """List the modules, plans, industries, staff counts and roles on offer."""
    return RegistrationOptionsResponse(
        modules=[ModuleResponse.from_domain(info) for info in MODULE_CATALOGUE.values()],
        plans=[plan.value for plan in Plan],
        industries=dict(INDUSTRY_OPTIONS),
        staff_counts=dict(STAFF_COUNT_OPTIONS),
        roles=[role.value for role in Role],
    )


@router.post("/suggest-slug")
async def suggest_slug(
    request: SuggestSlugRequest,
    allocator: Annotated[SlugAllocator, Depends(get_slug_allocator)],
) -> SuggestSlugResponse:
    """Suggest available slugs derived from a company name."""
    suggestions = await allocator.suggest(request.company_name, count=request.count)
    return SuggestSlugResponse(suggestions=suggestions)


@router.post("/check-slug")
async def check_slug(
    request: CheckSlugRequest,
    allocator: Annotated[SlugAllocator, Depends(get_slug_allocator)],
) -> CheckSlugResponse:
    """Check whether a slug can be used for a new company."""
    slug = request.slug.strip().lower()
    reason = slugs.format_error(slug)
    if reason is None and not await allocator.is_available(slug):
        reason = "This slug is already taken"
    return CheckSlugResponse(slug=slug, available=reason is None, reason=reason)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    http_request: Request,
    service: Annotated[ProvisioningService, Depends(get_provisioning_service)],
) -> RegisterResponse:
    """Register a company, provision its database and create its owner.

    Raises:
        ApiError: 409 if the requested slug is taken or reserved
        ApiError: 422 if the slug is malformed or a module is not offered
        ApiError: 500 if provisioning failed; after registration the
            payload names the failed step and the company status
    """
    try:
        result = await service.provision(request.to_provisioning_request())
    except SlugConflictError as e:
        raise ApiError(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.reason,
            code=e.code,
            extra={"slug": e.slug},
        ) from e
    except InvalidSlugError as e:
        raise ApiError(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.reason,
            code=e.code,
            extra={"slug": e.slug},
        ) from e
    except ModuleNotAvailableError as e:
        raise ApiError(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Module '{e.module}' is not available",
            code="module_not_available",
        ) from e
    except (DatabaseCreateFailedError, RegistryWriteFailedError) as e:
        raise ApiError(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register company",
            code=e.code,
        ) from e
    except PostSetupFailedError as e:
        raise ApiError(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Company was registered but its setup did not complete",
            code=e.code,
            extra={
                "company_id": e.company_id,
                "step": e.step,
                "status": (
                    CompanyStatus.SUSPENDED if e.suspended else CompanyStatus.ACTIVE
                ).value,
            },
        ) from e

    api_base = tenant_api_base(
        result.slug, get_tenancy_settings(), scheme=http_request.url.scheme
    )
    return RegisterResponse.from_result(result, api_base=api_base)
