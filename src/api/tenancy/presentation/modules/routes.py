"""HTTP routes for the modules enabled for the current company."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from tenancy.dependencies.authentication import get_current_user
from tenancy.dependencies.company import require_active_subscription, require_module
from tenancy.domain.aggregates import Company
from tenancy.domain.value_objects import MODULE_CATALOGUE, Module
from tenancy.presentation.registration.models import ModuleResponse

router = APIRouter(
    prefix="/modules",
    tags=["modules"],
    dependencies=[Depends(get_current_user)],
)


@router.get("")
async def list_enabled_modules(
    company: Annotated[Company, Depends(require_active_subscription)],
) -> list[ModuleResponse]:
    """List the catalogue entries of the modules the company has enabled.

    Raises:
        ApiError: 401 if unauthenticated
        ApiError: 403 if the subscription is no longer active
    """
    return [
        ModuleResponse.from_domain(module)
        for module in company.enabled_module_catalogue()
    ]


@router.get(
    "/sales",
    dependencies=[
        Depends(require_active_subscription),
        Depends(require_module(Module.SALES.value)),
    ],
)
async def get_sales_module() -> ModuleResponse:
    """Entry point of the sales workspace.

    Raises:
        ApiError: 403 if the subscription is inactive or sales is not enabled
    """
    return ModuleResponse.from_domain(MODULE_CATALOGUE[Module.SALES])
