"""HTTP routes for the authenticated tenant user."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from tenancy.dependencies.authentication import get_current_user
from tenancy.domain.aggregates import User
from tenancy.presentation.auth.models import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(
    user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """Get the user owning the request's bearer token.

    Raises:
        ApiError: 401 if the token is missing or invalid
    """
    return UserResponse.from_domain(user)
