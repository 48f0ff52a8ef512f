"""Authentication dependencies for tenant routes.

Bearer tokens are verified against the personal access tokens stored in
the tenant database of the current request. The tenant context guard has
already bound that database before any of these dependencies run.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.middleware import TenantContext
from tenancy.application.exceptions import AuthenticationError
from tenancy.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from tenancy.application.services import AuthenticationService
from tenancy.dependencies.tenant_context import get_tenant_context, get_tenant_session
from tenancy.domain.aggregates import User
from tenancy.domain.authorization import Permission, any_role_has_permission
from tenancy.infrastructure.tenant_user_repository import TenantUserRepository
from tenancy.presentation.errors import ApiError

bearer_scheme = HTTPBearer(auto_error=False)


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()


def get_tenant_user_repository(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> TenantUserRepository:
    """Get a user repository on the request's tenant database."""
    return TenantUserRepository(session=session)


def get_authentication_service(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    users: Annotated[TenantUserRepository, Depends(get_tenant_user_repository)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> AuthenticationService:
    return AuthenticationService(
        user_repository=users,
        database=context.database,
        probe=probe,
    )


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> User:
    """Authenticate the request's bearer token against the tenant database.

    Raises:
        ApiError: 401 if the token is missing or invalid
    """
    token = credentials.credentials if credentials is not None else None
    try:
        return await service.authenticate(token)
    except AuthenticationError as e:
        raise ApiError(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            code="unauthenticated",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def require_permission(permission: Permission) -> Callable[..., Coroutine[Any, Any, User]]:
    """Build a dependency refusing users whose roles lack ``permission``.

    Usage:
        @router.patch("/company", dependencies=[Depends(require_permission(...))])
    """

    async def _require_permission(
        user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if not any_role_has_permission(user.roles, permission):
            raise ApiError(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
                code="permission_denied",
                extra={"permission": permission.value},
            )
        return user

    return _require_permission
