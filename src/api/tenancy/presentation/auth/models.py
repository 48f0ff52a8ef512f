"""Pydantic models for the authenticated user."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tenancy.domain.aggregates import User
from tenancy.domain.authorization import permissions_for


class UserResponse(BaseModel):
    """The authenticated user with the permissions its roles grant."""

    id: str = Field(..., description="User ID (ULID format)")
    name: str
    email: str
    phone: str | None
    roles: list[str]
    permissions: list[str]

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        granted: set[str] = set()
        for role in user.roles:
            granted.update(permission.value for permission in permissions_for(role))
        return cls(
            id=user.id.value,
            name=user.name,
            email=user.email,
            phone=user.phone,
            roles=list(user.roles),
            permissions=sorted(granted),
        )
