"""PostgreSQL implementation of ITenantUserRepository.

Operates on a session bound to one tenant database, handed out by the
connection switchboard of the current unit of work.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import User
from tenancy.domain.value_objects import UserId
from tenancy.infrastructure.models import (
    PersonalAccessTokenModel,
    RoleModel,
    UserModel,
)
from tenancy.ports.exceptions import RoleNotFoundError, UserNotFoundError
from tenancy.ports.repositories import ITenantUserRepository


class TenantUserRepository(ITenantUserRepository):
    """Repository for users, role grants and API tokens of one tenant."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, user: User, password_hash: str) -> None:
        self._session.add(
            UserModel(
                id=user.id.value,
                name=user.name,
                email=user.email,
                phone=user.phone,
                password_hash=password_hash,
                is_active=user.is_active,
                roles=[],
            )
        )
        await self._session.flush()

    async def get_by_id(self, user_id: UserId) -> User | None:
        model = await self._session.get(UserModel, user_id.value)
        return self._to_domain(model) if model is not None else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def assign_role(self, user_id: UserId, role: str) -> None:
        user = await self._session.get(UserModel, user_id.value)
        if user is None:
            raise UserNotFoundError(f"User {user_id.value} not found")

        result = await self._session.execute(select(RoleModel).where(RoleModel.name == role))
        role_model = result.scalar_one_or_none()
        if role_model is None:
            raise RoleNotFoundError(f"Role '{role}' does not exist")

        if role_model not in user.roles:
            user.roles.append(role_model)
        await self._session.flush()

    async def add_token(
        self, user_id: UserId, name: str, prefix: str, token_hash: str
    ) -> None:
        self._session.add(
            PersonalAccessTokenModel(
                user_id=user_id.value,
                name=name,
                prefix=prefix,
                token_hash=token_hash,
            )
        )
        await self._session.flush()

    async def find_token_candidates(self, prefix: str) -> list[tuple[str, UserId]]:
        stmt = select(
            PersonalAccessTokenModel.token_hash, PersonalAccessTokenModel.user_id
        ).where(PersonalAccessTokenModel.prefix == prefix)
        result = await self._session.execute(stmt)
        return [(token_hash, UserId(value=uid)) for token_hash, uid in result.all()]

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            name=model.name,
            email=model.email,
            phone=model.phone,
            is_active=model.is_active,
            roles=sorted(role.name for role in model.roles),
        )
