"""Tenant database schema and seed management.

Tenant databases carry a small fixed schema (users, roles, permissions and
API tokens) defined on ``TenantBase``. The schema is applied with
``metadata.create_all`` through the session of the current tenant binding,
so migrating a company is: activate its database, migrate, reset.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from infrastructure.database.models import TenantBase
from tenancy.domain.authorization import ROLE_PERMISSIONS, Permission
from tenancy.infrastructure.models import PermissionModel, RoleModel
from tenancy.ports.provisioning import ITenantSchemaManager


class TenantSchemaManager(ITenantSchemaManager):
    """Applies TenantBase metadata and seeds the role policy table."""

    async def migrate(self, session: AsyncSession, fresh: bool = False) -> None:
        """Create tenant tables; with ``fresh``, drop them first.

        Runs on the session's connection so it joins the caller's
        transaction.
        """

        def _apply(sync_session: Session) -> None:
            connection = sync_session.connection()
            if fresh:
                TenantBase.metadata.drop_all(connection)
            TenantBase.metadata.create_all(connection)

        await session.run_sync(_apply)

    async def seed_roles(self, session: AsyncSession) -> int:
        """Insert missing permissions and roles from the policy table.

        Returns:
            Number of roles in the policy table
        """
        result = await session.execute(select(PermissionModel))
        permissions = {p.name: p for p in result.scalars().all()}
        for permission in Permission:
            if permission.value not in permissions:
                model = PermissionModel(name=permission.value)
                session.add(model)
                permissions[permission.value] = model
        await session.flush()

        result = await session.execute(select(RoleModel))
        roles = {r.name: r for r in result.scalars().all()}
        for role, granted in ROLE_PERMISSIONS.items():
            role_model = roles.get(role.value)
            if role_model is None:
                role_model = RoleModel(name=role.value, permissions=[])
                session.add(role_model)

            current = {p.name for p in role_model.permissions}
            for permission in sorted(granted):
                if permission.value not in current:
                    role_model.permissions.append(permissions[permission.value])
        await session.flush()

        return len(ROLE_PERMISSIONS)
