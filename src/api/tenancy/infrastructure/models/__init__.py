"""SQLAlchemy ORM models for the tenancy bounded context.

Landlord models (companies, company_details) are registered on ``Base``;
tenant models (users, roles, permissions, tokens) on ``TenantBase``.
"""

from tenancy.infrastructure.models.company import CompanyDetailsModel, CompanyModel
from tenancy.infrastructure.models.tenant import (
    PermissionModel,
    PersonalAccessTokenModel,
    RoleModel,
    UserModel,
    role_permissions,
    user_roles,
)

__all__ = [
    "CompanyDetailsModel",
    "CompanyModel",
    "PermissionModel",
    "PersonalAccessTokenModel",
    "RoleModel",
    "UserModel",
    "role_permissions",
    "user_roles",
]
