"""Ports (interfaces) for the tenancy bounded context.

Ports define the contracts for repositories and provisioning services
without specifying implementation details. This allows for dependency
inversion and makes the domain layer independent of infrastructure.
"""

from tenancy.ports.exceptions import (
    CompanyNotFoundError,
    DuplicateCompanyError,
    RegistryError,
)
from tenancy.ports.provisioning import IDatabaseAdministrator, ITenantSchemaManager
from tenancy.ports.repositories import (
    ICompanyDetailsRepository,
    ICompanyRepository,
    ITenantUserRepository,
)

__all__ = [
    "CompanyNotFoundError",
    "DuplicateCompanyError",
    "ICompanyDetailsRepository",
    "ICompanyRepository",
    "IDatabaseAdministrator",
    "ITenantSchemaManager",
    "ITenantUserRepository",
    "RegistryError",
]
