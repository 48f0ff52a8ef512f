"""Repository protocols (ports) for the tenancy bounded context.

The company registry lives in the landlord database; users and their
credentials live in each tenant database. Implementations receive the
session for the right database from their caller and never choose it
themselves.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from tenancy.domain.aggregates import Company, CompanyDetails, User
from tenancy.domain.value_objects import CompanyId, CompanyStatus, UserId


@runtime_checkable
class ICompanyRepository(Protocol):
    """Repository for Company aggregate persistence (landlord database).

    Routing lookups filter to ACTIVE companies unless ``active_only`` is
    False. Soft-deleted companies are never returned by lookups but still
    count for the availability checks.
    """

    async def get_by_id(self, company_id: CompanyId) -> Company | None:
        """Retrieve a company by its ID regardless of status."""
        ...

    async def get_by_slug(self, slug: str, active_only: bool = True) -> Company | None:
        """Retrieve a company by slug.

        Args:
            slug: The company slug
            active_only: Restrict the lookup to ACTIVE companies

        Returns:
            The Company aggregate, or None if not found
        """
        ...

    async def get_by_subdomain(
        self, subdomain: str, active_only: bool = True
    ) -> Company | None:
        """Retrieve a company by subdomain."""
        ...

    async def get_by_domain(self, domain: str, active_only: bool = True) -> Company | None:
        """Retrieve a company by custom domain."""
        ...

    async def list_active(self) -> list[Company]:
        """List ACTIVE companies ordered by creation time."""
        ...

    async def list_all(self, status: CompanyStatus | None = None) -> list[Company]:
        """List companies of any status, optionally filtered by one status."""
        ...

    async def create(self, company: Company) -> Company:
        """Insert a new company.

        Raises:
            DuplicateCompanyError: If slug, subdomain, domain or database is taken
        """
        ...

    async def update_fields(
        self, company_id: CompanyId, changes: dict[str, Any]
    ) -> Company:
        """Write column changes for a company and return the updated aggregate.

        Raises:
            CompanyNotFoundError: If the company does not exist
        """
        ...

    async def set_status(self, company_id: CompanyId, status: CompanyStatus) -> None:
        """Change a company's lifecycle status.

        Raises:
            CompanyNotFoundError: If the company does not exist
        """
        ...

    async def slug_exists(self, slug: str) -> bool:
        """Whether any company, deleted or not, holds the slug."""
        ...

    async def subdomain_exists(self, subdomain: str) -> bool:
        """Whether any company, deleted or not, holds the subdomain."""
        ...

    async def database_name_taken(self, database: str) -> bool:
        """Whether any company, deleted or not, claims the database name."""
        ...

    async def soft_delete(self, company_id: CompanyId) -> None:
        """Mark a company deleted without removing the row.

        Raises:
            CompanyNotFoundError: If the company does not exist
        """
        ...


@runtime_checkable
class ICompanyDetailsRepository(Protocol):
    """Repository for the optional CompanyDetails row (landlord database)."""

    async def get_for_company(self, company_id: CompanyId) -> CompanyDetails | None:
        """Retrieve details for a company, or None if none were recorded."""
        ...

    async def save(self, details: CompanyDetails) -> CompanyDetails:
        """Insert or update the details row for ``details.company_id``."""
        ...


@runtime_checkable
class ITenantUserRepository(Protocol):
    """Repository for users and API tokens inside one tenant database."""

    async def add(self, user: User, password_hash: str) -> None:
        """Insert a new user with a hashed password."""
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user with role names loaded."""
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by (lowercased) email."""
        ...

    async def assign_role(self, user_id: UserId, role: str) -> None:
        """Grant an existing role to a user.

        Raises:
            UserNotFoundError: If the user does not exist
            RoleNotFoundError: If the role was never seeded
        """
        ...

    async def add_token(
        self, user_id: UserId, name: str, prefix: str, token_hash: str
    ) -> None:
        """Store a hashed API token for a user."""
        ...

    async def find_token_candidates(self, prefix: str) -> list[tuple[str, UserId]]:
        """Return (token_hash, user_id) pairs whose stored prefix matches."""
        ...
