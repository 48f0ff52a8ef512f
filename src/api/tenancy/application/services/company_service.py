"""Company account application service.

Handles the account settings a company owner edits about their own
company. All reads and writes go to the landlord registry.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.application.observability import (
    CompanyServiceProbe,
    DefaultCompanyServiceProbe,
)
from tenancy.domain.aggregates import Company, CompanyDetails
from tenancy.domain.exceptions import ImmutableCompanyFieldError
from tenancy.domain.value_objects import CompanyId
from tenancy.ports.exceptions import CompanyNotFoundError
from tenancy.ports.repositories import ICompanyDetailsRepository, ICompanyRepository


class CompanyService:
    """Application service for company account settings."""

    def __init__(
        self,
        session: AsyncSession,
        company_repository: ICompanyRepository,
        details_repository: ICompanyDetailsRepository,
        probe: CompanyServiceProbe | None = None,
    ):
        """Initialize CompanyService with dependencies.

        Args:
            session: Landlord database session for transaction management
            company_repository: Company registry bound to ``session``
            details_repository: Company details store bound to ``session``
            probe: Optional domain probe for observability
        """
        self._session = session
        self._companies = company_repository
        self._details = details_repository
        self._probe = probe or DefaultCompanyServiceProbe()

    async def get_company(self, company_id: CompanyId) -> Company:
        """Retrieve a company regardless of status.

        Raises:
            CompanyNotFoundError: If the company does not exist
        """
        company = await self._companies.get_by_id(company_id)
        if company is None:
            raise CompanyNotFoundError(company_id.value)
        return company

    async def update_company(
        self, company_id: CompanyId, changes: dict[str, Any]
    ) -> Company:
        """Apply account settings changes to a company.

        Only fields that differ from the stored values are written.

        Raises:
            CompanyNotFoundError: If the company does not exist
            ImmutableCompanyFieldError: If a change targets a routing or
                lifecycle field
        """
        company = await self.get_company(company_id)
        try:
            applied = company.apply_changes(changes)
        except ImmutableCompanyFieldError as e:
            self._probe.immutable_fields_rejected(company_id.value, sorted(e.fields))
            raise

        if not applied:
            return company

        company = await self._companies.update_fields(company_id, applied)
        await self._session.commit()
        self._probe.company_settings_updated(company_id.value, sorted(applied))
        return company

    async def get_details(self, company_id: CompanyId) -> CompanyDetails:
        """Return the extended profile, or an empty one if none was saved."""
        details = await self._details.get_for_company(company_id)
        return details or CompanyDetails(company_id=company_id)

    async def update_details(
        self, company_id: CompanyId, changes: dict[str, Any]
    ) -> CompanyDetails:
        """Create or update the extended profile of a company.

        Raises:
            CompanyNotFoundError: If the company does not exist
            ImmutableCompanyFieldError: If a change targets an unknown field
        """
        await self.get_company(company_id)
        details = await self.get_details(company_id)
        try:
            applied = details.apply_changes(changes)
        except ImmutableCompanyFieldError as e:
            self._probe.immutable_fields_rejected(company_id.value, sorted(e.fields))
            raise

        details = await self._details.save(details)
        await self._session.commit()
        self._probe.company_details_updated(company_id.value, sorted(applied))
        return details
