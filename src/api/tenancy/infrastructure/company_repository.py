"""PostgreSQL implementation of ICompanyRepository.

The repository always operates on a landlord session: the company registry
is never read through a tenant binding.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import ColumnElement, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Company
from tenancy.domain.value_objects import CompanyId, CompanyStatus, Plan
from tenancy.infrastructure.models import CompanyModel
from tenancy.infrastructure.observability import (
    CompanyRepositoryProbe,
    DefaultCompanyRepositoryProbe,
)
from tenancy.ports.exceptions import CompanyNotFoundError, DuplicateCompanyError
from tenancy.ports.repositories import ICompanyRepository

_UNIQUE_FIELDS = ("slug", "subdomain", "database", "domain")

_PROFILE_COLUMNS = (
    "owner_name",
    "owner_email",
    "owner_phone",
    "email",
    "business_email",
    "phone",
    "industry",
    "staff_count",
    "website",
    "country",
    "city",
    "address",
    "legal_id",
    "tax_id",
    "logo",
)


class CompanyRepository(ICompanyRepository):
    """Repository managing the companies table in the landlord database."""

    def __init__(
        self,
        session: AsyncSession,
        probe: CompanyRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a landlord session.

        Args:
            session: AsyncSession bound to the landlord database
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultCompanyRepositoryProbe()

    async def get_by_id(self, company_id: CompanyId) -> Company | None:
        model = await self._get_model(CompanyModel.id == company_id.value)
        return self._to_domain(model, identifier=company_id.value)

    async def get_by_slug(self, slug: str, active_only: bool = True) -> Company | None:
        model = await self._get_model(CompanyModel.slug == slug, active_only)
        return self._to_domain(model, identifier=slug)

    async def get_by_subdomain(
        self, subdomain: str, active_only: bool = True
    ) -> Company | None:
        model = await self._get_model(CompanyModel.subdomain == subdomain, active_only)
        return self._to_domain(model, identifier=subdomain)

    async def get_by_domain(self, domain: str, active_only: bool = True) -> Company | None:
        model = await self._get_model(CompanyModel.domain == domain, active_only)
        return self._to_domain(model, identifier=domain)

    async def list_active(self) -> list[Company]:
        return await self.list_all(status=CompanyStatus.ACTIVE)

    async def list_all(self, status: CompanyStatus | None = None) -> list[Company]:
        stmt = (
            select(CompanyModel)
            .where(CompanyModel.deleted_at.is_(None))
            .order_by(CompanyModel.created_at)
        )
        if status is not None:
            stmt = stmt.where(CompanyModel.status == status.value)

        result = await self._session.execute(stmt)
        companies = [self._model_to_domain(m) for m in result.scalars().all()]

        self._probe.companies_listed(len(companies))
        return companies

    async def create(self, company: Company) -> Company:
        """Insert a company after checking every unique attribute.

        The explicit checks give a precise field in the error; the unique
        constraints still catch races between two registrations.

        Raises:
            DuplicateCompanyError: If slug, subdomain, domain or database is taken
        """
        for field in _UNIQUE_FIELDS:
            value = getattr(company, field)
            if value is not None and await self._value_taken(field, value):
                self._probe.duplicate_company(field, value)
                raise DuplicateCompanyError(field, value)

        model = CompanyModel(
            id=company.id.value,
            name=company.name,
            slug=company.slug,
            subdomain=company.subdomain,
            domain=company.domain,
            database=company.database,
            status=company.status.value,
            plan=company.plan.value,
            trial_ends_at=company.trial_ends_at,
            subscription_ends_at=company.subscription_ends_at,
            enabled_modules=list(company.enabled_modules),
            settings=dict(company.settings),
            metadata_=dict(company.metadata),
            **{column: getattr(company, column) for column in _PROFILE_COLUMNS},
        )
        self._session.add(model)

        try:
            await self._session.flush()
        except IntegrityError as e:
            field = next((f for f in _UNIQUE_FIELDS if f"uq_companies_{f}" in str(e)), None)
            if field is None:
                raise
            value = getattr(company, field)
            self._probe.duplicate_company(field, value)
            raise DuplicateCompanyError(field, value) from e

        self._probe.company_created(company.id.value, company.slug, company.database)
        return self._model_to_domain(model)

    async def update_fields(
        self, company_id: CompanyId, changes: dict[str, Any]
    ) -> Company:
        model = await self._require_model(company_id)
        for key, value in changes.items():
            if key == "metadata":
                model.metadata_ = value
            elif key in ("status", "plan"):
                setattr(model, key, str(value))
            else:
                setattr(model, key, value)
        await self._session.flush()

        self._probe.company_updated(company_id.value, sorted(changes))
        return self._model_to_domain(model)

    async def set_status(self, company_id: CompanyId, status: CompanyStatus) -> None:
        model = await self._require_model(company_id)
        model.status = status.value
        await self._session.flush()
        self._probe.company_status_changed(company_id.value, status.value)

    async def slug_exists(self, slug: str) -> bool:
        return await self._value_taken("slug", slug)

    async def subdomain_exists(self, subdomain: str) -> bool:
        return await self._value_taken("subdomain", subdomain)

    async def database_name_taken(self, database: str) -> bool:
        return await self._value_taken("database", database)

    async def soft_delete(self, company_id: CompanyId) -> None:
        model = await self._require_model(company_id)
        model.deleted_at = datetime.now(UTC)
        await self._session.flush()
        self._probe.company_soft_deleted(company_id.value)

    async def _value_taken(self, field: str, value: str) -> bool:
        column = getattr(CompanyModel, field)
        result = await self._session.execute(select(exists().where(column == value)))
        return bool(result.scalar())

    async def _get_model(
        self, criterion: ColumnElement[bool], active_only: bool = False
    ) -> CompanyModel | None:
        stmt = select(CompanyModel).where(criterion, CompanyModel.deleted_at.is_(None))
        if active_only:
            stmt = stmt.where(CompanyModel.status == CompanyStatus.ACTIVE.value)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _require_model(self, company_id: CompanyId) -> CompanyModel:
        model = await self._get_model(CompanyModel.id == company_id.value)
        if model is None:
            self._probe.company_not_found(company_id.value)
            raise CompanyNotFoundError(company_id.value)
        return model

    def _to_domain(self, model: CompanyModel | None, identifier: str) -> Company | None:
        if model is None:
            self._probe.company_not_found(identifier)
            return None
        self._probe.company_retrieved(model.id)
        return self._model_to_domain(model)

    @staticmethod
    def _model_to_domain(model: CompanyModel) -> Company:
        return Company(
            id=CompanyId(value=model.id),
            name=model.name,
            slug=model.slug,
            subdomain=model.subdomain,
            database=model.database,
            status=CompanyStatus(model.status),
            plan=Plan(model.plan),
            domain=model.domain,
            trial_ends_at=model.trial_ends_at,
            subscription_ends_at=model.subscription_ends_at,
            enabled_modules=list(model.enabled_modules or []),
            settings=dict(model.settings or {}),
            metadata=dict(model.metadata_ or {}),
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{column: getattr(model, column) for column in _PROFILE_COLUMNS},
        )
