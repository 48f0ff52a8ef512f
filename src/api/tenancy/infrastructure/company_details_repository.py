"""PostgreSQL implementation of ICompanyDetailsRepository."""

from __future__ import annotations

from dataclasses import fields

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import CompanyDetails
from tenancy.domain.value_objects import CompanyId
from tenancy.infrastructure.models import CompanyDetailsModel
from tenancy.ports.repositories import ICompanyDetailsRepository

_COLUMNS = tuple(
    f.name for f in fields(CompanyDetails) if f.name not in ("company_id", "metadata")
)


class CompanyDetailsRepository(ICompanyDetailsRepository):
    """Repository for the company_details table (landlord database)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_company(self, company_id: CompanyId) -> CompanyDetails | None:
        model = await self._get_model(company_id.value)
        if model is None:
            return None
        return self._to_domain(model)

    async def save(self, details: CompanyDetails) -> CompanyDetails:
        """Upsert the details row for a company."""
        model = await self._get_model(details.company_id.value)
        if model is None:
            model = CompanyDetailsModel(company_id=details.company_id.value)
            self._session.add(model)

        for column in _COLUMNS:
            setattr(model, column, getattr(details, column))
        model.metadata_ = dict(details.metadata)

        await self._session.flush()
        return self._to_domain(model)

    async def _get_model(self, company_id: str) -> CompanyDetailsModel | None:
        stmt = select(CompanyDetailsModel).where(
            CompanyDetailsModel.company_id == company_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: CompanyDetailsModel) -> CompanyDetails:
        values = {column: getattr(model, column) for column in _COLUMNS}
        values["business_hours"] = dict(values["business_hours"] or {})
        values["additional_settings"] = dict(values["additional_settings"] or {})
        return CompanyDetails(
            company_id=CompanyId(value=model.company_id),
            metadata=dict(model.metadata_ or {}),
            **values,
        )
