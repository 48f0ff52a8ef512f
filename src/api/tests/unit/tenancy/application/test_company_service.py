"""Unit tests for CompanyService (account settings)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tenancy.application.services import CompanyService
from tenancy.domain.aggregates import CompanyDetails
from tenancy.domain.exceptions import ImmutableCompanyFieldError
from tenancy.domain.value_objects import CompanyId
from tenancy.ports.exceptions import CompanyNotFoundError


@pytest.fixture
def mock_session():
    return AsyncMock()


@pytest.fixture
def details_repository():
    repository = AsyncMock()
    repository.get_for_company.return_value = None
    repository.save.side_effect = lambda details: details
    return repository


@pytest.fixture
def probe():
    return MagicMock()


@pytest.fixture
def service(mock_session, company_repository, details_repository, probe):
    return CompanyService(
        session=mock_session,
        company_repository=company_repository,
        details_repository=details_repository,
        probe=probe,
    )


@pytest.fixture
def company(company_repository, make_company):
    company = make_company("ahmed-tech", city="Alexandria")
    company_repository.add(company)
    return company


class TestGetCompany:
    @pytest.mark.asyncio
    async def test_returns_company(self, service, company):
        assert await service.get_company(company.id) is company

    @pytest.mark.asyncio
    async def test_missing_company(self, service):
        with pytest.raises(CompanyNotFoundError):
            await service.get_company(CompanyId.generate())


class TestUpdateCompany:
    """Tests for editing the company profile."""

    @pytest.mark.asyncio
    async def test_writes_changed_fields(self, service, company, mock_session, probe):
        updated = await service.update_company(
            company.id, {"city": "Cairo", "phone": "+20123"}
        )

        assert updated.city == "Cairo"
        assert updated.phone == "+20123"
        mock_session.commit.assert_awaited_once()
        probe.company_settings_updated.assert_called_once_with(
            company.id.value, ["city", "phone"]
        )

    @pytest.mark.asyncio
    async def test_unchanged_values_skip_commit(self, service, company, mock_session):
        await service.update_company(company.id, {"city": "Alexandria"})

        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_routing_identity(self, service, company, mock_session, probe):
        with pytest.raises(ImmutableCompanyFieldError):
            await service.update_company(
                company.id, {"slug": "hijack", "database": "tenant_other"}
            )

        assert company.slug == "ahmed-tech"
        mock_session.commit.assert_not_awaited()
        probe.immutable_fields_rejected.assert_called_once_with(
            company.id.value, ["database", "slug"]
        )


class TestCompanyDetails:
    """Tests for the extended profile."""

    @pytest.mark.asyncio
    async def test_empty_details_when_none_saved(self, service, company):
        details = await service.get_details(company.id)

        assert details.company_id == company.id
        assert details.description is None
        assert details.currency == "USD"

    @pytest.mark.asyncio
    async def test_update_creates_details(
        self, service, company, details_repository, mock_session
    ):
        details = await service.update_details(
            company.id, {"description": "CRM", "founded_year": 2019}
        )

        assert details.description == "CRM"
        details_repository.save.assert_awaited_once()
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_existing_details(self, service, company, details_repository):
        details_repository.get_for_company.return_value = CompanyDetails(
            company_id=company.id, description="Old"
        )

        details = await service.update_details(company.id, {"description": "New"})

        assert details.description == "New"

    @pytest.mark.asyncio
    async def test_update_for_missing_company(self, service, details_repository):
        with pytest.raises(CompanyNotFoundError):
            await service.update_details(CompanyId.generate(), {"description": "x"})

        details_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_unknown_fields(self, service, company, details_repository):
        with pytest.raises(ImmutableCompanyFieldError):
            await service.update_details(company.id, {"company_id": "other"})

        details_repository.save.assert_not_awaited()
