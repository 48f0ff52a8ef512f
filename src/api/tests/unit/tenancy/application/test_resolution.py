"""Unit tests for TenantResolver.

The registry is an in-memory repository; no database is involved.
"""

from unittest.mock import MagicMock

import pytest

from infrastructure.settings import ResolutionStrategy
from tenancy.application.exceptions import (
    MalformedTenantIdentifierError,
    TenantInactiveError,
    TenantNotFoundError,
)
from tenancy.application.resolution import (
    ResolutionSource,
    TenantResolver,
    first_path_segment,
    normalize_host,
)
from tenancy.domain.value_objects import CompanyStatus

RESERVED = ("registration", "health", "docs", "openapi.json")


@pytest.fixture
def probe():
    return MagicMock()


@pytest.fixture
def path_resolver(company_repository, probe):
    return TenantResolver(
        company_repository,
        strategy=ResolutionStrategy.PATH,
        root_domain="salesdesk.test",
        reserved_prefixes=RESERVED,
        probe=probe,
    )


@pytest.fixture
def host_resolver(company_repository, probe):
    return TenantResolver(
        company_repository,
        strategy=ResolutionStrategy.HOST,
        root_domain="salesdesk.test",
        reserved_prefixes=RESERVED,
        probe=probe,
    )


class TestHelpers:
    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("SalesDesk.Test:8000", "salesdesk.test"),
            ("[::1]:8000", "::1"),
            ("  localhost ", "localhost"),
            (None, ""),
            ("", ""),
        ],
    )
    def test_normalize_host(self, host, expected):
        assert normalize_host(host) == expected

    def test_first_path_segment(self):
        assert first_path_segment("/ahmed-tech/api/account") == "ahmed-tech"
        assert first_path_segment("/") == ""


class TestPathResolution:
    """Tests for the canonical /{slug}/api/... strategy."""

    @pytest.mark.asyncio
    async def test_resolves_company_from_first_segment(
        self, path_resolver, company_repository, make_company, probe
    ):
        company = make_company("ahmed-tech")
        company_repository.add(company)

        outcome = await path_resolver.resolve("localhost:8000", "/ahmed-tech/api/account")

        assert outcome.company is company
        assert outcome.identifier == "ahmed-tech"
        assert outcome.source == ResolutionSource.PATH
        assert outcome.is_landlord is False
        probe.tenant_resolved.assert_called_once_with(
            company.id.value, "ahmed-tech", "path"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/", "", "/registration/check-slug", "/health", "/DOCS"])
    async def test_landlord_routes(self, path_resolver, company_repository, path):
        """Empty and reserved first segments never touch the registry."""
        outcome = await path_resolver.resolve("salesdesk.test", path)

        assert outcome.is_landlord is True
        assert company_repository.lookups == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("segment", ["Ahmed_Tech", "ab", "-acme", "acme--co"])
    async def test_malformed_slug(self, path_resolver, company_repository, segment):
        with pytest.raises(MalformedTenantIdentifierError) as exc_info:
            await path_resolver.resolve("localhost", f"/{segment}/api/account")

        assert exc_info.value.identifier == segment
        assert exc_info.value.code == "tenant_identifier_malformed"
        assert company_repository.lookups == []

    @pytest.mark.asyncio
    async def test_unknown_slug(self, path_resolver):
        with pytest.raises(TenantNotFoundError) as exc_info:
            await path_resolver.resolve("localhost", "/unknown-co/api/account")

        assert exc_info.value.identifier == "unknown-co"

    @pytest.mark.asyncio
    async def test_reserved_word_is_not_found_rather_than_malformed(self, path_resolver):
        """A reserved word is well formed; it simply never names a company."""
        with pytest.raises(TenantNotFoundError):
            await path_resolver.resolve("localhost", "/admin/api/account")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status", [CompanyStatus.SUSPENDED, CompanyStatus.CANCELLED, CompanyStatus.PENDING]
    )
    async def test_inactive_company(
        self, path_resolver, company_repository, make_company, status
    ):
        company_repository.add(make_company("ahmed-tech", status=status))

        with pytest.raises(TenantInactiveError) as exc_info:
            await path_resolver.resolve("localhost", "/ahmed-tech/api/account")

        assert exc_info.value.status == status.value

    @pytest.mark.asyncio
    async def test_custom_domain_host(
        self, path_resolver, company_repository, make_company
    ):
        """A foreign host is looked up as a custom domain before the path."""
        company = make_company("acme", domain="crm.acme.com")
        company_repository.add(company)

        outcome = await path_resolver.resolve("CRM.acme.com:443", "/api/account")

        assert outcome.company is company
        assert outcome.source == ResolutionSource.DOMAIN
        assert company_repository.lookups == [("domain", "crm.acme.com")]

    @pytest.mark.asyncio
    async def test_unknown_custom_domain(self, path_resolver):
        with pytest.raises(TenantNotFoundError):
            await path_resolver.resolve("crm.unknown.com", "/acme/api/account")


class TestHostResolution:
    """Tests for the legacy {sub}.{root} strategy."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("host", ["salesdesk.test", "localhost:8000", "[::1]:8000"])
    async def test_main_host_is_landlord(self, host_resolver, host):
        outcome = await host_resolver.resolve(host, "/registration/options")

        assert outcome.is_landlord is True

    @pytest.mark.asyncio
    async def test_resolves_subdomain(
        self, host_resolver, company_repository, make_company
    ):
        company = make_company("ahmed-tech")
        company_repository.add(company)

        outcome = await host_resolver.resolve("ahmed-tech.salesdesk.test", "/api/account")

        assert outcome.company is company
        assert outcome.source == ResolutionSource.SUBDOMAIN
        assert company_repository.lookups == [("subdomain", "ahmed-tech")]

    @pytest.mark.asyncio
    async def test_missing_host(self, host_resolver):
        with pytest.raises(MalformedTenantIdentifierError):
            await host_resolver.resolve(None, "/")

    @pytest.mark.asyncio
    async def test_malformed_subdomain(self, host_resolver, company_repository):
        with pytest.raises(MalformedTenantIdentifierError):
            await host_resolver.resolve("bad_sub.salesdesk.test", "/")

        assert company_repository.lookups == []

    @pytest.mark.asyncio
    async def test_custom_domain(self, host_resolver, company_repository, make_company):
        company = make_company("acme", domain="crm.acme.com")
        company_repository.add(company)

        outcome = await host_resolver.resolve("crm.acme.com", "/")

        assert outcome.source == ResolutionSource.DOMAIN
        assert outcome.company is company

    @pytest.mark.asyncio
    async def test_inactive_subdomain(
        self, host_resolver, company_repository, make_company
    ):
        company_repository.add(make_company("acme", status=CompanyStatus.SUSPENDED))

        with pytest.raises(TenantInactiveError):
            await host_resolver.resolve("acme.salesdesk.test", "/")
