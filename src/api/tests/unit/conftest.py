"""Unit test fixtures with in-memory registry and fake tenant engines."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from infrastructure.database.switchboard import TenantEngineRegistry
from infrastructure.settings import DatabaseSettings
from tenancy.domain.aggregates import Company
from tenancy.domain.slugs import database_name_for
from tenancy.domain.value_objects import CompanyId, CompanyStatus, Plan
from tenancy.ports.exceptions import CompanyNotFoundError, DuplicateCompanyError


def build_company(
    slug: str = "ahmed-tech",
    status: CompanyStatus = CompanyStatus.ACTIVE,
    **overrides: Any,
) -> Company:
    now = datetime.now(UTC)
    company = Company(
        id=CompanyId.generate(),
        name=slug.replace("-", " ").title(),
        slug=slug,
        subdomain=slug,
        database=database_name_for(slug),
        status=status,
        plan=Plan.TRIAL,
        trial_ends_at=now + timedelta(days=14),
        enabled_modules=["sales"],
        created_at=now,
        updated_at=now,
    )
    return replace(company, **overrides)


class InMemoryCompanyRepository:
    """Company registry held in a list; soft-deleted rows keep their identifiers."""

    def __init__(self, companies: list[Company] | None = None):
        self.companies: list[Company] = list(companies or [])
        self.deleted: list[Company] = []
        self.lookups: list[tuple[str, str]] = []

    def add(self, *companies: Company) -> None:
        self.companies.extend(companies)

    def _find(self, field: str, value: str, active_only: bool) -> Company | None:
        self.lookups.append((field, value))
        for company in self.companies:
            if getattr(company, field) != value:
                continue
            if active_only and company.status != CompanyStatus.ACTIVE:
                return None
            return company
        return None

    async def get_by_id(self, company_id: CompanyId) -> Company | None:
        return self._find("id", company_id, active_only=False)

    async def get_by_slug(self, slug: str, active_only: bool = True) -> Company | None:
        return self._find("slug", slug, active_only)

    async def get_by_subdomain(
        self, subdomain: str, active_only: bool = True
    ) -> Company | None:
        return self._find("subdomain", subdomain, active_only)

    async def get_by_domain(self, domain: str, active_only: bool = True) -> Company | None:
        return self._find("domain", domain, active_only)

    async def list_active(self) -> list[Company]:
        return await self.list_all(CompanyStatus.ACTIVE)

    async def list_all(self, status: CompanyStatus | None = None) -> list[Company]:
        return [c for c in self.companies if status is None or c.status == status]

    async def create(self, company: Company) -> Company:
        for field in ("slug", "subdomain", "domain", "database"):
            value = getattr(company, field)
            if value is not None and self._taken(field, value):
                raise DuplicateCompanyError(field, value)
        self.companies.append(company)
        return company

    async def update_fields(self, company_id: CompanyId, changes: dict[str, Any]) -> Company:
        company = await self._require(company_id)
        for key, value in changes.items():
            setattr(company, key, value)
        return company

    async def set_status(self, company_id: CompanyId, status: CompanyStatus) -> None:
        company = await self._require(company_id)
        company.status = status

    async def slug_exists(self, slug: str) -> bool:
        return self._taken("slug", slug)

    async def subdomain_exists(self, subdomain: str) -> bool:
        return self._taken("subdomain", subdomain)

    async def database_name_taken(self, database: str) -> bool:
        return self._taken("database", database)

    async def soft_delete(self, company_id: CompanyId) -> None:
        company = await self._require(company_id)
        self.companies.remove(company)
        self.deleted.append(company)

    def _taken(self, field: str, value: str) -> bool:
        return any(getattr(c, field) == value for c in self.companies + self.deleted)

    async def _require(self, company_id: CompanyId) -> Company:
        company = await self.get_by_id(company_id)
        if company is None:
            raise CompanyNotFoundError(company_id.value)
        return company


class FakeConnection:
    def __init__(self, engine: FakeEngine):
        self._engine = engine

    async def __aenter__(self) -> FakeConnection:
        if self._engine.unreachable:
            raise ConnectionRefusedError(f"database {self._engine.database} is down")
        return self

    async def __aexit__(self, *exc_info: object) -> bool:
        return False

    async def execute(self, statement: Any) -> None:
        self._engine.executed.append(str(statement))


class FakeEngine:
    """Stands in for an AsyncEngine: connect() and dispose() only."""

    def __init__(self, database: str, unreachable: bool = False):
        self.database = database
        self.unreachable = unreachable
        self.executed: list[str] = []
        self.disposed = False

    def connect(self) -> FakeConnection:
        return FakeConnection(self)

    async def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def db_settings() -> DatabaseSettings:
    """Provide test database settings."""
    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="salesdesk_test",
        username="testuser",
        password=SecretStr("testpass"),
    )


@pytest.fixture
def make_company():
    """Factory building Company aggregates with sensible defaults."""
    return build_company


@pytest.fixture
def company_repository() -> InMemoryCompanyRepository:
    return InMemoryCompanyRepository()


@pytest.fixture
def unreachable_databases() -> set[str]:
    """Database names whose fake engine refuses connections."""
    return set()


@pytest.fixture
def engine_registry(db_settings, unreachable_databases) -> TenantEngineRegistry:
    """Tenant engine registry handing out FakeEngine instances."""

    def factory(settings: DatabaseSettings, database: str, pool_size: int) -> Any:
        return FakeEngine(database, unreachable=database in unreachable_databases)

    return TenantEngineRegistry(
        settings=db_settings,
        pool_size=2,
        engine_factory=factory,
        probe=MagicMock(),
    )
