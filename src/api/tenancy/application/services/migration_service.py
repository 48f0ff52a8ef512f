"""Tenant schema migration service.

Applies the tenant schema (and optionally the role seed) to one or all
tenant databases. Each tenant is migrated in its own unit of work with its
own switchboard, so a failure in one database never leaves another bound.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from infrastructure.database.switchboard import (
    ConnectionSwitchboard,
    TenantEngineRegistry,
    tenant_scope,
)
from tenancy.application.observability import DefaultMigrationProbe, MigrationProbe
from tenancy.domain.aggregates import Company
from tenancy.ports.exceptions import CompanyNotFoundError
from tenancy.ports.provisioning import ITenantSchemaManager
from tenancy.ports.repositories import ICompanyRepository


@dataclass(frozen=True)
class TenantMigrationResult:
    """Outcome of migrating one tenant database."""

    slug: str
    database: str
    succeeded: bool
    seeded_roles: int = 0
    error: str | None = None


@dataclass
class MigrationReport:
    """Outcome of a multi-tenant migration run."""

    results: list[TenantMigrationResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)

    @property
    def ok(self) -> bool:
        return bool(self.results) and self.failed == 0


class TenantMigrationService:
    """Runs tenant schema migrations company by company."""

    def __init__(
        self,
        company_repository: ICompanyRepository,
        engines: TenantEngineRegistry,
        schema_manager: ITenantSchemaManager,
        verify_connection: bool = True,
        probe: MigrationProbe | None = None,
    ):
        self._companies = company_repository
        self._engines = engines
        self._schema_manager = schema_manager
        self._verify_connection = verify_connection
        self._probe = probe or DefaultMigrationProbe()

    async def migrate_all(self, fresh: bool = False, seed: bool = False) -> MigrationReport:
        """Migrate every ACTIVE company's database.

        A failing tenant is recorded in the report and the run continues.
        """
        report = MigrationReport()
        for company in await self._companies.list_active():
            report.results.append(await self.migrate_company(company, fresh, seed))

        self._probe.batch_completed(report.succeeded, report.failed)
        return report

    async def migrate_slug(
        self, slug: str, fresh: bool = False, seed: bool = False
    ) -> TenantMigrationResult:
        """Migrate one company's database, whatever its status.

        Raises:
            CompanyNotFoundError: If no company has this slug
        """
        company = await self._companies.get_by_slug(slug, active_only=False)
        if company is None:
            raise CompanyNotFoundError(slug)
        return await self.migrate_company(company, fresh, seed)

    async def migrate_company(
        self, company: Company, fresh: bool = False, seed: bool = False
    ) -> TenantMigrationResult:
        """Activate, verify, migrate, optionally seed, then reset."""
        self._probe.migration_started(company.slug, company.database, fresh)
        switchboard = ConnectionSwitchboard(self._engines)
        seeded = 0
        try:
            async with tenant_scope(
                switchboard, company.database, verify=self._verify_connection
            ) as bound:
                session = bound.session()
                try:
                    await self._schema_manager.migrate(session, fresh=fresh)
                    if seed:
                        seeded = await self._schema_manager.seed_roles(session)
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        except Exception as e:
            self._probe.migration_failed(company.slug, company.database, e)
            return TenantMigrationResult(
                slug=company.slug,
                database=company.database,
                succeeded=False,
                error=str(e),
            )

        self._probe.migration_succeeded(company.slug, company.database, seeded)
        return TenantMigrationResult(
            slug=company.slug,
            database=company.database,
            succeeded=True,
            seeded_roles=seeded,
        )
