"""Company provisioning saga.

Registering a company touches two databases that cannot share a
transaction: the landlord registry and a brand new tenant database. The
workflow is therefore a sequence of steps, each with a recorded outcome
and a compensating action that restores a consistent state when a later
step fails:

======================  ==========================  =====================
Step                    Raised on failure           Compensation
======================  ==========================  =====================
allocate_slug           SlugConflict / InvalidSlug  none
create_database         DatabaseCreateFailed        none
write_registry          RegistryWriteFailed         drop the new database
migrate_schema ...      PostSetupFailed             suspend the company
issue_credentials       PostSetupFailed             suspend the company
======================  ==========================  =====================

Compensations are best effort: their own failures are logged and never
replace the original error.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.switchboard import ConnectionSwitchboard, tenant_scope
from tenancy.application.exceptions import (
    DatabaseCreateFailedError,
    InvalidSlugError,
    PostSetupFailedError,
    RegistryWriteFailedError,
    SlugConflictError,
)
from tenancy.application.observability import (
    DefaultProvisioningProbe,
    ProvisioningProbe,
)
from tenancy.application.security import (
    extract_prefix,
    generate_api_token,
    hash_password,
    hash_token,
)
from tenancy.application.services.slug_allocator import SlugAllocator
from tenancy.domain.aggregates import Company, CompanyDetails, User
from tenancy.domain.authorization import OWNER_ROLE
from tenancy.domain.exceptions import ModuleNotAvailableError
from tenancy.domain.slugs import database_name_for
from tenancy.domain.value_objects import (
    MODULE_CATALOGUE,
    CompanyStatus,
    Module,
)
from tenancy.ports.provisioning import IDatabaseAdministrator, ITenantSchemaManager
from tenancy.ports.repositories import (
    ICompanyDetailsRepository,
    ICompanyRepository,
    ITenantUserRepository,
)

OWNER_TOKEN_NAME = "owner-registration"


class ProvisioningStep(StrEnum):
    ALLOCATE_SLUG = "allocate_slug"
    CREATE_DATABASE = "create_database"
    WRITE_REGISTRY = "write_registry"
    MIGRATE_SCHEMA = "migrate_schema"
    SEED_ROLES = "seed_roles"
    CREATE_OWNER = "create_owner"
    ASSIGN_OWNER_ROLE = "assign_owner_role"
    ISSUE_CREDENTIALS = "issue_credentials"


class Compensation(StrEnum):
    NONE = "none"
    DROP_DATABASE = "drop_database"
    SUSPEND_COMPANY = "suspend_company"


COMPENSATIONS: Mapping[ProvisioningStep, Compensation] = MappingProxyType(
    {
        ProvisioningStep.ALLOCATE_SLUG: Compensation.NONE,
        ProvisioningStep.CREATE_DATABASE: Compensation.NONE,
        ProvisioningStep.WRITE_REGISTRY: Compensation.DROP_DATABASE,
        ProvisioningStep.MIGRATE_SCHEMA: Compensation.SUSPEND_COMPANY,
        ProvisioningStep.SEED_ROLES: Compensation.SUSPEND_COMPANY,
        ProvisioningStep.CREATE_OWNER: Compensation.SUSPEND_COMPANY,
        ProvisioningStep.ASSIGN_OWNER_ROLE: Compensation.SUSPEND_COMPANY,
        ProvisioningStep.ISSUE_CREDENTIALS: Compensation.SUSPEND_COMPANY,
    }
)


class StepStatus(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class StepOutcome:
    """Outcome of one provisioning step."""

    step: ProvisioningStep
    status: StepStatus
    detail: str | None = None


@dataclass
class ProvisioningRequest:
    """Everything needed to register a company and its owner."""

    company_name: str
    owner_name: str
    owner_email: str
    owner_password: str
    owner_phone: str | None = None
    slug: str | None = None
    modules: list[str] = field(default_factory=lambda: [Module.SALES.value])
    referral_code: str | None = None
    referral_relation: str | None = None
    profile: dict[str, Any] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProvisioningResult:
    """A fully provisioned company.

    ``api_token`` is the owner's personal access token in plaintext; it is
    not stored anywhere and cannot be shown again.
    """

    company_id: str
    slug: str
    database: str
    owner_id: str
    api_token: str
    steps: tuple[StepOutcome, ...]


class ProvisioningService:
    """Runs the provisioning saga for one registration.

    The landlord session carries the registry writes. Tenant work goes
    through the switchboard, which is bound to the new database only for
    the duration of the post-registry steps.
    """

    def __init__(
        self,
        session: AsyncSession,
        company_repository: ICompanyRepository,
        details_repository: ICompanyDetailsRepository,
        slug_allocator: SlugAllocator,
        database_admin: IDatabaseAdministrator,
        schema_manager: ITenantSchemaManager,
        switchboard: ConnectionSwitchboard,
        user_repository_factory: Callable[[AsyncSession], ITenantUserRepository],
        database_prefix: str = "tenant_",
        trial_days: int = 14,
        verify_connection: bool = True,
        probe: ProvisioningProbe | None = None,
    ):
        """Initialize ProvisioningService with dependencies.

        Args:
            session: Landlord database session for registry writes
            company_repository: Company registry bound to ``session``
            details_repository: Company details store bound to ``session``
            slug_allocator: Slug allocation against the registry
            database_admin: Creates and drops physical databases
            schema_manager: Applies the tenant schema and seeds roles
            switchboard: Switchboard owned by this provisioning run
            user_repository_factory: Builds a user repository on a tenant session
            database_prefix: Prefix of physical tenant database names
            trial_days: Length of the trial for new companies
            verify_connection: Probe the new database before migrating it
            probe: Optional domain probe for observability
        """
        self._session = session
        self._companies = company_repository
        self._details = details_repository
        self._allocator = slug_allocator
        self._database_admin = database_admin
        self._schema_manager = schema_manager
        self._switchboard = switchboard
        self._user_repository_factory = user_repository_factory
        self._database_prefix = database_prefix
        self._trial_days = trial_days
        self._verify_connection = verify_connection
        self._probe = probe or DefaultProvisioningProbe()

    async def provision(self, request: ProvisioningRequest) -> ProvisioningResult:
        """Register a company, create its database and its owner.

        Raises:
            ModuleNotAvailableError: A requested module is not offered
            SlugConflictError: The requested slug is reserved or taken
            InvalidSlugError: The requested slug is malformed
            DatabaseCreateFailedError: The tenant database could not be created
            RegistryWriteFailedError: The company row could not be written
            PostSetupFailedError: A tenant setup step failed; company suspended
                unless the suspension itself failed
        """
        self._probe.provisioning_started(request.company_name, request.owner_email)
        self._check_modules(request.modules)
        steps: list[StepOutcome] = []

        try:
            slug = await self._allocator.allocate(request.company_name, request.slug)
        except (SlugConflictError, InvalidSlugError) as e:
            self._record_failure(steps, ProvisioningStep.ALLOCATE_SLUG, request.slug or "", e)
            raise
        self._record_success(steps, ProvisioningStep.ALLOCATE_SLUG, slug)

        database = database_name_for(slug, self._database_prefix)
        try:
            exists = await self._database_admin.database_exists(database)
            if not exists:
                await self._database_admin.create_database(database)
        except Exception as e:
            self._record_failure(steps, ProvisioningStep.CREATE_DATABASE, slug, e)
            raise DatabaseCreateFailedError(database) from e
        if exists:
            # Never reuse or drop a database this run did not create.
            error = DatabaseCreateFailedError(database)
            self._record_failure(steps, ProvisioningStep.CREATE_DATABASE, slug, error)
            self._probe.database_already_exists(database)
            raise error
        self._record_success(steps, ProvisioningStep.CREATE_DATABASE, slug)

        try:
            company = await self._write_registry(slug, request)
        except Exception as e:
            self._record_failure(steps, ProvisioningStep.WRITE_REGISTRY, slug, e)
            await self._compensate(ProvisioningStep.WRITE_REGISTRY, slug, database)
            raise RegistryWriteFailedError(slug, database) from e
        self._record_success(steps, ProvisioningStep.WRITE_REGISTRY, slug)

        owner, api_token = await self._set_up_tenant(company, request, steps)

        self._probe.provisioning_completed(
            company.id.value, company.slug, company.database, owner.id.value
        )
        return ProvisioningResult(
            company_id=company.id.value,
            slug=company.slug,
            database=company.database,
            owner_id=owner.id.value,
            api_token=api_token,
            steps=tuple(steps),
        )

    async def _write_registry(self, slug: str, request: ProvisioningRequest) -> Company:
        company = Company.create(
            name=request.company_name,
            slug=slug,
            owner_name=request.owner_name,
            owner_email=request.owner_email,
            modules=request.modules,
            owner_phone=request.owner_phone,
            database_prefix=self._database_prefix,
            trial_days=self._trial_days,
            **request.profile,
        )
        if request.referral_code:
            company.metadata["referral"] = {
                "code": request.referral_code,
                "relation": request.referral_relation,
            }

        company = await self._companies.create(company)
        if request.details:
            details = CompanyDetails(company_id=company.id)
            details.apply_changes(request.details)
            await self._details.save(details)
        await self._session.commit()
        return company

    async def _set_up_tenant(
        self,
        company: Company,
        request: ProvisioningRequest,
        steps: list[StepOutcome],
    ) -> tuple[User, str]:
        slug = company.slug
        step = ProvisioningStep.MIGRATE_SCHEMA
        try:
            async with tenant_scope(
                self._switchboard, company.database, verify=self._verify_connection
            ) as switchboard:
                session = switchboard.session()
                users = self._user_repository_factory(session)
                try:
                    await self._schema_manager.migrate(session)
                    self._record_success(steps, step, slug)

                    step = ProvisioningStep.SEED_ROLES
                    await self._schema_manager.seed_roles(session)
                    self._record_success(steps, step, slug)

                    step = ProvisioningStep.CREATE_OWNER
                    owner = User.create(
                        name=request.owner_name,
                        email=request.owner_email,
                        phone=request.owner_phone,
                    )
                    await users.add(owner, hash_password(request.owner_password))
                    self._record_success(steps, step, slug)

                    step = ProvisioningStep.ASSIGN_OWNER_ROLE
                    await users.assign_role(owner.id, OWNER_ROLE.value)
                    owner.roles.append(OWNER_ROLE.value)
                    self._record_success(steps, step, slug)

                    step = ProvisioningStep.ISSUE_CREDENTIALS
                    api_token = generate_api_token()
                    await users.add_token(
                        owner.id,
                        OWNER_TOKEN_NAME,
                        extract_prefix(api_token),
                        hash_token(api_token),
                    )
                    await session.commit()
                    self._record_success(steps, step, slug)
                except Exception:
                    await session.rollback()
                    raise
        except Exception as e:
            self._record_failure(steps, step, slug, e)
            suspended = await self._compensate(step, slug, company.database, company)
            raise PostSetupFailedError(
                company.id.value, step.value, e, suspended=suspended
            ) from e

        return owner, api_token

    async def _compensate(
        self,
        step: ProvisioningStep,
        slug: str,
        database: str,
        company: Company | None = None,
    ) -> bool:
        """Apply the compensation for ``step`` and report whether it ran."""
        action = COMPENSATIONS[step]
        try:
            if action == Compensation.DROP_DATABASE:
                await self._session.rollback()
                if await self._companies.database_name_taken(database):
                    self._probe.compensation_skipped(
                        step.value, action.value, slug, "database claimed by registry"
                    )
                    return False
                await self._database_admin.drop_database(database)
            elif action == Compensation.SUSPEND_COMPANY and company is not None:
                await self._companies.set_status(company.id, CompanyStatus.SUSPENDED)
                await self._session.commit()
            else:
                return False
        except Exception as e:
            self._probe.compensation_failed(step.value, action.value, slug, e)
            return False
        self._probe.compensation_applied(step.value, action.value, slug)
        return True

    @staticmethod
    def _check_modules(modules: list[str]) -> None:
        if not modules:
            raise ModuleNotAvailableError("(none selected)")
        known = {module.value for module in Module}
        for module in modules:
            if module not in known or not MODULE_CATALOGUE[Module(module)].available:
                raise ModuleNotAvailableError(module)

    def _record_success(
        self, steps: list[StepOutcome], step: ProvisioningStep, slug: str
    ) -> None:
        steps.append(StepOutcome(step=step, status=StepStatus.SUCCEEDED))
        self._probe.step_succeeded(step.value, slug)

    def _record_failure(
        self,
        steps: list[StepOutcome],
        step: ProvisioningStep,
        slug: str,
        error: Exception,
    ) -> None:
        steps.append(StepOutcome(step=step, status=StepStatus.FAILED, detail=str(error)))
        self._probe.step_failed(step.value, slug, error)
