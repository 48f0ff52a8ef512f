"""Company aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, ClassVar, Iterable

from tenancy.domain.exceptions import (
    ImmutableCompanyFieldError,
    ModuleNotAvailableError,
)
from tenancy.domain.slugs import database_name_for
from tenancy.domain.value_objects import (
    MODULE_CATALOGUE,
    CompanyId,
    CompanyStatus,
    Module,
    ModuleInfo,
    Plan,
)


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Company:
    """Company aggregate: one tenant of the system.

    A company owns an isolated physical database named after its slug and
    is the unit of routing, subscription and module entitlement.

    Business rules:
    - slug, subdomain, domain and database are globally unique (enforced
      by the registry)
    - only ACTIVE companies are routable
    - subscription access requires ACTIVE status plus a running trial,
      grace period, or paid subscription
    """

    EDITABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "name",
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
            "settings",
        }
    )

    id: CompanyId
    name: str
    slug: str
    subdomain: str
    database: str
    status: CompanyStatus = CompanyStatus.ACTIVE
    plan: Plan = Plan.TRIAL
    domain: str | None = None
    trial_ends_at: datetime | None = None
    subscription_ends_at: datetime | None = None
    enabled_modules: list[str] = field(default_factory=list)
    owner_name: str | None = None
    owner_email: str | None = None
    owner_phone: str | None = None
    email: str | None = None
    business_email: str | None = None
    phone: str | None = None
    industry: str | None = None
    staff_count: str | None = None
    website: str | None = None
    country: str | None = None
    city: str | None = None
    address: str | None = None
    legal_id: str | None = None
    tax_id: str | None = None
    logo: str | None = None
    settings: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        name: str,
        slug: str,
        owner_name: str,
        owner_email: str,
        modules: Iterable[str] = (Module.SALES,),
        owner_phone: str | None = None,
        database_prefix: str = "tenant_",
        trial_days: int = 14,
        now: datetime | None = None,
        **profile: Any,
    ) -> Company:
        """Factory method for registering a new company.

        New companies start ACTIVE on a trial plan. The subdomain equals the
        slug and the database name is derived from it.

        Args:
            name: Display name of the company
            slug: Validated, available slug
            owner_name: Name of the owning user
            owner_email: Email of the owning user (also the company email)
            modules: Module keys to enable
            owner_phone: Optional owner phone number
            database_prefix: Prefix for the physical database name
            trial_days: Length of the trial period
            now: Clock override for tests
            **profile: Optional profile fields (industry, country, ...)

        Returns:
            A new Company aggregate
        """
        now = now or _now()
        company = cls(
            id=CompanyId.generate(),
            name=name,
            slug=slug,
            subdomain=slug,
            database=database_name_for(slug, database_prefix),
            status=CompanyStatus.ACTIVE,
            plan=Plan.TRIAL,
            trial_ends_at=now + timedelta(days=trial_days),
            owner_name=owner_name,
            owner_email=owner_email,
            owner_phone=owner_phone,
            email=owner_email,
            created_at=now,
            updated_at=now,
        )
        for module in modules:
            company.enable_module(module)
        company.apply_changes(profile)
        return company

    # Subscription and trial

    def is_on_trial(self, now: datetime | None = None) -> bool:
        now = now or _now()
        return (
            self.plan == Plan.TRIAL
            and self.trial_ends_at is not None
            and self.trial_ends_at > now
        )

    def trial_expired(self, now: datetime | None = None) -> bool:
        if self.plan != Plan.TRIAL or self.trial_ends_at is None:
            return False
        return self.trial_ends_at <= (now or _now())

    def is_in_grace_period(self, grace_days: int = 3, now: datetime | None = None) -> bool:
        """Whether the trial ended less than ``grace_days`` ago."""
        now = now or _now()
        if not self.trial_expired(now):
            return False
        assert self.trial_ends_at is not None
        return self.trial_ends_at + timedelta(days=grace_days) > now

    def has_active_subscription(
        self, grace_days: int = 3, now: datetime | None = None
    ) -> bool:
        """Whether the company may use the product right now."""
        now = now or _now()
        if self.status != CompanyStatus.ACTIVE:
            return False
        return (
            self.is_on_trial(now)
            or self.is_in_grace_period(grace_days, now)
            or (
                self.subscription_ends_at is not None
                and self.subscription_ends_at > now
            )
        )

    def remaining_trial_days(self, now: datetime | None = None) -> int | None:
        now = now or _now()
        if not self.is_on_trial(now):
            return None
        assert self.trial_ends_at is not None
        return (self.trial_ends_at - now).days

    # Status transitions

    @property
    def is_active(self) -> bool:
        return self.status == CompanyStatus.ACTIVE

    def activate(self) -> None:
        self.status = CompanyStatus.ACTIVE

    def suspend(self) -> None:
        self.status = CompanyStatus.SUSPENDED

    def cancel(self) -> None:
        self.status = CompanyStatus.CANCELLED

    # Modules

    def has_module(self, module: str) -> bool:
        return str(module) in self.enabled_modules

    def enable_module(self, module: str) -> None:
        """Enable a module, keeping the list free of duplicates.

        Raises:
            ModuleNotAvailableError: If the module is unknown or not offered yet
        """
        try:
            info = MODULE_CATALOGUE[Module(module)]
        except ValueError as e:
            raise ModuleNotAvailableError(str(module)) from e
        if not info.available:
            raise ModuleNotAvailableError(str(module))
        if not self.has_module(info.key):
            self.enabled_modules.append(info.key.value)

    def disable_module(self, module: str) -> None:
        self.enabled_modules = [m for m in self.enabled_modules if m != str(module)]

    def enabled_module_catalogue(self) -> list[ModuleInfo]:
        """Catalogue entries for enabled modules, skipping unknown keys."""
        known = {module.value for module in Module}
        return [
            MODULE_CATALOGUE[Module(key)]
            for key in self.enabled_modules
            if key in known
        ]

    # Account settings

    def apply_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply editable profile changes and return what actually changed.

        Raises:
            ImmutableCompanyFieldError: If a change targets a non-editable field
        """
        rejected = [key for key in changes if key not in self.EDITABLE_FIELDS]
        if rejected:
            raise ImmutableCompanyFieldError(rejected)

        applied: dict[str, Any] = {}
        for key, value in changes.items():
            if getattr(self, key) != value:
                setattr(self, key, value)
                applied[key] = value
        return applied

    @property
    def initials(self) -> str:
        words = self.name.split()
        if len(words) >= 2:
            return (words[0][0] + words[1][0]).upper()
        return self.name[:2].upper()
