"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class CompanyId:
    """Identifier for a Company aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> CompanyId:
        """Generate a new CompanyId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> CompanyId:
        """Create CompanyId from string value.

        Args:
            value: ULID string

        Returns:
            CompanyId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid CompanyId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class UserId:
    """Identifier for a user inside a tenant database."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))


class CompanyStatus(StrEnum):
    """Lifecycle status of a company in the registry.

    Only ACTIVE companies are routable. SUSPENDED is also the state a
    company lands in when provisioning fails after its registry row exists.
    """

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class Plan(StrEnum):
    """Subscription plans."""

    TRIAL = "trial"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class Module(StrEnum):
    """Business modules a company can enable."""

    SALES = "sales"
    CONTACTS = "contacts"
    ACCOUNTING = "accounting"
    INVENTORY = "inventory"
    HR = "hr"


@dataclass(frozen=True)
class ModuleInfo:
    """Catalogue entry describing a business module."""

    key: Module
    name: str
    name_ar: str
    description: str
    icon: str
    available: bool


MODULE_CATALOGUE: dict[Module, ModuleInfo] = {
    Module.SALES: ModuleInfo(
        key=Module.SALES,
        name="Sales",
        name_ar="المبيعات",
        description="Manage leads, deals, proposals, and invoices",
        icon="chart-line",
        available=True,
    ),
    Module.CONTACTS: ModuleInfo(
        key=Module.CONTACTS,
        name="Contacts",
        name_ar="جهات الاتصال",
        description="Customer and supplier management",
        icon="users",
        available=False,
    ),
    Module.ACCOUNTING: ModuleInfo(
        key=Module.ACCOUNTING,
        name="Accounting",
        name_ar="المحاسبة",
        description="Financial management and reporting",
        icon="calculator",
        available=False,
    ),
    Module.INVENTORY: ModuleInfo(
        key=Module.INVENTORY,
        name="Inventory",
        name_ar="المخزون",
        description="Stock and warehouse management",
        icon="box",
        available=False,
    ),
    Module.HR: ModuleInfo(
        key=Module.HR,
        name="HR",
        name_ar="الموارد البشرية",
        description="Human resources management",
        icon="briefcase",
        available=False,
    ),
}


INDUSTRY_OPTIONS: dict[str, str] = {
    "technology": "Technology",
    "healthcare": "Healthcare",
    "finance": "Finance & Banking",
    "retail": "Retail & E-commerce",
    "manufacturing": "Manufacturing",
    "education": "Education",
    "real_estate": "Real Estate",
    "hospitality": "Hospitality & Tourism",
    "transportation": "Transportation & Logistics",
    "construction": "Construction",
    "legal": "Legal Services",
    "consulting": "Consulting",
    "marketing": "Marketing & Advertising",
    "media": "Media & Entertainment",
    "agriculture": "Agriculture",
    "energy": "Energy & Utilities",
    "telecommunications": "Telecommunications",
    "automotive": "Automotive",
    "insurance": "Insurance",
    "other": "Other",
}

STAFF_COUNT_OPTIONS: dict[str, str] = {
    "1-10": "1-10 employees",
    "11-50": "11-50 employees",
    "51-200": "51-200 employees",
    "201-500": "201-500 employees",
    "500+": "500+ employees",
}
