"""Company details aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from tenancy.domain.exceptions import ImmutableCompanyFieldError
from tenancy.domain.value_objects import CompanyId


@dataclass
class CompanyDetails:
    """Extended profile of a company, one row per company at most.

    Holds branding and descriptive information that is not needed for
    routing, so it lives beside the Company aggregate rather than in it.
    """

    SOCIAL_FIELDS: ClassVar[tuple[str, ...]] = (
        "facebook_url",
        "instagram_url",
        "linkedin_url",
        "twitter_url",
        "youtube_url",
        "tiktok_url",
        "snapchat_url",
        "whatsapp_number",
    )

    company_id: CompanyId
    description: str | None = None
    founded_year: int | None = None
    employee_count: int | None = None
    annual_revenue: float | None = None
    currency: str = "USD"
    facebook_url: str | None = None
    instagram_url: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    tiktok_url: str | None = None
    snapchat_url: str | None = None
    whatsapp_number: str | None = None
    secondary_email: str | None = None
    secondary_phone: str | None = None
    fax: str | None = None
    business_hours: dict[str, Any] = field(default_factory=dict)
    additional_settings: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def editable_fields(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls) if f.name != "company_id")

    def apply_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply changes and return those that differ from current values.

        Raises:
            ImmutableCompanyFieldError: If a change targets an unknown field
        """
        editable = self.editable_fields()
        rejected = [key for key in changes if key not in editable]
        if rejected:
            raise ImmutableCompanyFieldError(rejected)

        applied: dict[str, Any] = {}
        for key, value in changes.items():
            if getattr(self, key) != value:
                setattr(self, key, value)
                applied[key] = value
        return applied

    def social_links(self) -> dict[str, str]:
        """Social links that are set, keyed by field name."""
        return {
            name: value
            for name in self.SOCIAL_FIELDS
            if (value := getattr(self, name))
        }
