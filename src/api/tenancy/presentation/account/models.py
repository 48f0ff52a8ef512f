"""Pydantic models for company account settings."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tenancy.domain.aggregates import Company, CompanyDetails


class CompanyResponse(BaseModel):
    """Response model for a company's account settings."""

    id: str = Field(..., description="Company ID (ULID format)")
    name: str
    slug: str
    status: str
    plan: str
    domain: str | None
    email: str | None
    business_email: str | None
    phone: str | None
    industry: str | None
    staff_count: str | None
    website: str | None
    country: str | None
    city: str | None
    address: str | None
    legal_id: str | None
    tax_id: str | None
    logo: str | None
    settings: dict[str, Any]
    enabled_modules: list[str]
    trial_ends_at: datetime | None
    subscription_ends_at: datetime | None
    remaining_trial_days: int | None
    initials: str

    @classmethod
    def from_domain(cls, company: Company) -> CompanyResponse:
        """Convert domain Company aggregate to API response."""
        return cls(
            id=company.id.value,
            name=company.name,
            slug=company.slug,
            status=company.status.value,
            plan=company.plan.value,
            domain=company.domain,
            email=company.email,
            business_email=company.business_email,
            phone=company.phone,
            industry=company.industry,
            staff_count=company.staff_count,
            website=company.website,
            country=company.country,
            city=company.city,
            address=company.address,
            legal_id=company.legal_id,
            tax_id=company.tax_id,
            logo=company.logo,
            settings=dict(company.settings),
            enabled_modules=list(company.enabled_modules),
            trial_ends_at=company.trial_ends_at,
            subscription_ends_at=company.subscription_ends_at,
            remaining_trial_days=company.remaining_trial_days(),
            initials=company.initials,
        )


class UpdateCompanyRequest(BaseModel):
    """Request model for account settings changes.

    Only fields present in the request body are applied. Routing identity
    (slug, subdomain, database) cannot be changed here.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=2, max_length=255)
    email: EmailStr | None = None
    business_email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    industry: str | None = None
    staff_count: str | None = None
    website: str | None = Field(None, max_length=255)
    country: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    address: str | None = None
    legal_id: str | None = Field(None, max_length=100)
    tax_id: str | None = Field(None, max_length=100)
    logo: str | None = None
    settings: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class CompanyDetailsResponse(BaseModel):
    """Response model for the extended company profile."""

    company_id: str
    description: str | None
    founded_year: int | None
    employee_count: int | None
    annual_revenue: float | None
    currency: str
    social_links: dict[str, str]
    secondary_email: str | None
    secondary_phone: str | None
    fax: str | None
    business_hours: dict[str, Any]
    additional_settings: dict[str, Any]

    @classmethod
    def from_domain(cls, details: CompanyDetails) -> CompanyDetailsResponse:
        return cls(
            company_id=details.company_id.value,
            description=details.description,
            founded_year=details.founded_year,
            employee_count=details.employee_count,
            annual_revenue=details.annual_revenue,
            currency=details.currency,
            social_links=details.social_links(),
            secondary_email=details.secondary_email,
            secondary_phone=details.secondary_phone,
            fax=details.fax,
            business_hours=dict(details.business_hours),
            additional_settings=dict(details.additional_settings),
        )


class UpdateCompanyDetailsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str | None = None
    founded_year: int | None = Field(None, ge=1800, le=2100)
    employee_count: int | None = Field(None, ge=0)
    annual_revenue: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    facebook_url: str | None = None
    instagram_url: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    tiktok_url: str | None = None
    snapchat_url: str | None = None
    whatsapp_number: str | None = Field(None, max_length=50)
    secondary_email: EmailStr | None = None
    secondary_phone: str | None = Field(None, max_length=50)
    fax: str | None = Field(None, max_length=50)
    business_hours: dict[str, Any] | None = None
    additional_settings: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
