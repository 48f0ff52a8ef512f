"""Pydantic models for company registration requests and responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from tenancy.application.security import MAX_PASSWORD_BYTES
from tenancy.application.services import ProvisioningRequest, ProvisioningResult
from tenancy.domain.value_objects import (
    INDUSTRY_OPTIONS,
    STAFF_COUNT_OPTIONS,
    Module,
    ModuleInfo,
)


class ModuleResponse(BaseModel):
    """Catalogue entry for a business module."""

    key: str
    name: str
    name_ar: str
    description: str
    icon: str
    available: bool

    @classmethod
    def from_domain(cls, info: ModuleInfo) -> ModuleResponse:
        return cls(
            key=info.key.value,
            name=info.name,
            name_ar=info.name_ar,
            description=info.description,
            icon=info.icon,
            available=info.available,
        )


class RegistrationOptionsResponse(BaseModel):
    """Choices offered by the registration form."""

    modules: list[ModuleResponse]
    plans: list[str]
    industries: dict[str, str]
    staff_counts: dict[str, str]
    roles: list[str]


class SuggestSlugRequest(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    count: int = Field(3, ge=1, le=10)


class SuggestSlugResponse(BaseModel):
    suggestions: list[str]


class CheckSlugRequest(BaseModel):
    slug: str = Field(..., min_length=1, max_length=255)


class CheckSlugResponse(BaseModel):
    """Availability of a slug; ``reason`` explains a refusal."""

    slug: str
    available: bool
    reason: str | None = None


class RegisterRequest(BaseModel):
    """Request model for registering a company and its owner.

    The owner receives a personal access token in the response; it is
    shown only once.
    """

    company_name: str = Field(..., min_length=2, max_length=255)
    owner_name: str = Field(..., min_length=2, max_length=255)
    owner_email: EmailStr
    owner_phone: str | None = Field(None, max_length=50)
    password: str = Field(..., min_length=8)
    slug: str | None = Field(
        None, description="Explicit slug; derived from the company name if omitted"
    )
    modules: list[str] = Field(
        default_factory=lambda: [Module.SALES.value], min_length=1
    )
    referral_code: str | None = Field(None, max_length=100)
    referral_relation: str | None = Field(None, max_length=100)

    industry: str | None = None
    staff_count: str | None = None
    business_email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    website: str | None = Field(None, max_length=255)
    country: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    address: str | None = None

    description: str | None = None
    founded_year: int | None = Field(None, ge=1800, le=2100)
    employee_count: int | None = Field(None, ge=0)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
        return value

    @field_validator("industry")
    @classmethod
    def known_industry(cls, value: str | None) -> str | None:
        if value is not None and value not in INDUSTRY_OPTIONS:
            raise ValueError("Unknown industry")
        return value

    @field_validator("staff_count")
    @classmethod
    def known_staff_count(cls, value: str | None) -> str | None:
        if value is not None and value not in STAFF_COUNT_OPTIONS:
            raise ValueError("Unknown staff count")
        return value

    def to_provisioning_request(self) -> ProvisioningRequest:
        profile_fields = (
            "industry",
            "staff_count",
            "business_email",
            "phone",
            "website",
            "country",
            "city",
            "address",
        )
        details_fields = ("description", "founded_year", "employee_count")
        return ProvisioningRequest(
            company_name=self.company_name.strip(),
            owner_name=self.owner_name.strip(),
            owner_email=self.owner_email.strip().lower(),
            owner_password=self.password,
            owner_phone=self.owner_phone,
            slug=self.slug,
            modules=list(self.modules),
            referral_code=self.referral_code,
            referral_relation=self.referral_relation,
            profile=_present(self, profile_fields),
            details=_present(self, details_fields),
        )


class StepOutcomeResponse(BaseModel):
    step: str
    status: str


class RegisterResponse(BaseModel):
    """Response model for a completed registration."""

    company_id: str = Field(..., description="Company ID (ULID format)")
    slug: str
    owner_id: str
    api_token: str = Field(..., description="Owner access token, shown only once")
    api_base: str = Field(..., description="Base path or URL of the company API")
    steps: list[StepOutcomeResponse]

    @classmethod
    def from_result(cls, result: ProvisioningResult, api_base: str) -> RegisterResponse:
        return cls(
            company_id=result.company_id,
            slug=result.slug,
            owner_id=result.owner_id,
            api_token=result.api_token,
            api_base=api_base,
            steps=[
                StepOutcomeResponse(step=s.step.value, status=s.status.value)
                for s in result.steps
            ],
        )


def _present(model: BaseModel, names: tuple[str, ...]) -> dict[str, Any]:
    return {
        name: value for name in names if (value := getattr(model, name)) is not None
    }
