"""SQLAlchemy ORM models for the companies and company_details tables.

Both tables live in the landlord database. A company row is the routing
record for one tenant: its slug, subdomain and custom domain identify the
tenant and its database column names the physical database to use.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class CompanyModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for companies table.

    Notes:
    - id is VARCHAR(26) for ULID format
    - slug, subdomain, domain and database carry named unique constraints; soft-deleted
      rows keep their values so identifiers are never reused
    - enabled_modules, settings and metadata are JSON documents
    """

    __tablename__ = "companies"

    __table_args__ = (
        UniqueConstraint("slug", name="uq_companies_slug"),
        UniqueConstraint("subdomain", name="uq_companies_subdomain"),
        UniqueConstraint("domain", name="uq_companies_domain"),
        UniqueConstraint("database", name="uq_companies_database"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(63), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(63), nullable=False)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    database: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    plan: Mapped[str] = mapped_column(String(20), nullable=False)
    trial_ends_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    subscription_ends_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    enabled_modules: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    business_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(50), nullable=True)
    staff_count: Mapped[str | None] = mapped_column(String(20), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    legal_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tax_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)

    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    details: Mapped[CompanyDetailsModel | None] = relationship(
        back_populates="company", uselist=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CompanyModel(id={self.id}, slug={self.slug}, status={self.status})>"


class CompanyDetailsModel(Base, TimestampMixin):
    """ORM model for company_details table (one row per company at most)."""

    __tablename__ = "company_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    founded_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    employee_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    annual_revenue: Mapped[float | None] = mapped_column(
        Numeric(15, 2, asdecimal=False), nullable=True
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    facebook_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    instagram_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    twitter_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    youtube_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tiktok_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    snapchat_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    whatsapp_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    secondary_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    secondary_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fax: Mapped[str | None] = mapped_column(String(50), nullable=True)
    business_hours: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    additional_settings: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    company: Mapped[CompanyModel] = relationship(back_populates="details")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CompanyDetailsModel(company_id={self.company_id})>"
