"""Domain aggregates for the tenancy context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from tenancy.domain.aggregates.company import Company
from tenancy.domain.aggregates.company_details import CompanyDetails
from tenancy.domain.aggregates.user import User

__all__ = [
    "Company",
    "CompanyDetails",
    "User",
]
