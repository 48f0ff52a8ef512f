"""Application services for the tenancy bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the tenancy context.
"""

from tenancy.application.services.authentication_service import (
    AuthenticationService,
)
from tenancy.application.services.company_service import CompanyService
from tenancy.application.services.migration_service import (
    MigrationReport,
    TenantMigrationResult,
    TenantMigrationService,
)
from tenancy.application.services.provisioning_service import (
    COMPENSATIONS,
    Compensation,
    ProvisioningRequest,
    ProvisioningResult,
    ProvisioningService,
    ProvisioningStep,
    StepOutcome,
    StepStatus,
)
from tenancy.application.services.slug_allocator import SlugAllocator

__all__ = [
    "AuthenticationService",
    "CompanyService",
    "COMPENSATIONS",
    "Compensation",
    "MigrationReport",
    "ProvisioningRequest",
    "ProvisioningResult",
    "ProvisioningService",
    "ProvisioningStep",
    "SlugAllocator",
    "StepOutcome",
    "StepStatus",
    "TenantMigrationResult",
    "TenantMigrationService",
]
