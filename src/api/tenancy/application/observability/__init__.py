"""Domain-Oriented Observability for the tenancy application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from tenancy.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from tenancy.application.observability.company_service_probe import (
    CompanyServiceProbe,
    DefaultCompanyServiceProbe,
)
from tenancy.application.observability.migration_probe import (
    DefaultMigrationProbe,
    MigrationProbe,
)
from tenancy.application.observability.provisioning_probe import (
    DefaultProvisioningProbe,
    ProvisioningProbe,
)
from tenancy.application.observability.resolution_probe import (
    DefaultResolutionProbe,
    ResolutionProbe,
)

__all__ = [
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "CompanyServiceProbe",
    "DefaultCompanyServiceProbe",
    "MigrationProbe",
    "DefaultMigrationProbe",
    "ProvisioningProbe",
    "DefaultProvisioningProbe",
    "ResolutionProbe",
    "DefaultResolutionProbe",
]
