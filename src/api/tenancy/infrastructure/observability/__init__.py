"""Observability probes for tenancy infrastructure."""

from tenancy.infrastructure.observability.repository_probe import (
    CompanyRepositoryProbe,
    DefaultCompanyRepositoryProbe,
)

__all__ = [
    "CompanyRepositoryProbe",
    "DefaultCompanyRepositoryProbe",
]
