"""Tenant context value object for resolved tenant identification.

This module contains the pure value object that represents a resolved
tenant context. It is framework-agnostic and contains no business logic,
making it safe for the shared kernel.

The resolution logic (path or host parsing, registry lookup, database
activation) lives in the tenancy bounded context's presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass

TENANT_CONTEXT_STATE_KEY = "tenant_context"
TENANT_SWITCHBOARD_STATE_KEY = "tenant_switchboard"


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    This is a shared kernel value object used across bounded contexts
    to carry the resolved tenant identity.

    Attributes:
        company_id: The company's ULID as a string.
        slug: The company's slug.
        database: Physical database the request's tenant connection is bound to.
        source: How the company was identified - 'path', 'subdomain' or 'domain'.
    """

    company_id: str
    slug: str
    database: str
    source: str
