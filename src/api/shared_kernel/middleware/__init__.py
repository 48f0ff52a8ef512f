"""Shared middleware for cross-cutting concerns.

This module contains the tenant context value object shared across
bounded contexts, the request-state keys it is published under, and the
probe used by the tenant context guard.
"""

from shared_kernel.middleware.tenant_context import (
    TENANT_CONTEXT_STATE_KEY,
    TENANT_SWITCHBOARD_STATE_KEY,
    TenantContext,
)

__all__ = [
    "TENANT_CONTEXT_STATE_KEY",
    "TENANT_SWITCHBOARD_STATE_KEY",
    "TenantContext",
]
