"""Domain probe for the tenant context guard.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the per-request tenant lifecycle: a tenant
context being established, a request being rejected before it reaches a
route, and the context being torn down.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context guard operations."""

    def tenant_context_established(
        self,
        company_id: str,
        slug: str,
        database: str,
        source: str,
    ) -> None:
        """Record that a request is bound to a tenant database."""
        ...

    def request_rejected(
        self,
        status_code: int,
        code: str,
        identifier: str | None,
    ) -> None:
        """Record that a request was rejected before reaching a route."""
        ...

    def tenant_resolution_failed(self, error: Exception) -> None:
        """Record that the company registry could not be queried."""
        ...

    def tenant_activation_failed(
        self,
        database: str,
        error: Exception,
    ) -> None:
        """Record that the tenant database could not be activated."""
        ...

    def tenant_context_torn_down(
        self,
        slug: str,
        database: str,
        state: str,
    ) -> None:
        """Record that the tenant binding of a request was released."""
        ...

    def company_slug_mismatch(
        self,
        path_slug: str,
        resolved_slug: str,
    ) -> None:
        """Record that the path slug did not match the resolved company."""
        ...

    def subscription_inactive(
        self,
        company_id: str,
    ) -> None:
        """Record that a company without an active subscription was refused."""
        ...

    def module_disabled(
        self,
        company_id: str,
        module: str,
    ) -> None:
        """Record that a request targeted a module the company has not enabled."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_context_established(
        self,
        company_id: str,
        slug: str,
        database: str,
        source: str,
    ) -> None:
        """Record that a request is bound to a tenant database."""
        self._logger.debug(
            "tenant_context_established",
            company_id=company_id,
            slug=slug,
            database=database,
            source=source,
            **self._get_context_kwargs(),
        )

    def request_rejected(
        self,
        status_code: int,
        code: str,
        identifier: str | None,
    ) -> None:
        """Record that a request was rejected before reaching a route."""
        self._logger.warning(
            "tenant_context_request_rejected",
            status_code=status_code,
            code=code,
            identifier=identifier,
            **self._get_context_kwargs(),
        )

    def tenant_resolution_failed(self, error: Exception) -> None:
        """Record that the company registry could not be queried."""
        self._logger.error(
            "tenant_context_resolution_failed",
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def tenant_activation_failed(
        self,
        database: str,
        error: Exception,
    ) -> None:
        """Record that the tenant database could not be activated."""
        self._logger.error(
            "tenant_context_activation_failed",
            database=database,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def tenant_context_torn_down(
        self,
        slug: str,
        database: str,
        state: str,
    ) -> None:
        """Record that the tenant binding of a request was released."""
        self._logger.debug(
            "tenant_context_torn_down",
            slug=slug,
            database=database,
            state=state,
            **self._get_context_kwargs(),
        )

    def company_slug_mismatch(
        self,
        path_slug: str,
        resolved_slug: str,
    ) -> None:
        """Record that the path slug did not match the resolved company."""
        self._logger.warning(
            "tenant_context_slug_mismatch",
            path_slug=path_slug,
            resolved_slug=resolved_slug,
            **self._get_context_kwargs(),
        )

    def subscription_inactive(
        self,
        company_id: str,
    ) -> None:
        """Record that a company without an active subscription was refused."""
        self._logger.info(
            "tenant_context_subscription_inactive",
            company_id=company_id,
            **self._get_context_kwargs(),
        )

    def module_disabled(
        self,
        company_id: str,
        module: str,
    ) -> None:
        """Record that a request targeted a module the company has not enabled."""
        self._logger.info(
            "tenant_context_module_disabled",
            company_id=company_id,
            module=module,
            **self._get_context_kwargs(),
        )
