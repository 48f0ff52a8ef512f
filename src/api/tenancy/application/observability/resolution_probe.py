"""Protocol for tenant resolution observability.

Defines the interface for domain probes that capture how each request
was mapped to a company (or to a landlord route).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ResolutionProbe(Protocol):
    """Domain probe for tenant resolution."""

    def tenant_resolved(self, company_id: str, slug: str, source: str) -> None:
        """Record that a request identified an active company."""
        ...

    def landlord_route(self, path: str) -> None:
        """Record that a request targets a landlord route."""
        ...

    def tenant_not_found(self, identifier: str, source: str) -> None:
        """Record that no company matched the identifier."""
        ...

    def tenant_inactive(self, identifier: str, status: str) -> None:
        """Record that the matched company is not active."""
        ...

    def identifier_malformed(self, identifier: str, reason: str) -> None:
        """Record that the identifier could not be a slug or host."""
        ...

    def with_context(self, context: ObservationContext) -> ResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResolutionProbe:
    """Default implementation of ResolutionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultResolutionProbe(logger=self._logger, context=context)

    def tenant_resolved(self, company_id: str, slug: str, source: str) -> None:
        self._logger.debug(
            "tenant_resolved",
            company_id=company_id,
            slug=slug,
            source=source,
            **self._get_context_kwargs(),
        )

    def landlord_route(self, path: str) -> None:
        self._logger.debug(
            "tenant_resolution_landlord_route",
            path=path,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, identifier: str, source: str) -> None:
        self._logger.info(
            "tenant_resolution_not_found",
            identifier=identifier,
            source=source,
            **self._get_context_kwargs(),
        )

    def tenant_inactive(self, identifier: str, status: str) -> None:
        self._logger.warning(
            "tenant_resolution_inactive",
            identifier=identifier,
            status=status,
            **self._get_context_kwargs(),
        )

    def identifier_malformed(self, identifier: str, reason: str) -> None:
        self._logger.info(
            "tenant_resolution_malformed",
            identifier=identifier,
            reason=reason,
            **self._get_context_kwargs(),
        )
