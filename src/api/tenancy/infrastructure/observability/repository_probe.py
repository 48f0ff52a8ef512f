"""Domain probes for tenancy repositories.

Following Domain-Oriented Observability patterns, these probes capture
persistence events of the company registry and tenant user store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CompanyRepositoryProbe(Protocol):
    """Domain probe for company registry operations."""

    def company_created(self, company_id: str, slug: str, database: str) -> None:
        """Record that a company row was inserted."""
        ...

    def company_retrieved(self, company_id: str) -> None:
        """Record that a company was retrieved."""
        ...

    def company_not_found(self, identifier: str) -> None:
        """Record that a lookup found no company."""
        ...

    def duplicate_company(self, field: str, value: str) -> None:
        """Record that a unique company attribute was already taken."""
        ...

    def companies_listed(self, count: int) -> None:
        """Record that companies were listed."""
        ...

    def company_updated(self, company_id: str, fields: list[str]) -> None:
        """Record that company columns were updated."""
        ...

    def company_status_changed(self, company_id: str, status: str) -> None:
        """Record that a company's lifecycle status changed."""
        ...

    def company_soft_deleted(self, company_id: str) -> None:
        """Record that a company was soft-deleted."""
        ...

    def with_context(self, context: ObservationContext) -> CompanyRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCompanyRepositoryProbe:
    """Default implementation of CompanyRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultCompanyRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultCompanyRepositoryProbe(logger=self._logger, context=context)

    def company_created(self, company_id: str, slug: str, database: str) -> None:
        """Record that a company row was inserted."""
        self._logger.info(
            "company_created",
            company_id=company_id,
            slug=slug,
            database=database,
            **self._get_context_kwargs(),
        )

    def company_retrieved(self, company_id: str) -> None:
        """Record that a company was retrieved."""
        self._logger.debug(
            "company_retrieved",
            company_id=company_id,
            **self._get_context_kwargs(),
        )

    def company_not_found(self, identifier: str) -> None:
        """Record that a lookup found no company."""
        self._logger.debug(
            "company_not_found",
            identifier=identifier,
            **self._get_context_kwargs(),
        )

    def duplicate_company(self, field: str, value: str) -> None:
        """Record that a unique company attribute was already taken."""
        self._logger.warning(
            "duplicate_company",
            field=field,
            value=value,
            **self._get_context_kwargs(),
        )

    def companies_listed(self, count: int) -> None:
        """Record that companies were listed."""
        self._logger.debug(
            "companies_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def company_updated(self, company_id: str, fields: list[str]) -> None:
        """Record that company columns were updated."""
        self._logger.info(
            "company_updated",
            company_id=company_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def company_status_changed(self, company_id: str, status: str) -> None:
        """Record that a company's lifecycle status changed."""
        self._logger.info(
            "company_status_changed",
            company_id=company_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def company_soft_deleted(self, company_id: str) -> None:
        """Record that a company was soft-deleted."""
        self._logger.info(
            "company_soft_deleted",
            company_id=company_id,
            **self._get_context_kwargs(),
        )
