"""Protocol for company provisioning observability.

Defines the interface for domain probes that capture the progress of the
provisioning saga: each step, each compensation, and the final outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ProvisioningProbe(Protocol):
    """Domain probe for the provisioning saga."""

    def provisioning_started(self, name: str, owner_email: str) -> None:
        """Record that a registration began."""
        ...

    def step_succeeded(self, step: str, slug: str) -> None:
        """Record that a provisioning step completed."""
        ...

    def step_failed(self, step: str, slug: str, error: Exception) -> None:
        """Record that a provisioning step failed."""
        ...

    def database_already_exists(self, database: str) -> None:
        """Record that creation stopped because the database is present."""
        ...

    def compensation_skipped(
        self, step: str, action: str, slug: str, reason: str
    ) -> None:
        """Record that a compensating action was not applied."""
        ...

    def compensation_applied(self, step: str, action: str, slug: str) -> None:
        """Record that a compensating action ran after a failure."""
        ...

    def compensation_failed(
        self, step: str, action: str, slug: str, error: Exception
    ) -> None:
        """Record that a compensating action itself failed."""
        ...

    def provisioning_completed(
        self, company_id: str, slug: str, database: str, owner_id: str
    ) -> None:
        """Record that a company was fully provisioned."""
        ...

    def with_context(self, context: ObservationContext) -> ProvisioningProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultProvisioningProbe:
    """Default implementation of ProvisioningProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultProvisioningProbe:
        """Create a new probe with observation context bound."""
        return DefaultProvisioningProbe(logger=self._logger, context=context)

    def provisioning_started(self, name: str, owner_email: str) -> None:
        """Record that a registration began."""
        self._logger.info(
            "provisioning_started",
            name=name,
            owner_email=owner_email,
            **self._get_context_kwargs(),
        )

    def step_succeeded(self, step: str, slug: str) -> None:
        """Record that a provisioning step completed."""
        self._logger.debug(
            "provisioning_step_succeeded",
            step=step,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def step_failed(self, step: str, slug: str, error: Exception) -> None:
        """Record that a provisioning step failed."""
        self._logger.error(
            "provisioning_step_failed",
            step=step,
            slug=slug,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def database_already_exists(self, database: str) -> None:
        """Record that creation stopped because the database is present."""
        self._logger.warning(
            "provisioning_database_already_exists",
            database=database,
            **self._get_context_kwargs(),
        )

    def compensation_skipped(
        self, step: str, action: str, slug: str, reason: str
    ) -> None:
        """Record that a compensating action was not applied."""
        self._logger.warning(
            "provisioning_compensation_skipped",
            step=step,
            action=action,
            slug=slug,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def compensation_applied(self, step: str, action: str, slug: str) -> None:
        """Record that a compensating action ran after a failure."""
        self._logger.warning(
            "provisioning_compensation_applied",
            step=step,
            action=action,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def compensation_failed(
        self, step: str, action: str, slug: str, error: Exception
    ) -> None:
        """Record that a compensating action itself failed."""
        self._logger.error(
            "provisioning_compensation_failed",
            step=step,
            action=action,
            slug=slug,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def provisioning_completed(
        self, company_id: str, slug: str, database: str, owner_id: str
    ) -> None:
        """Record that a company was fully provisioned."""
        self._logger.info(
            "provisioning_completed",
            company_id=company_id,
            slug=slug,
            database=database,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )
