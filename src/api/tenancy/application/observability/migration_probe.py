"""Protocol for tenant schema migration observability.

Captures the per-tenant progress of batch and single-tenant migrations
run from the command line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MigrationProbe(Protocol):
    """Domain probe for tenant schema migrations."""

    def migration_started(self, slug: str, database: str, fresh: bool) -> None:
        """Record that a tenant migration began."""
        ...

    def migration_succeeded(self, slug: str, database: str, seeded_roles: int) -> None:
        """Record that a tenant migration completed."""
        ...

    def migration_failed(self, slug: str, database: str, error: Exception) -> None:
        """Record that a tenant migration failed."""
        ...

    def batch_completed(self, succeeded: int, failed: int) -> None:
        """Record the totals of a multi-tenant migration run."""
        ...

    def with_context(self, context: ObservationContext) -> MigrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMigrationProbe:
    """Default implementation of MigrationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultMigrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultMigrationProbe(logger=self._logger, context=context)

    def migration_started(self, slug: str, database: str, fresh: bool) -> None:
        self._logger.info(
            "tenant_migration_started",
            slug=slug,
            database=database,
            fresh=fresh,
            **self._get_context_kwargs(),
        )

    def migration_succeeded(self, slug: str, database: str, seeded_roles: int) -> None:
        self._logger.info(
            "tenant_migration_succeeded",
            slug=slug,
            database=database,
            seeded_roles=seeded_roles,
            **self._get_context_kwargs(),
        )

    def migration_failed(self, slug: str, database: str, error: Exception) -> None:
        self._logger.error(
            "tenant_migration_failed",
            slug=slug,
            database=database,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def batch_completed(self, succeeded: int, failed: int) -> None:
        self._logger.info(
            "tenant_migration_batch_completed",
            succeeded=succeeded,
            failed=failed,
            **self._get_context_kwargs(),
        )
