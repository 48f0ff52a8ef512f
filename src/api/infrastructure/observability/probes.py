"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database connection observability.

    This probe captures domain-significant events related to database
    engines and connectivity without exposing logging implementation details.
    """

    def connection_verified(self, database: str) -> None:
        """Record that a connectivity probe against a database succeeded."""
        ...

    def connection_failed(self, database: str, error: Exception) -> None:
        """Record that a database could not be reached."""
        ...

    def engine_created(self, database: str, pool_size: int) -> None:
        """Record that a connection pool was created for a database."""
        ...

    def engine_disposed(self, database: str) -> None:
        """Record that a database's connection pool was disposed."""
        ...

    def pool_closed(self, database: str) -> None:
        """Record that the landlord connection pool was closed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def connection_verified(self, database: str) -> None:
        """Record that a connectivity probe against a database succeeded."""
        self._logger.debug(
            "database_connection_verified",
            database=database,
            **self._get_context_kwargs(),
        )

    def connection_failed(self, database: str, error: Exception) -> None:
        """Record that a database could not be reached."""
        self._logger.error(
            "database_connection_failed",
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def engine_created(self, database: str, pool_size: int) -> None:
        """Record that a connection pool was created for a database."""
        self._logger.info(
            "database_engine_created",
            database=database,
            pool_size=pool_size,
            **self._get_context_kwargs(),
        )

    def engine_disposed(self, database: str) -> None:
        """Record that a database's connection pool was disposed."""
        self._logger.info(
            "database_engine_disposed",
            database=database,
            **self._get_context_kwargs(),
        )

    def pool_closed(self, database: str) -> None:
        """Record that the landlord connection pool was closed."""
        self._logger.info(
            "database_pool_closed",
            database=database,
            **self._get_context_kwargs(),
        )


class SwitchboardProbe(Protocol):
    """Domain probe for tenant connection switching."""

    def database_activated(self, database: str, generation: int) -> None:
        """Record that the tenant binding now points at a database."""
        ...

    def activation_reused(self, database: str) -> None:
        """Record that activate() was called for the already bound database."""
        ...

    def activation_rejected(
        self, current: str | None, requested: str, reason: str
    ) -> None:
        """Record that a switch was refused."""
        ...

    def switchboard_reset(self, database: str, generation: int) -> None:
        """Record that the tenant binding was cleared."""
        ...

    def with_context(self, context: ObservationContext) -> SwitchboardProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSwitchboardProbe:
    """Default implementation of SwitchboardProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSwitchboardProbe:
        """Create a new probe with observation context bound."""
        return DefaultSwitchboardProbe(logger=self._logger, context=context)

    def database_activated(self, database: str, generation: int) -> None:
        self._logger.debug(
            "tenant_database_activated",
            database=database,
            generation=generation,
            **self._get_context_kwargs(),
        )

    def activation_reused(self, database: str) -> None:
        self._logger.debug(
            "tenant_database_activation_reused",
            database=database,
            **self._get_context_kwargs(),
        )

    def activation_rejected(
        self, current: str | None, requested: str, reason: str
    ) -> None:
        self._logger.error(
            "tenant_database_activation_rejected",
            current=current,
            requested=requested,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def switchboard_reset(self, database: str, generation: int) -> None:
        self._logger.debug(
            "tenant_database_reset",
            database=database,
            generation=generation,
            **self._get_context_kwargs(),
        )
