"""Protocol for company account service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CompanyServiceProbe(Protocol):
    """Domain probe for company account operations."""

    def company_settings_updated(self, company_id: str, fields: list[str]) -> None:
        """Record that account settings were changed."""
        ...

    def company_details_updated(self, company_id: str, fields: list[str]) -> None:
        """Record that the extended company profile was changed."""
        ...

    def immutable_fields_rejected(self, company_id: str, fields: list[str]) -> None:
        """Record that an update targeted fields that cannot be edited."""
        ...

    def with_context(self, context: ObservationContext) -> CompanyServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCompanyServiceProbe:
    """Default implementation of CompanyServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultCompanyServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultCompanyServiceProbe(logger=self._logger, context=context)

    def company_settings_updated(self, company_id: str, fields: list[str]) -> None:
        self._logger.info(
            "company_settings_updated",
            company_id=company_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def company_details_updated(self, company_id: str, fields: list[str]) -> None:
        self._logger.info(
            "company_details_updated",
            company_id=company_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def immutable_fields_rejected(self, company_id: str, fields: list[str]) -> None:
        self._logger.warning(
            "company_immutable_fields_rejected",
            company_id=company_id,
            fields=fields,
            **self._get_context_kwargs(),
        )
