"""Tenant context guard.

Pure ASGI middleware that runs before routing, dependencies and
authentication. For every HTTP request it:

1. resolves the company from the host and path (landlord lookup),
2. binds a request-owned ``ConnectionSwitchboard`` to the company database
   and probes the connection,
3. publishes the ``TenantContext`` and the switchboard in the request
   state and binds the tenant into the structlog context variables,
4. tears all of it down when the request ends, however it ends.

Per-request states::

    UNRESOLVED -> RESOLVING -> ACTIVE -> TORN_DOWN
                      |
                      +------> FAILED

Requests for landlord routes pass through without a tenant binding.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from enum import StrEnum

import structlog
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.database.switchboard import (
    ConnectionSwitchboard,
    TenantEngineRegistry,
)
from shared_kernel.middleware import (
    TENANT_CONTEXT_STATE_KEY,
    TENANT_SWITCHBOARD_STATE_KEY,
    TenantContext,
)
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.observability_context import ObservationContext
from tenancy.application.exceptions import (
    MalformedTenantIdentifierError,
    ResolutionError,
    TenantInactiveError,
    TenantNotFoundError,
)
from tenancy.application.resolution import TenantResolver

ResolverFactory = Callable[[], AbstractAsyncContextManager[TenantResolver]]

_LOG_CONTEXT_KEYS = ("tenant_slug", "company_id")

DATABASE_UNAVAILABLE_CODE = "tenant_database_unavailable"
RESOLUTION_UNAVAILABLE_CODE = "tenant_resolution_unavailable"


class GuardState(StrEnum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    ACTIVE = "active"
    FAILED = "failed"
    TORN_DOWN = "torn_down"


_STATUS_CODES: dict[type[ResolutionError], int] = {
    TenantNotFoundError: 404,
    TenantInactiveError: 403,
    MalformedTenantIdentifierError: 400,
}


def resolution_status_code(error: ResolutionError) -> int:
    """HTTP status for a resolution failure."""
    return _STATUS_CODES.get(type(error), 400)


def error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    return JSONResponse({"detail": detail, "code": code}, status_code=status_code)


class TenantContextMiddleware:
    """ASGI middleware establishing the tenant context of each request."""

    def __init__(
        self,
        app: ASGIApp,
        resolver_factory: ResolverFactory,
        engine_registry: Callable[[], TenantEngineRegistry],
        verify_connection: bool = True,
        probe: TenantContextProbe | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The wrapped ASGI application
            resolver_factory: Opens a landlord session and yields a resolver
            engine_registry: Returns the process-wide tenant engine registry
            verify_connection: Probe the tenant database before routing
            probe: Optional domain probe for observability
        """
        self.app = app
        self._resolver_factory = resolver_factory
        self._engine_registry = engine_registry
        self._verify_connection = verify_connection
        self._probe = probe or DefaultTenantContextProbe()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        state = GuardState.RESOLVING
        try:
            async with self._resolver_factory() as resolver:
                outcome = await resolver.resolve(headers.get("host"), scope["path"])
        except ResolutionError as e:
            state = GuardState.FAILED
            status_code = resolution_status_code(e)
            self._probe.request_rejected(status_code, e.code, e.identifier)
            await error_response(status_code, str(e), e.code)(scope, receive, send)
            return
        except (SQLAlchemyError, OSError) as e:
            state = GuardState.FAILED
            self._probe.tenant_resolution_failed(e)
            response = error_response(
                500, "Tenant registry is unavailable", RESOLUTION_UNAVAILABLE_CODE
            )
            await response(scope, receive, send)
            return

        if outcome.is_landlord:
            await self.app(scope, receive, send)
            return

        company = outcome.company
        assert company is not None and outcome.source is not None
        probe = self._probe.with_context(
            ObservationContext().with_tenant(
                company.id.value, company.slug, company.database
            )
        )
        switchboard = ConnectionSwitchboard(self._engine_registry())
        request_state = scope.setdefault("state", {})

        try:
            try:
                if not company.database:
                    raise DatabaseConnectionError(
                        f"Company '{company.slug}' has no database configured"
                    )
                await switchboard.activate(
                    company.database, verify=self._verify_connection
                )
            except DatabaseConnectionError as e:
                state = GuardState.FAILED
                probe.tenant_activation_failed(company.database, e)
                response = error_response(
                    500, "Tenant database is unavailable", DATABASE_UNAVAILABLE_CODE
                )
                await response(scope, receive, send)
                return

            request_state[TENANT_CONTEXT_STATE_KEY] = TenantContext(
                company_id=company.id.value,
                slug=company.slug,
                database=company.database,
                source=outcome.source.value,
            )
            request_state[TENANT_SWITCHBOARD_STATE_KEY] = switchboard
            structlog.contextvars.bind_contextvars(
                tenant_slug=company.slug,
                company_id=company.id.value,
            )
            state = GuardState.ACTIVE
            probe.tenant_context_established(
                company.id.value, company.slug, company.database, outcome.source.value
            )

            await self.app(scope, receive, send)
        finally:
            try:
                await switchboard.reset()
            finally:
                request_state.pop(TENANT_CONTEXT_STATE_KEY, None)
                request_state.pop(TENANT_SWITCHBOARD_STATE_KEY, None)
                structlog.contextvars.unbind_contextvars(*_LOG_CONTEXT_KEYS)
                if state == GuardState.ACTIVE:
                    state = GuardState.TORN_DOWN
                probe.tenant_context_torn_down(
                    company.slug, company.database, state.value
                )
