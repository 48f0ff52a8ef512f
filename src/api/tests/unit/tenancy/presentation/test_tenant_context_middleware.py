"""Unit tests for the tenant context guard middleware.

The guard runs against an in-memory registry and fake tenant engines, so
activation, rejection and teardown can be observed without PostgreSQL.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import structlog
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from shared_kernel.middleware import (
    TENANT_CONTEXT_STATE_KEY,
    TENANT_SWITCHBOARD_STATE_KEY,
)
from tenancy.application.exceptions import ResolutionError, TenantNotFoundError
from tenancy.application.resolution import TenantResolver
from tenancy.domain.value_objects import CompanyStatus
from tenancy.presentation.middleware import (
    DATABASE_UNAVAILABLE_CODE,
    RESOLUTION_UNAVAILABLE_CODE,
    TenantContextMiddleware,
    resolution_status_code,
)


@pytest.fixture(autouse=True)
def clean_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def companies(company_repository, make_company):
    ahmed = make_company("ahmed-tech")
    globex = make_company("globex")
    dormant = make_company("dormant-co", status=CompanyStatus.SUSPENDED)
    company_repository.add(ahmed, globex, dormant)
    return {"ahmed-tech": ahmed, "globex": globex, "dormant-co": dormant}


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def seen() -> list:
    """Switchboards and log contexts observed by route handlers."""
    return []


@pytest.fixture
def resolver_factory(company_repository):
    @asynccontextmanager
    async def factory():
        yield TenantResolver(
            company_repository,
            root_domain="salesdesk.test",
            reserved_prefixes=("registration", "health"),
        )

    return factory


@pytest.fixture
def app(resolver_factory, engine_registry, probe, seen) -> FastAPI:
    app = FastAPI()

    @app.get("/{company_slug}/api/whoami")
    async def whoami(request: Request, company_slug: str):
        context = getattr(request.state, TENANT_CONTEXT_STATE_KEY)
        switchboard = getattr(request.state, TENANT_SWITCHBOARD_STATE_KEY)
        seen.append(switchboard)
        # Yield so concurrent requests interleave
        await asyncio.sleep(0.01)
        return {
            "slug": context.slug,
            "database": context.database,
            "source": context.source,
            "bound_to": switchboard.current_target,
            "log_slug": structlog.contextvars.get_contextvars().get("tenant_slug"),
        }

    @app.get("/{company_slug}/api/boom")
    async def boom(request: Request, company_slug: str):
        seen.append(getattr(request.state, TENANT_SWITCHBOARD_STATE_KEY))
        raise RuntimeError("handler failed")

    @app.get("/registration/options")
    async def options(request: Request):
        return {"tenant": getattr(request.state, TENANT_CONTEXT_STATE_KEY, None)}

    app.add_middleware(
        TenantContextMiddleware,
        resolver_factory=resolver_factory,
        engine_registry=lambda: engine_registry,
        probe=probe,
    )
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://localhost") as client:
        yield client


class TestResolutionFailures:
    """Requests that cannot be resolved never reach a route."""

    @pytest.mark.asyncio
    async def test_unknown_company(self, client, companies, probe, engine_registry):
        response = await client.get("/initech/api/whoami")

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Company 'initech' not found",
            "code": "tenant_not_found",
        }
        probe.request_rejected.assert_called_once_with(
            404, "tenant_not_found", "initech"
        )
        assert engine_registry.databases == []

    @pytest.mark.asyncio
    async def test_inactive_company(self, client, companies):
        response = await client.get("/dormant-co/api/whoami")

        assert response.status_code == 403
        assert response.json()["code"] == "tenant_inactive"

    @pytest.mark.asyncio
    async def test_malformed_slug(self, client, companies):
        response = await client.get("/Ahmed_Tech/api/whoami")

        assert response.status_code == 400
        assert response.json()["code"] == "tenant_identifier_malformed"

    @pytest.mark.asyncio
    async def test_unreachable_database(
        self, client, companies, probe, unreachable_databases
    ):
        unreachable_databases.add("tenant_ahmed_tech")

        response = await client.get("/ahmed-tech/api/whoami")

        assert response.status_code == 500
        assert response.json() == {
            "detail": "Tenant database is unavailable",
            "code": DATABASE_UNAVAILABLE_CODE,
        }
        request_probe = probe.with_context.return_value
        request_probe.tenant_activation_failed.assert_called_once()
        request_probe.tenant_context_established.assert_not_called()
        request_probe.tenant_context_torn_down.assert_called_once_with(
            "ahmed-tech", "tenant_ahmed_tech", "failed"
        )

    @pytest.mark.asyncio
    async def test_registry_unavailable(self, engine_registry, probe):
        @asynccontextmanager
        async def failing_factory():
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))
            yield

        app = FastAPI()
        app.add_middleware(
            TenantContextMiddleware,
            resolver_factory=failing_factory,
            engine_registry=lambda: engine_registry,
            probe=probe,
        )
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://localhost") as client:
            response = await client.get("/ahmed-tech/api/whoami")

        assert response.status_code == 500
        assert response.json() == {
            "detail": "Tenant registry is unavailable",
            "code": RESOLUTION_UNAVAILABLE_CODE,
        }
        probe.tenant_resolution_failed.assert_called_once()
        assert engine_registry.databases == []

    def test_generic_resolution_error_maps_to_bad_request(self):
        assert resolution_status_code(ResolutionError("no tenant")) == 400
        assert resolution_status_code(TenantNotFoundError("x")) == 404


class TestActiveRequests:
    @pytest.mark.asyncio
    async def test_route_sees_bound_context(self, client, companies):
        response = await client.get("/ahmed-tech/api/whoami")

        assert response.status_code == 200
        assert response.json() == {
            "slug": "ahmed-tech",
            "database": "tenant_ahmed_tech",
            "source": "path",
            "bound_to": "tenant_ahmed_tech",
            "log_slug": "ahmed-tech",
        }

    @pytest.mark.asyncio
    async def test_landlord_route_passes_through(
        self, client, companies, engine_registry, probe
    ):
        response = await client.get("/registration/options")

        assert response.status_code == 200
        assert response.json() == {"tenant": None}
        assert engine_registry.databases == []
        probe.with_context.assert_not_called()

    @pytest.mark.asyncio
    async def test_connection_is_verified(self, client, companies, engine_registry):
        await client.get("/ahmed-tech/api/whoami")

        engine = engine_registry.get_engine("tenant_ahmed_tech")
        assert engine.executed == ["SELECT 1"]


class TestTeardown:
    """The binding is released however the request ends."""

    @pytest.mark.asyncio
    async def test_after_success(self, client, companies, probe, seen):
        await client.get("/ahmed-tech/api/whoami")

        (switchboard,) = seen
        assert switchboard.is_active is False
        assert "tenant_slug" not in structlog.contextvars.get_contextvars()
        probe.with_context.return_value.tenant_context_torn_down.assert_called_once_with(
            "ahmed-tech", "tenant_ahmed_tech", "torn_down"
        )

    @pytest.mark.asyncio
    async def test_after_handler_exception(self, client, companies, probe, seen):
        response = await client.get("/ahmed-tech/api/boom")

        assert response.status_code == 500
        (switchboard,) = seen
        assert switchboard.is_active is False
        assert "company_id" not in structlog.contextvars.get_contextvars()
        probe.with_context.return_value.tenant_context_torn_down.assert_called_once()

    @pytest.mark.asyncio
    async def test_after_cancellation(
        self, resolver_factory, engine_registry, companies, seen
    ):
        async def cancelled_app(scope, receive, send):
            seen.append(scope["state"][TENANT_SWITCHBOARD_STATE_KEY])
            raise asyncio.CancelledError

        middleware = TenantContextMiddleware(
            cancelled_app,
            resolver_factory=resolver_factory,
            engine_registry=lambda: engine_registry,
            probe=MagicMock(),
        )
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/globex/api/whoami",
            "headers": [(b"host", b"localhost")],
        }

        with pytest.raises(asyncio.CancelledError):
            await middleware(scope, MagicMock(), MagicMock())

        (switchboard,) = seen
        assert switchboard.is_active is False
        assert TENANT_CONTEXT_STATE_KEY not in scope["state"]
        assert TENANT_SWITCHBOARD_STATE_KEY not in scope["state"]


class TestIsolation:
    @pytest.mark.asyncio
    async def test_concurrent_requests_stay_on_their_own_tenant(
        self, client, companies, seen
    ):
        paths = ["/ahmed-tech/api/whoami", "/globex/api/whoami"] * 5

        responses = await asyncio.gather(*(client.get(path) for path in paths))

        for path, response in zip(paths, responses, strict=True):
            slug = path.split("/")[1]
            body = response.json()
            assert body["slug"] == slug
            assert body["bound_to"] == f"tenant_{slug.replace('-', '_')}"
            assert body["log_slug"] == slug
        assert len({id(switchboard) for switchboard in seen}) == len(paths)


class TestNonHttpScopes:
    @pytest.mark.asyncio
    async def test_lifespan_passes_through(self, resolver_factory, engine_registry):
        calls = []

        async def inner(scope, receive, send):
            calls.append(scope["type"])

        middleware = TenantContextMiddleware(
            inner,
            resolver_factory=resolver_factory,
            engine_registry=lambda: engine_registry,
        )

        await middleware({"type": "lifespan"}, MagicMock(), MagicMock())

        assert calls == ["lifespan"]
