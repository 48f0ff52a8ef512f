"""Tenant resolution: mapping a request (host, path) to a company.

The resolver is pure with respect to application state. It reads the
registry through ``ICompanyRepository`` and returns a ``ResolutionOutcome``
or raises a ``ResolutionError``; it never binds a database connection.

Path strategy (canonical)::

    /{slug}/api/...            -> company looked up by slug
    /, /registration/..., ...  -> landlord route (reserved first segment)

A host that is neither the root domain nor a local host is tried as a
custom domain first.

Host strategy (legacy)::

    {root}              -> landlord route
    {sub}.{root}        -> company looked up by subdomain
    anything else       -> company looked up by custom domain
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from infrastructure.settings import ResolutionStrategy
from tenancy.application.exceptions import (
    MalformedTenantIdentifierError,
    TenantInactiveError,
    TenantNotFoundError,
)
from tenancy.application.observability import (
    DefaultResolutionProbe,
    ResolutionProbe,
)
from tenancy.domain import slugs
from tenancy.domain.aggregates import Company
from tenancy.domain.value_objects import CompanyStatus
from tenancy.ports.repositories import ICompanyRepository

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class ResolutionSource(StrEnum):
    """Which request attribute identified the company."""

    PATH = "path"
    SUBDOMAIN = "subdomain"
    DOMAIN = "domain"


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of resolving a request.

    Either ``company`` is set (a tenant route) or ``is_landlord`` is True.
    """

    company: Company | None = None
    identifier: str | None = None
    source: ResolutionSource | None = None

    @property
    def is_landlord(self) -> bool:
        return self.company is None

    @classmethod
    def landlord(cls) -> ResolutionOutcome:
        return cls()


def normalize_host(host: str | None) -> str:
    """Lowercase a Host header value and strip its port."""
    if not host:
        return ""
    host = host.strip().lower()
    if host.startswith("["):
        # IPv6 literal such as [::1]:8000
        return host[1:].split("]", 1)[0]
    return host.split(":", 1)[0]


def first_path_segment(path: str) -> str:
    return path.lstrip("/").split("/", 1)[0]


class TenantResolver:
    """Resolves the company addressed by a request."""

    def __init__(
        self,
        repository: ICompanyRepository,
        strategy: ResolutionStrategy = ResolutionStrategy.PATH,
        root_domain: str = "localhost",
        reserved_prefixes: Iterable[str] = (),
        probe: ResolutionProbe | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            repository: Company registry bound to a landlord session
            strategy: PATH (canonical) or HOST (legacy)
            root_domain: The application's own host name, without port
            reserved_prefixes: First path segments that denote landlord routes
            probe: Optional domain probe for observability
        """
        self._repository = repository
        self._strategy = ResolutionStrategy(strategy)
        self._root_domain = normalize_host(root_domain)
        self._reserved_prefixes = frozenset(p.lower() for p in reserved_prefixes)
        self._probe = probe or DefaultResolutionProbe()

    @property
    def strategy(self) -> ResolutionStrategy:
        return self._strategy

    async def resolve(self, host: str | None, path: str) -> ResolutionOutcome:
        """Resolve a request to a company or a landlord route.

        Raises:
            TenantNotFoundError: No company matches the identifier
            TenantInactiveError: The company exists but is not ACTIVE
            MalformedTenantIdentifierError: The identifier is missing or invalid
        """
        hostname = normalize_host(host)
        if self._strategy == ResolutionStrategy.HOST:
            return await self._resolve_by_host(hostname, path)
        return await self._resolve_by_path(hostname, path)

    async def _resolve_by_path(self, hostname: str, path: str) -> ResolutionOutcome:
        if hostname and not self._is_main_host(hostname):
            return await self._lookup_domain(hostname)

        segment = first_path_segment(path)
        if not segment or segment.lower() in self._reserved_prefixes:
            self._probe.landlord_route(path)
            return ResolutionOutcome.landlord()

        reason = slugs.format_error(segment)
        if reason is not None and not slugs.is_reserved(segment):
            self._probe.identifier_malformed(segment, reason)
            raise MalformedTenantIdentifierError(reason, identifier=segment)

        company = await self._repository.get_by_slug(segment, active_only=False)
        return self._accept(company, segment, ResolutionSource.PATH)

    async def _resolve_by_host(self, hostname: str, path: str) -> ResolutionOutcome:
        if not hostname:
            self._probe.identifier_malformed("", "missing host")
            raise MalformedTenantIdentifierError("Host header is required")

        if self._is_main_host(hostname):
            self._probe.landlord_route(path)
            return ResolutionOutcome.landlord()

        suffix = f".{self._root_domain}"
        if hostname.endswith(suffix):
            subdomain = hostname[: -len(suffix)]
            reason = slugs.format_error(subdomain)
            if reason is not None and not slugs.is_reserved(subdomain):
                self._probe.identifier_malformed(subdomain, reason)
                raise MalformedTenantIdentifierError(reason, identifier=subdomain)

            company = await self._repository.get_by_subdomain(
                subdomain, active_only=False
            )
            return self._accept(company, subdomain, ResolutionSource.SUBDOMAIN)

        return await self._lookup_domain(hostname)

    async def _lookup_domain(self, hostname: str) -> ResolutionOutcome:
        company = await self._repository.get_by_domain(hostname, active_only=False)
        return self._accept(company, hostname, ResolutionSource.DOMAIN)

    def _is_main_host(self, hostname: str) -> bool:
        return hostname == self._root_domain or hostname in LOCAL_HOSTS

    def _accept(
        self, company: Company | None, identifier: str, source: ResolutionSource
    ) -> ResolutionOutcome:
        if company is None:
            self._probe.tenant_not_found(identifier, source.value)
            raise TenantNotFoundError(
                f"Company '{identifier}' not found", identifier=identifier
            )

        if company.status != CompanyStatus.ACTIVE:
            self._probe.tenant_inactive(identifier, company.status.value)
            raise TenantInactiveError(
                f"Company '{identifier}' is {company.status.value}",
                identifier=identifier,
                status=company.status.value,
            )

        self._probe.tenant_resolved(company.id.value, company.slug, source.value)
        return ResolutionOutcome(company=company, identifier=identifier, source=source)
