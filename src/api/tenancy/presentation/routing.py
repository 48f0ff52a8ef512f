"""URL layout of tenant routes for each resolution strategy."""

from __future__ import annotations

from infrastructure.settings import ResolutionStrategy, TenancySettings


def tenant_api_prefix(strategy: ResolutionStrategy) -> str:
    """Prefix under which tenant routes are mounted.

    Path mode embeds the company slug: ``/{company_slug}/api``. Host mode
    identifies the company by host name, so routes live under ``/api``.
    """
    if strategy == ResolutionStrategy.HOST:
        return "/api"
    return "/{company_slug}/api"


def tenant_api_base(slug: str, settings: TenancySettings, scheme: str = "https") -> str:
    """Where the API of a newly registered company can be reached."""
    if settings.resolution_strategy == ResolutionStrategy.HOST:
        return f"{scheme}://{slug}.{settings.root_domain}/api"
    return f"/{slug}/api"
