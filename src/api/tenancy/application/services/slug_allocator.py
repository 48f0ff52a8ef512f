"""Slug allocation against the company registry.

Combines the pure slug rules from the domain with registry availability
checks. A slug is available when it is well formed, not reserved, and
neither it, the subdomain of the same name, nor its derived database name
is held by any company (soft-deleted companies included).
"""

from __future__ import annotations

from tenancy.application.exceptions import InvalidSlugError, SlugConflictError
from tenancy.domain import slugs
from tenancy.ports.repositories import ICompanyRepository

SUGGESTION_SUFFIXES = ("app", "hub", "pro", "hq", "team", "co")

# Numbered suggestions tried after the word suffixes
_MAX_NUMBERED_SUGGESTIONS = 20


class SlugAllocator:
    """Chooses unique slugs for new companies."""

    def __init__(
        self,
        repository: ICompanyRepository,
        database_prefix: str = "tenant_",
        max_suffix_attempts: int = 1000,
    ) -> None:
        self._repository = repository
        self._database_prefix = database_prefix
        self._max_suffix_attempts = max_suffix_attempts

    async def is_available(self, slug: str) -> bool:
        """Whether ``slug`` is well formed, not reserved, and unclaimed."""
        if slugs.format_error(slug) is not None:
            return False
        if await self._repository.slug_exists(slug):
            return False
        if await self._repository.subdomain_exists(slug):
            return False
        database = slugs.database_name_for(slug, self._database_prefix)
        return not await self._repository.database_name_taken(database)

    async def allocate(self, name: str, explicit_slug: str | None = None) -> str:
        """Pick the slug for a new company.

        With ``explicit_slug`` the caller's choice is validated and either
        accepted or rejected; otherwise a slug is derived from ``name`` and
        numbered until it is unique.

        Raises:
            InvalidSlugError: The explicit slug is not well formed
            SlugConflictError: The explicit slug is reserved or taken
        """
        if explicit_slug:
            return await self._accept_explicit(explicit_slug)

        base = slugs.sanitize(name)
        if await self.is_available(base):
            return base

        numbered_base = base[: slugs.UNIQUE_BASE_MAX_LENGTH].rstrip("-")
        for counter in range(1, self._max_suffix_attempts + 1):
            candidate = f"{numbered_base}-{counter}"
            if await self.is_available(candidate):
                return candidate

        return f"{numbered_base}-{slugs.random_suffix()}"

    async def suggest(self, name: str, count: int = 3) -> list[str]:
        """Return up to ``count`` available slugs derived from ``name``."""
        base = slugs.sanitize(name)
        short_base = base[: slugs.UNIQUE_BASE_MAX_LENGTH].rstrip("-")

        candidates = [base]
        candidates += [f"{short_base}-{suffix}" for suffix in SUGGESTION_SUFFIXES]
        candidates += [
            f"{short_base}-{n}" for n in range(1, _MAX_NUMBERED_SUGGESTIONS + 1)
        ]

        suggestions: list[str] = []
        for candidate in candidates:
            if len(suggestions) >= count:
                break
            if candidate not in suggestions and await self.is_available(candidate):
                suggestions.append(candidate)
        return suggestions

    async def _accept_explicit(self, explicit_slug: str) -> str:
        slug = explicit_slug.strip().lower()

        if slugs.is_reserved(slug):
            raise SlugConflictError(slug, "This slug is reserved and cannot be used")

        reason = slugs.format_error(slug)
        if reason is not None:
            raise InvalidSlugError(slug, reason)

        if not await self.is_available(slug):
            raise SlugConflictError(slug)
        return slug
