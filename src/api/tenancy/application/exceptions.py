"""Application-level exceptions for the tenancy bounded context.

Two families:

- ``ResolutionError``: the request does not identify a usable tenant.
  The context guard maps them to 404 / 403 / 400 before any route runs.
- ``ProvisioningError``: a company registration step failed. Each subclass
  corresponds to one row of the provisioning compensation table.
"""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for tenant resolution failures."""

    code = "tenant_resolution_failed"

    def __init__(self, message: str, identifier: str | None = None):
        super().__init__(message)
        self.identifier = identifier


class TenantNotFoundError(ResolutionError):
    """No company is registered under the identifier."""

    code = "tenant_not_found"


class TenantInactiveError(ResolutionError):
    """The company exists but is not ACTIVE."""

    code = "tenant_inactive"

    def __init__(self, message: str, identifier: str | None = None, status: str = ""):
        super().__init__(message, identifier)
        self.status = status


class MalformedTenantIdentifierError(ResolutionError):
    """The identifier is missing or not a well-formed slug or host."""

    code = "tenant_identifier_malformed"


class ProvisioningError(Exception):
    """Base class for company provisioning failures."""

    code = "provisioning_failed"


class InvalidSlugError(ProvisioningError):
    """An explicitly requested slug is not well formed."""

    code = "slug_invalid"

    def __init__(self, slug: str, reason: str):
        super().__init__(f"Invalid slug '{slug}': {reason}")
        self.slug = slug
        self.reason = reason


class SlugConflictError(ProvisioningError):
    """An explicitly requested slug is reserved or already taken."""

    code = "slug_conflict"

    def __init__(self, slug: str, reason: str = "This slug is already taken"):
        super().__init__(f"Slug '{slug}' is not available: {reason}")
        self.slug = slug
        self.reason = reason


class DatabaseCreateFailedError(ProvisioningError):
    """The tenant database could not be created. Nothing was persisted."""

    code = "database_create_failed"

    def __init__(self, database: str):
        super().__init__(f"Failed to create database '{database}'")
        self.database = database


class RegistryWriteFailedError(ProvisioningError):
    """The company row could not be written.

    The database created by this run is dropped unless a registry row
    already claims it.
    """

    code = "registry_write_failed"

    def __init__(self, slug: str, database: str):
        super().__init__(f"Failed to register company '{slug}'")
        self.slug = slug
        self.database = database


class PostSetupFailedError(ProvisioningError):
    """A step after registration failed.

    ``suspended`` is False when suspending the company failed as well, in
    which case the registry row may still read ``active``.
    """

    code = "post_setup_failed"

    def __init__(
        self,
        company_id: str,
        step: str,
        cause: BaseException,
        suspended: bool = True,
    ):
        super().__init__(
            f"Provisioning step '{step}' failed for company {company_id}: {cause}"
        )
        self.company_id = company_id
        self.step = step
        self.cause = cause
        self.suspended = suspended


class AuthenticationError(Exception):
    """Credentials are missing or do not match a tenant user."""

    pass
