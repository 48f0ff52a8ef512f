"""Registry exceptions for the tenancy bounded context.

These exceptions represent errors raised by repository operations on the
company registry. They are caught and handled by the application layer.
"""


class RegistryError(Exception):
    """Base class for company registry failures."""

    pass


class CompanyNotFoundError(RegistryError):
    """Raised when a company cannot be found in the registry."""

    def __init__(self, identifier: str):
        super().__init__(f"Company '{identifier}' not found")
        self.identifier = identifier


class DuplicateCompanyError(RegistryError):
    """Raised when a unique company attribute is already taken.

    ``field`` names the conflicting attribute: slug, subdomain, domain or
    database. Soft-deleted companies still hold their identifiers.
    """

    def __init__(self, field: str, value: str):
        super().__init__(f"Company {field} '{value}' is already taken")
        self.field = field
        self.value = value


class UserNotFoundError(Exception):
    """Raised when a tenant user cannot be found."""

    pass


class RoleNotFoundError(Exception):
    """Raised when granting a role that was never seeded in the tenant."""

    pass
