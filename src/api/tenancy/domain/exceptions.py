"""Domain exceptions for the tenancy bounded context.

These represent violated business rules on the aggregates themselves,
independent of persistence.
"""


class ModuleNotAvailableError(Exception):
    """Raised when enabling a module that is not offered yet."""

    def __init__(self, module: str):
        super().__init__(f"Module '{module}' is not available")
        self.module = module


class ImmutableCompanyFieldError(Exception):
    """Raised when a change targets a field that cannot be edited.

    Routing identity (slug, subdomain, database) and lifecycle fields are
    owned by provisioning and are never changed through account settings.
    """

    def __init__(self, fields: list[str]):
        super().__init__(f"Fields cannot be updated: {', '.join(sorted(fields))}")
        self.fields = fields
