"""Company account slice: settings and extended profile."""

from tenancy.presentation.account.routes import router

__all__ = ["router"]
