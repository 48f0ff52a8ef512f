"""Company registration slice: options, slug helpers and sign-up."""

from tenancy.presentation.registration.routes import router

__all__ = ["router"]
