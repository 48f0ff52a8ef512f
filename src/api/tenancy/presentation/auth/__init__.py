"""Authenticated user slice."""

from tenancy.presentation.auth.routes import router

__all__ = ["router"]
