"""Enabled modules slice."""

from tenancy.presentation.modules.routes import router

__all__ = ["router"]
