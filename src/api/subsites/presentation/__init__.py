"""Presentation layer for the subsites bounded context."""

from subsites.presentation.routes import router

__all__ = ["router"]
