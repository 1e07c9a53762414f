"""Shared middleware for cross-cutting concerns.

This module contains the request-scoped subsite context shared across
bounded contexts. The FastAPI dependency that resolves it from request
headers lives in the subsites bounded context.
"""

from shared_kernel.middleware.subsite_context import (
    MAIN_SITE_ID,
    NO_SUBSITE,
    SubsiteContext,
    current_subsite_context,
    set_subsite_context,
    use_subsite,
)

__all__ = [
    "MAIN_SITE_ID",
    "NO_SUBSITE",
    "SubsiteContext",
    "current_subsite_context",
    "set_subsite_context",
    "use_subsite",
]
