"""Application services for the subsites bounded context."""

from subsites.application.services.group_service import GroupService

__all__ = [
    "GroupService",
]
