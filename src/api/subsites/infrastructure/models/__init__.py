"""SQLAlchemy ORM models for the subsites bounded context.

These models map to database tables and are used by repository
implementations and the group query scope.
"""

from subsites.infrastructure.models.group import GroupModel, GroupSubsiteModel

__all__ = [
    "GroupModel",
    "GroupSubsiteModel",
]
