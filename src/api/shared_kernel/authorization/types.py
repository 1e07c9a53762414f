"""Authorization type definitions.

Defines the permission codes this platform checks and the descriptor
shape used to advertise permissions to the external permission registry.
These enums ensure type safety and prevent hardcoded strings across the codebase.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Permission(StrEnum):
    """Permission codes understood by the capability lookup.

    Each value corresponds to a permission code held in the external
    permission registry.
    """

    ADMIN = "ADMIN"
    SECURITY_ADMIN = "CMS_ACCESS_SecurityAdmin"
    SECURITY_SUBSITE_GROUP = "SECURITY_SUBSITE_GROUP"


@dataclass(frozen=True)
class PermissionDescriptor:
    """Describes a permission for display in the permission registry.

    Attributes:
        name: Human-readable permission name
        category: Grouping heading the registry lists the permission under
        help: Longer explanation of what the permission grants
        sort: Ordering weight within the category
    """

    name: str
    category: str
    help: str
    sort: int = 0
