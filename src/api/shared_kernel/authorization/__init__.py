"""Authorization primitives for subsite-aware access control.

This module provides shared authorization types and abstractions used across
bounded contexts.
"""

from shared_kernel.authorization.protocols import SubsiteAccessProvider
from shared_kernel.authorization.types import Permission, PermissionDescriptor

__all__ = [
    "Permission",
    "PermissionDescriptor",
    "SubsiteAccessProvider",
]
