"""Capability lookup protocol.

Defines the interface the subsites context uses to ask which subsites a
caller administers, allowing for swappable implementations (the platform
permission registry, a mock in tests).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol


class SubsiteAccessProvider(Protocol):
    """Protocol for looking up the subsites a caller may administer."""

    async def accessible_subsites(
        self,
        user_id: str,
        permissions: Sequence[str],
        include_main_site: bool = False,
    ) -> Mapping[int, str]:
        """List the subsites where the caller holds any of the permissions.

        Args:
            user_id: The caller to look up
            permissions: Permission codes; holding any one of them is enough
            include_main_site: Whether to include the main site (ID 0) when
                the caller holds the permission globally

        Returns:
            Mapping of subsite ID to subsite title
        """
        ...
