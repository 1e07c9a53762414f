"""Repository protocols (ports) for the subsites bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from subsites.domain.aggregates import Group
from subsites.domain.value_objects import GroupId


@runtime_checkable
class IGroupRepository(Protocol):
    """Repository for Group aggregate persistence.

    Returns Group aggregates with their subsite links loaded. Reads of
    more than one group are scoped to the active subsite.
    """

    async def save(self, group: Group) -> None:
        """Persist a group aggregate.

        Inserts the group when it has no identity yet (assigning ``group.id``)
        and otherwise updates it, syncing its subsite links.

        Raises:
            GroupNotFoundError: If an existing group's row has disappeared
        """
        ...

    async def get_by_id(self, group_id: GroupId) -> Group | None:
        """Retrieve a group by its ID.

        Lookups by ID are not subsite scoped.
        """
        ...

    async def list_visible(self) -> list[Group]:
        """List the groups visible under the active subsite context."""
        ...

    async def count_visible(self) -> int:
        """Count the groups visible under the active subsite context."""
        ...

    async def add_subsite(self, group_id: GroupId, subsite_id: int) -> bool:
        """Link a persisted group to a subsite.

        Returns:
            True if the link was created, False if it already existed
        """
        ...

    async def delete(self, group_id: GroupId) -> bool:
        """Delete a group together with its subsite links.

        Returns:
            True if deleted, False if not found
        """
        ...
