"""Group application service for the subsites bounded context.

Orchestrates group creation, subsite access changes and deletion, running
lifecycle hooks and edit authorization inside the database transaction.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.middleware.subsite_context import (
    MAIN_SITE_ID,
    SubsiteContext,
    current_subsite_context,
)
from subsites.application.access import GroupAccessEvaluator
from subsites.application.lifecycle import GroupLifecycleHooks
from subsites.application.observability import (
    DefaultGroupServiceProbe,
    GroupServiceProbe,
)
from subsites.application.value_objects import AccessOptions
from subsites.domain.aggregates import Group
from subsites.domain.value_objects import GroupId
from subsites.ports.exceptions import GroupNotFoundError, UnauthorizedError
from subsites.ports.repositories import IGroupRepository


class GroupService:
    """Application service for subsite-aware group management.

    Manages database transactions. Reads of several groups are scoped to
    the active subsite by the repository.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IGroupRepository,
        access_evaluator: GroupAccessEvaluator,
        lifecycle: GroupLifecycleHooks | None = None,
        context_provider: Callable[[], SubsiteContext] = current_subsite_context,
        probe: GroupServiceProbe | None = None,
    ):
        """Initialize GroupService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group persistence
            access_evaluator: Edit authorization for groups
            lifecycle: Hooks run around a group's first save
            context_provider: Returns the active subsite context
            probe: Optional domain probe for observability
        """
        self._session = session
        self._group_repository = group_repository
        self._access = access_evaluator
        self._context_provider = context_provider
        self._lifecycle = lifecycle or GroupLifecycleHooks(context_provider)
        self._probe = probe or DefaultGroupServiceProbe()

    async def list_groups(self) -> list[Group]:
        """List the groups visible in the active subsite."""
        return await self._group_repository.list_visible()

    async def count_groups(self) -> int:
        """Count the groups visible in the active subsite."""
        return await self._group_repository.count_visible()

    async def get_group(self, group_id: GroupId) -> Group:
        """Get a group by ID.

        Raises:
            GroupNotFoundError: If the group does not exist
        """
        group = await self._group_repository.get_by_id(group_id)
        if group is None:
            raise GroupNotFoundError(f"Group {group_id} not found")
        return group

    async def create_group(
        self,
        title: str,
        access_all_subsites: bool = True,
        subsite_ids: Iterable[int] = (),
    ) -> Group:
        """Create a group in the active subsite context.

        Outside any subsite the group always gets global access. Inside a
        subsite the group is linked to it after the insert.

        Raises:
            ValueError: If the title or a subsite ID is invalid
        """
        group = Group.create(
            title=title,
            access_all_subsites=access_all_subsites,
            subsite_ids=subsite_ids,
        )

        try:
            async with self._session.begin():
                self._lifecycle.before_write(group, created=True)
                await self._group_repository.save(group)

                joined = self._lifecycle.after_write(group, created=True)
                if joined is not None:
                    await self._group_repository.add_subsite(group.id, joined)
        except Exception as e:
            self._probe.group_creation_failed(title=title, error=str(e))
            raise

        assert group.id is not None
        self._probe.group_created(
            group_id=group.id.value,
            title=group.title,
            access_all_subsites=group.access_all_subsites,
            subsite_id=self._context_provider().subsite_id,
        )
        return group

    async def update_access(
        self,
        user_id: str,
        group_id: GroupId,
        access_all_subsites: bool,
        subsite_ids: Iterable[int],
    ) -> Group:
        """Change which subsites a group applies to.

        The caller must be able to edit the group, may only link subsites
        they can assign, and may only grant or revoke global access when
        they can assign the main site.

        Raises:
            GroupNotFoundError: If the group does not exist
            UnauthorizedError: If the caller may not make this change
            ValueError: If a subsite ID is not positive
        """
        requested = set(subsite_ids)

        async with self._session.begin():
            group = await self.get_group(group_id)

            if not await self._access.can_edit(user_id, group):
                raise UnauthorizedError(
                    f"User {user_id} cannot edit group {group_id}"
                )

            assignable = await self._access.assignable_subsites(user_id)
            # Unchanged links outside the caller's reach are left alone
            added = requested - group.subsite_ids
            removed = group.subsite_ids - requested
            out_of_reach = sorted((added | removed) - set(assignable))
            # Changing global access in either direction requires the main site
            if access_all_subsites != group.access_all_subsites:
                if MAIN_SITE_ID not in assignable:
                    out_of_reach.append(MAIN_SITE_ID)

            if out_of_reach:
                self._probe.subsite_assignment_denied(
                    group_id.value, user_id, out_of_reach
                )
                raise UnauthorizedError(
                    f"User {user_id} cannot assign subsites {out_of_reach}"
                )

            group.restrict_to(requested)
            if access_all_subsites:
                group.allow_all_subsites()

            await self._group_repository.save(group)

        self._probe.group_access_updated(
            group_id=group_id.value,
            user_id=user_id,
            access_all_subsites=group.access_all_subsites,
            subsite_ids=sorted(group.subsite_ids),
        )
        return group

    async def access_options(
        self, user_id: str, group_id: GroupId
    ) -> AccessOptions | None:
        """Describe how the caller may edit the group's subsite access.

        Raises:
            GroupNotFoundError: If the group does not exist
        """
        group = await self.get_group(group_id)
        return await self._access.access_options(user_id, group)

    async def delete_group(self, user_id: str, group_id: GroupId) -> None:
        """Delete a group the caller can edit.

        Raises:
            GroupNotFoundError: If the group does not exist
            UnauthorizedError: If the caller may not edit the group
        """
        async with self._session.begin():
            group = await self.get_group(group_id)

            if not await self._access.can_edit(user_id, group):
                raise UnauthorizedError(
                    f"User {user_id} cannot delete group {group_id}"
                )

            await self._group_repository.delete(group_id)

        self._probe.group_deleted(group_id.value, user_id)
