"""PostgreSQL implementation of IGroupRepository.

Groups and their subsite links are stored in the groups and group_subsites
tables. Reads returning more than one group go through the group query
scope, so callers only see groups valid in the active subsite.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from subsites.domain.aggregates import Group
from subsites.domain.value_objects import GroupId
from subsites.infrastructure.models import GroupModel, GroupSubsiteModel
from subsites.infrastructure.observability import (
    DefaultGroupRepositoryProbe,
    GroupRepositoryProbe,
)
from subsites.infrastructure.query_scope import GroupQueryScope
from subsites.ports.exceptions import GroupNotFoundError
from subsites.ports.repositories import IGroupRepository


class GroupRepository(IGroupRepository):
    """Repository persisting Group aggregates with their subsite links.

    Lookups by ID are never subsite scoped; listing and counting are.
    Scoping is applied explicitly here and is idempotent, so sessions that
    also carry the scoping listener produce the same SQL.
    """

    def __init__(
        self,
        session: AsyncSession,
        scope: GroupQueryScope | None = None,
        probe: GroupRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and query scope.

        Args:
            session: AsyncSession from FastAPI dependency injection
            scope: Group query scope bound to the request's subsite context
            probe: Optional domain probe for observability
        """
        self._session = session
        self._scope = scope or GroupQueryScope()
        self._probe = probe or DefaultGroupRepositoryProbe()

    async def save(self, group: Group) -> None:
        """Insert or update a group and sync its subsite links.

        New groups (no identity yet) are flushed so the database-assigned
        ID can be written back to the aggregate.

        Raises:
            GroupNotFoundError: If the group has an ID but no row
        """
        created = group.id is None

        if group.id is None:
            model = GroupModel(
                title=group.title,
                access_all_subsites=group.access_all_subsites,
                memberships=[
                    GroupSubsiteModel(subsite_id=subsite_id)
                    for subsite_id in sorted(group.subsite_ids)
                ],
            )
            self._session.add(model)
            await self._session.flush()
            group.id = GroupId(value=model.id)
        else:
            model = await self._get_model(group.id)
            if model is None:
                self._probe.group_not_found(group.id.value)
                raise GroupNotFoundError(f"Group {group.id} does not exist")

            model.title = group.title
            model.access_all_subsites = group.access_all_subsites
            self._sync_memberships(model, group.subsite_ids)
            await self._session.flush()

        self._probe.group_saved(group.id.value, created)

    async def get_by_id(self, group_id: GroupId) -> Group | None:
        """Fetch a group with its subsite links.

        Args:
            group_id: The unique identifier of the group

        Returns:
            The Group aggregate, or None if not found
        """
        model = await self._get_model(group_id)

        if model is None:
            self._probe.group_not_found(group_id.value)
            return None

        group = self._to_domain(model)
        self._probe.group_retrieved(group_id.value, len(group.subsite_ids))
        return group

    async def list_visible(self) -> list[Group]:
        """List groups visible in the active subsite, ordered by title."""
        stmt = self._scope.apply(select(GroupModel).order_by(GroupModel.title))
        result = await self._session.execute(stmt)
        groups = [self._to_domain(model) for model in result.scalars().unique()]
        self._probe.groups_listed(len(groups))
        return groups

    async def count_visible(self) -> int:
        """Count groups visible in the active subsite."""
        stmt = self._scope.apply(select(func.count()).select_from(GroupModel))
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def add_subsite(self, group_id: GroupId, subsite_id: int) -> bool:
        """Link a persisted group to a subsite.

        Returns:
            True if the link was created, False if it already existed

        Raises:
            GroupNotFoundError: If the group does not exist
        """
        model = await self._get_model(group_id)
        if model is None:
            self._probe.group_not_found(group_id.value)
            raise GroupNotFoundError(f"Group {group_id} does not exist")

        if any(m.subsite_id == subsite_id for m in model.memberships):
            return False

        model.memberships.append(GroupSubsiteModel(subsite_id=subsite_id))
        await self._session.flush()
        self._probe.subsite_link_added(group_id.value, subsite_id)
        return True

    async def delete(self, group_id: GroupId) -> bool:
        """Delete a group; its subsite links are deleted with it.

        Returns:
            True if deleted, False if not found
        """
        model = await self._get_model(group_id)

        if model is None:
            self._probe.group_not_found(group_id.value)
            return False

        await self._session.delete(model)
        await self._session.flush()
        self._probe.group_deleted(group_id.value)
        return True

    async def _get_model(self, group_id: GroupId) -> GroupModel | None:
        stmt = select(GroupModel).where(GroupModel.id == group_id.value)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _sync_memberships(model: GroupModel, subsite_ids: set[int]) -> None:
        """Make the model's link rows match ``subsite_ids``."""
        current = {m.subsite_id for m in model.memberships}

        model.memberships = [
            m for m in model.memberships if m.subsite_id in subsite_ids
        ]
        for subsite_id in sorted(subsite_ids - current):
            model.memberships.append(GroupSubsiteModel(subsite_id=subsite_id))

    @staticmethod
    def _to_domain(model: GroupModel) -> Group:
        return Group(
            id=GroupId(value=model.id),
            title=model.title,
            access_all_subsites=model.access_all_subsites,
            subsite_ids={m.subsite_id for m in model.memberships},
        )
