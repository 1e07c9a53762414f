"""Subsite-aware authorization for editing groups.

A caller may edit a group when they hold the edit permission on at least
one subsite the group is explicitly linked to. Global access does not count
as a link: delegated subsite administrators cannot edit global groups, and
any super-administrator override lives outside this module.
"""

from __future__ import annotations

from shared_kernel.authorization.protocols import SubsiteAccessProvider
from shared_kernel.authorization.types import Permission
from shared_kernel.middleware.subsite_context import MAIN_SITE_ID
from subsites.application.observability import (
    DefaultGroupAccessProbe,
    GroupAccessProbe,
)
from subsites.application.value_objects import AccessOptions, AccessOptionsMode
from subsites.domain.aggregates import Group

# Permissions that allow assigning subsites to groups
ASSIGN_PERMISSIONS = (Permission.ADMIN.value, Permission.SECURITY_SUBSITE_GROUP.value)


class GroupAccessEvaluator:
    """Decides whether a caller may edit a group and what they may assign."""

    def __init__(
        self,
        access_provider: SubsiteAccessProvider,
        edit_permission: str = Permission.SECURITY_ADMIN.value,
        probe: GroupAccessProbe | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            access_provider: Capability lookup for the caller's subsites
            edit_permission: Permission checked on the group's subsites
            probe: Optional domain probe for observability
        """
        self._access_provider = access_provider
        self._edit_permission = edit_permission
        self._probe = probe or DefaultGroupAccessProbe()

    async def can_edit(self, user_id: str, group: Group) -> bool:
        """Whether the caller administers any subsite the group is linked to.

        Returns False, never raises, when the caller has no rights. Failures
        of the capability lookup itself are propagated.
        """
        try:
            administered = await self._access_provider.accessible_subsites(
                user_id, [self._edit_permission]
            )
        except Exception as e:
            self._probe.access_lookup_failed(user_id, e)
            raise

        shared = sorted(set(administered) & group.subsite_ids)
        group_id = group.id.value if group.id is not None else None

        if not shared or group_id is None:
            self._probe.edit_denied(user_id, group_id)
            return False

        self._probe.edit_allowed(user_id, group_id, shared)
        return True

    async def assignable_subsites(self, user_id: str) -> dict[int, str]:
        """Subsites the caller may give groups access to.

        Includes the main site (ID 0) when the caller holds an assign
        permission globally, which is what allows granting global access.
        """
        return dict(
            await self._access_provider.accessible_subsites(
                user_id, list(ASSIGN_PERMISSIONS), include_main_site=True
            )
        )

    async def access_options(
        self, user_id: str, group: Group
    ) -> AccessOptions | None:
        """Describe how the caller may edit the group's subsite access.

        Returns:
            The available options, or None if the caller cannot edit the group
        """
        if not await self.can_edit(user_id, group):
            return None

        subsites = await self.assignable_subsites(user_id)

        if MAIN_SITE_ID in subsites:
            del subsites[MAIN_SITE_ID]
            return AccessOptions(
                mode=AccessOptionsMode.CHOICE,
                can_grant_global=True,
                subsites=subsites,
            )

        mode = (
            AccessOptionsMode.READONLY
            if len(subsites) <= 1
            else AccessOptionsMode.CHECKBOXES
        )
        return AccessOptions(mode=mode, can_grant_global=False, subsites=subsites)
