"""Access set up around a group's first save.

A group created outside any subsite becomes a global group. A group created
while a subsite is active is linked to that subsite once it has an ID,
whatever global access flag its creator chose.

Whether a save creates the group is passed in explicitly by the caller
rather than inferred from the group's identity.
"""

from __future__ import annotations

from collections.abc import Callable

from shared_kernel.middleware.subsite_context import (
    SubsiteContext,
    current_subsite_context,
)
from subsites.application.observability import (
    DefaultGroupLifecycleProbe,
    GroupLifecycleProbe,
)
from subsites.domain.aggregates import Group
from subsites.ports.exceptions import UnsavedGroupError


class GroupLifecycleHooks:
    """Hooks run immediately before and after a group is written."""

    def __init__(
        self,
        context_provider: Callable[[], SubsiteContext] = current_subsite_context,
        probe: GroupLifecycleProbe | None = None,
    ) -> None:
        self._context_provider = context_provider
        self._probe = probe or DefaultGroupLifecycleProbe()

    def before_write(self, group: Group, created: bool) -> None:
        """Force global access on groups created outside any subsite."""
        if created and not self._context_provider().has_subsite:
            group.allow_all_subsites()
            self._probe.global_access_forced(group.title)

    def after_write(self, group: Group, created: bool) -> int | None:
        """Link a newly created group to the active subsite.

        Returns:
            The subsite the group was linked to, if any

        Raises:
            UnsavedGroupError: If the group has no identity yet
        """
        context = self._context_provider()
        if not created or not context.has_subsite:
            return None

        if group.id is None:
            raise UnsavedGroupError("Group must be saved before linking subsites")

        assert context.subsite_id is not None
        group.join_subsite(context.subsite_id)
        self._probe.creating_subsite_joined(group.id.value, context.subsite_id)
        return context.subsite_id
