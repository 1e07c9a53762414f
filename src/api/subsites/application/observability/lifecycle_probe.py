"""Domain probe for group lifecycle hooks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupLifecycleProbe(Protocol):
    """Domain probe for the access set up around a group's first save."""

    def global_access_forced(self, title: str) -> None:
        """Record that a group created outside any subsite was made global."""
        ...

    def creating_subsite_joined(self, group_id: int, subsite_id: int) -> None:
        """Record that a new group was linked to the subsite it was created in."""
        ...

    def with_context(self, context: ObservationContext) -> GroupLifecycleProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupLifecycleProbe:
    """Default implementation of GroupLifecycleProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultGroupLifecycleProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupLifecycleProbe(logger=self._logger, context=context)

    def global_access_forced(self, title: str) -> None:
        """Record that a group created outside any subsite was made global."""
        self._logger.debug(
            "group_global_access_forced",
            title=title,
            **self._get_context_kwargs(),
        )

    def creating_subsite_joined(self, group_id: int, subsite_id: int) -> None:
        """Record that a new group was linked to the subsite it was created in."""
        self._logger.info(
            "group_joined_creating_subsite",
            group_id=group_id,
            joined_subsite_id=subsite_id,
            **self._get_context_kwargs(),
        )
