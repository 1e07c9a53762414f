"""Domain probe for group repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to group persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupRepositoryProbe(Protocol):
    """Domain probe for group repository operations."""

    def group_saved(self, group_id: int, created: bool) -> None:
        """Record that a group was successfully saved."""
        ...

    def group_retrieved(self, group_id: int, subsite_count: int) -> None:
        """Record that a group was retrieved with its subsite links."""
        ...

    def group_not_found(self, group_id: int) -> None:
        """Record that a group was not found."""
        ...

    def groups_listed(self, count: int) -> None:
        """Record that visible groups were listed."""
        ...

    def group_deleted(self, group_id: int) -> None:
        """Record that a group was deleted."""
        ...

    def subsite_link_added(self, group_id: int, subsite_id: int) -> None:
        """Record that a group was linked to a subsite."""
        ...

    def with_context(self, context: ObservationContext) -> GroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupRepositoryProbe:
    """Default implementation of GroupRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupRepositoryProbe(logger=self._logger, context=context)

    def group_saved(self, group_id: int, created: bool) -> None:
        """Record that a group was successfully saved."""
        self._logger.info(
            "group_saved",
            group_id=group_id,
            created=created,
            **self._get_context_kwargs(),
        )

    def group_retrieved(self, group_id: int, subsite_count: int) -> None:
        """Record that a group was retrieved with its subsite links."""
        self._logger.debug(
            "group_retrieved",
            group_id=group_id,
            subsite_count=subsite_count,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, group_id: int) -> None:
        """Record that a group was not found."""
        self._logger.debug(
            "group_not_found",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def groups_listed(self, count: int) -> None:
        """Record that visible groups were listed."""
        self._logger.debug(
            "groups_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def group_deleted(self, group_id: int) -> None:
        """Record that a group was deleted."""
        self._logger.info(
            "group_deleted",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def subsite_link_added(self, group_id: int, subsite_id: int) -> None:
        """Record that a group was linked to a subsite."""
        self._logger.info(
            "group_subsite_link_added",
            group_id=group_id,
            linked_subsite_id=subsite_id,
            **self._get_context_kwargs(),
        )
