"""Protocol for group application service observability.

Defines the interface for domain probes that capture application-level
domain events for group service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupServiceProbe(Protocol):
    """Domain probe for group application service operations."""

    def group_created(
        self,
        group_id: int,
        title: str,
        access_all_subsites: bool,
        subsite_id: int | None,
    ) -> None:
        """Record that a group was created."""
        ...

    def group_creation_failed(self, title: str, error: str) -> None:
        """Record that group creation failed."""
        ...

    def group_access_updated(
        self,
        group_id: int,
        user_id: str,
        access_all_subsites: bool,
        subsite_ids: list[int],
    ) -> None:
        """Record that a group's subsite access was changed."""
        ...

    def subsite_assignment_denied(
        self, group_id: int, user_id: str, subsite_ids: list[int]
    ) -> None:
        """Record that the caller asked for subsites they cannot assign."""
        ...

    def group_deleted(self, group_id: int, user_id: str) -> None:
        """Record that a group was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> GroupServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupServiceProbe:
    """Default implementation of GroupServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGroupServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupServiceProbe(logger=self._logger, context=context)

    def group_created(
        self,
        group_id: int,
        title: str,
        access_all_subsites: bool,
        subsite_id: int | None,
    ) -> None:
        """Record that a group was created."""
        self._logger.info(
            "group_created",
            group_id=group_id,
            title=title,
            access_all_subsites=access_all_subsites,
            active_subsite_id=subsite_id,
            **self._get_context_kwargs(),
        )

    def group_creation_failed(self, title: str, error: str) -> None:
        """Record that group creation failed."""
        self._logger.error(
            "group_creation_failed",
            title=title,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_access_updated(
        self,
        group_id: int,
        user_id: str,
        access_all_subsites: bool,
        subsite_ids: list[int],
    ) -> None:
        """Record that a group's subsite access was changed."""
        self._logger.info(
            "group_access_updated",
            group_id=group_id,
            caller_id=user_id,
            access_all_subsites=access_all_subsites,
            subsite_ids=subsite_ids,
            **self._get_context_kwargs(),
        )

    def subsite_assignment_denied(
        self, group_id: int, user_id: str, subsite_ids: list[int]
    ) -> None:
        """Record that the caller asked for subsites they cannot assign."""
        self._logger.warning(
            "group_subsite_assignment_denied",
            group_id=group_id,
            caller_id=user_id,
            subsite_ids=subsite_ids,
            **self._get_context_kwargs(),
        )

    def group_deleted(self, group_id: int, user_id: str) -> None:
        """Record that a group was deleted."""
        self._logger.info(
            "group_deleted_by_user",
            group_id=group_id,
            caller_id=user_id,
            **self._get_context_kwargs(),
        )
