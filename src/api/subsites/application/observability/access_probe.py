"""Domain probe for group edit authorization.

Records the outcome of every edit check so denied edits can be traced
back to the subsites involved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupAccessProbe(Protocol):
    """Domain probe for group edit authorization."""

    def edit_allowed(
        self, user_id: str, group_id: int, shared_subsite_ids: list[int]
    ) -> None:
        """Record that the caller may edit the group."""
        ...

    def edit_denied(self, user_id: str, group_id: int | None) -> None:
        """Record that the caller may not edit the group."""
        ...

    def access_lookup_failed(self, user_id: str, error: Exception) -> None:
        """Record that looking up the caller's subsites failed."""
        ...

    def with_context(self, context: ObservationContext) -> GroupAccessProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupAccessProbe:
    """Default implementation of GroupAccessProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGroupAccessProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupAccessProbe(logger=self._logger, context=context)

    def edit_allowed(
        self, user_id: str, group_id: int, shared_subsite_ids: list[int]
    ) -> None:
        """Record that the caller may edit the group."""
        self._logger.debug(
            "group_edit_allowed",
            caller_id=user_id,
            group_id=group_id,
            shared_subsite_ids=shared_subsite_ids,
            **self._get_context_kwargs(),
        )

    def edit_denied(self, user_id: str, group_id: int | None) -> None:
        """Record that the caller may not edit the group."""
        self._logger.info(
            "group_edit_denied",
            caller_id=user_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def access_lookup_failed(self, user_id: str, error: Exception) -> None:
        """Record that looking up the caller's subsites failed."""
        self._logger.error(
            "group_access_lookup_failed",
            caller_id=user_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
