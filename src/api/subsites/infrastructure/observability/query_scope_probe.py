"""Domain probe for group query scoping.

Following Domain-Oriented Observability patterns, this probe captures
the decisions taken when a group query is scoped to the active subsite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class QueryScopeProbe(Protocol):
    """Domain probe for group query scoping."""

    def scope_skipped(self, reason: str, subsite_id: int | None) -> None:
        """Record that a query was left unscoped and why."""
        ...

    def scope_applied(self, subsite_id: int, mode: str) -> None:
        """Record that subsite predicates were added to a query."""
        ...

    def membership_join_already_present(self, subsite_id: int) -> None:
        """Record that the query already joined group_subsites."""
        ...

    def with_context(self, context: ObservationContext) -> QueryScopeProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultQueryScopeProbe:
    """Default implementation of QueryScopeProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultQueryScopeProbe:
        """Create a new probe with observation context bound."""
        return DefaultQueryScopeProbe(logger=self._logger, context=context)

    def scope_skipped(self, reason: str, subsite_id: int | None) -> None:
        """Record that a query was left unscoped and why."""
        self._logger.debug(
            "group_query_scope_skipped",
            reason=reason,
            active_subsite_id=subsite_id,
            **self._get_context_kwargs(),
        )

    def scope_applied(self, subsite_id: int, mode: str) -> None:
        """Record that subsite predicates were added to a query."""
        self._logger.debug(
            "group_query_scoped",
            active_subsite_id=subsite_id,
            mode=mode,
            **self._get_context_kwargs(),
        )

    def membership_join_already_present(self, subsite_id: int) -> None:
        """Record that the query already joined group_subsites."""
        self._logger.debug(
            "group_query_membership_join_present",
            active_subsite_id=subsite_id,
            **self._get_context_kwargs(),
        )
