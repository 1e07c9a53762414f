"""Domain probe for subsite context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving the active subsite from
the X-Subsite-ID request header.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SubsiteContextProbe(Protocol):
    """Domain probe for subsite context resolution operations."""

    def subsite_resolved(self, subsite_id: int | None, source: str) -> None:
        """Record that the subsite context was resolved."""
        ...

    def invalid_subsite_id(self, raw_value: str) -> None:
        """Record that the X-Subsite-ID header could not be parsed."""
        ...

    def filter_bypass_requested(self, subsite_id: int | None) -> None:
        """Record that the caller opted out of group scoping."""
        ...

    def with_context(self, context: ObservationContext) -> SubsiteContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSubsiteContextProbe:
    """Default implementation of SubsiteContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSubsiteContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultSubsiteContextProbe(logger=self._logger, context=context)

    def subsite_resolved(self, subsite_id: int | None, source: str) -> None:
        """Record that the subsite context was resolved."""
        self._logger.debug(
            "subsite_context_resolved",
            active_subsite_id=subsite_id,
            source=source,
            **self._get_context_kwargs(),
        )

    def invalid_subsite_id(self, raw_value: str) -> None:
        """Record that the X-Subsite-ID header could not be parsed."""
        self._logger.warning(
            "subsite_context_invalid_id",
            raw_value=raw_value,
            **self._get_context_kwargs(),
        )

    def filter_bypass_requested(self, subsite_id: int | None) -> None:
        """Record that the caller opted out of group scoping."""
        self._logger.info(
            "subsite_filter_bypass_requested",
            active_subsite_id=subsite_id,
            **self._get_context_kwargs(),
        )
