"""Domain probe for the legacy group subsite migration.

Every step of the setup-time migration is recorded at info level since it
rewrites access data and runs at most once per installation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class LegacyMigrationProbe(Protocol):
    """Domain probe for the legacy group subsite migration."""

    def legacy_column_detected(self, table: str, column: str) -> None:
        """Record that the single-subsite column is still present."""
        ...

    def memberships_migrated(self, count: int) -> None:
        """Record how many subsite links were created from the legacy column."""
        ...

    def global_access_migrated(self, count: int) -> None:
        """Record how many main-site groups were given global access."""
        ...

    def legacy_column_retired(self, table: str, new_name: str) -> None:
        """Record that the legacy column was renamed out of the way."""
        ...

    def first_install_bootstrapped(self, count: int) -> None:
        """Record that all existing groups were given global access."""
        ...

    def migration_not_required(self, table: str) -> None:
        """Record that there was nothing to migrate."""
        ...

    def with_context(self, context: ObservationContext) -> LegacyMigrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultLegacyMigrationProbe:
    """Default implementation of LegacyMigrationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultLegacyMigrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultLegacyMigrationProbe(logger=self._logger, context=context)

    def legacy_column_detected(self, table: str, column: str) -> None:
        """Record that the single-subsite column is still present."""
        self._logger.info(
            "legacy_subsite_column_detected",
            table=table,
            column=column,
            **self._get_context_kwargs(),
        )

    def memberships_migrated(self, count: int) -> None:
        """Record how many subsite links were created from the legacy column."""
        self._logger.info(
            "legacy_subsite_memberships_migrated",
            count=count,
            **self._get_context_kwargs(),
        )

    def global_access_migrated(self, count: int) -> None:
        """Record how many main-site groups were given global access."""
        self._logger.info(
            "legacy_global_access_migrated",
            count=count,
            **self._get_context_kwargs(),
        )

    def legacy_column_retired(self, table: str, new_name: str) -> None:
        """Record that the legacy column was renamed out of the way."""
        self._logger.info(
            "legacy_subsite_column_retired",
            table=table,
            new_name=new_name,
            **self._get_context_kwargs(),
        )

    def first_install_bootstrapped(self, count: int) -> None:
        """Record that all existing groups were given global access."""
        self._logger.warning(
            "subsite_first_install_bootstrapped",
            count=count,
            message="No group had subsite access; all groups made global",
            **self._get_context_kwargs(),
        )

    def migration_not_required(self, table: str) -> None:
        """Record that there was nothing to migrate."""
        self._logger.debug(
            "legacy_subsite_migration_not_required",
            table=table,
            **self._get_context_kwargs(),
        )
