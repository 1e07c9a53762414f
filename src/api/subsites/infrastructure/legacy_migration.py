"""Migration from single-subsite groups to subsite links.

Groups used to belong to at most one subsite through ``groups.subsite_id``.
The presence of that column triggers a one-time migration into
``group_subsites`` and ``groups.access_all_subsites``; renaming the column
afterwards is what marks the migration as done.

Without the legacy column, an installation where no group has any subsite
access at all is treated as a fresh install of subsite support, and every
existing group is given global access so nobody is locked out.

Database errors are not handled here. The migration runs at startup and a
failure must stop the process.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import (
    Boolean,
    Integer,
    and_,
    column,
    insert,
    inspect,
    or_,
    select,
    table,
    text,
    update,
)
from sqlalchemy.engine import Connection, Result
from sqlalchemy.sql import Executable

from subsites.infrastructure.observability import (
    DefaultLegacyMigrationProbe,
    LegacyMigrationProbe,
)
from subsites.ports.schema import SchemaInspector

GROUP_TABLE = "groups"
MEMBERSHIP_TABLE = "group_subsites"
LEGACY_COLUMN = "subsite_id"
OBSOLETE_COLUMN = "_obsolete_subsite_id"


@dataclass(frozen=True)
class MigrationResult:
    """What a migration run changed.

    Attributes:
        legacy_column_found: The single-subsite column was present
        memberships_created: Subsite links inserted from the legacy column
        global_groups_flagged: Groups given global access
        bootstrapped: Global access was granted as a first install
    """

    legacy_column_found: bool = False
    memberships_created: int = 0
    global_groups_flagged: int = 0
    bootstrapped: bool = False


class SqlAlchemySchemaInspector:
    """SchemaInspector backed by a synchronous SQLAlchemy connection.

    Alembic migrations pass ``op.get_bind()``; the application passes the
    connection it receives from ``AsyncConnection.run_sync``.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def columns_of(self, table_name: str) -> set[str]:
        # A fresh inspector each time; its cache would hide the rename
        return {
            col["name"] for col in inspect(self._connection).get_columns(table_name)
        }

    def rename_column(self, table_name: str, old: str, new: str) -> None:
        quote = self._connection.dialect.identifier_preparer.quote
        self._connection.execute(
            text(
                f"ALTER TABLE {quote(table_name)} "
                f"RENAME COLUMN {quote(old)} TO {quote(new)}"
            )
        )

    def execute(self, statement: Executable) -> Result[Any]:
        return self._connection.execute(statement)


class LegacySubsiteMigrator:
    """Moves legacy single-subsite group data into subsite links.

    Safe to run on every startup: the rename of the legacy column makes
    later runs take the no-legacy branch, which only ever grants global
    access when no group has any subsite access.
    """

    def __init__(
        self,
        schema: SchemaInspector,
        probe: LegacyMigrationProbe | None = None,
        group_table: str = GROUP_TABLE,
        membership_table: str = MEMBERSHIP_TABLE,
    ) -> None:
        self._schema = schema
        self._probe = probe or DefaultLegacyMigrationProbe()
        self._group_table = group_table
        self._groups = table(
            group_table,
            column("id", Integer),
            column(LEGACY_COLUMN, Integer),
            column("access_all_subsites", Boolean),
        )
        self._memberships = table(
            membership_table,
            column("group_id", Integer),
            column("subsite_id", Integer),
        )

    def migrate(self) -> MigrationResult:
        """Run the migration.

        Returns:
            Summary of the changes made

        Raises:
            sqlalchemy.exc.SQLAlchemyError: Propagated unchanged
        """
        if LEGACY_COLUMN in self._schema.columns_of(self._group_table):
            return self._migrate_legacy_column()
        return self._bootstrap_first_install()

    def _migrate_legacy_column(self) -> MigrationResult:
        groups = self._groups
        legacy = groups.c[LEGACY_COLUMN]
        self._probe.legacy_column_detected(self._group_table, LEGACY_COLUMN)

        created = self._schema.execute(
            insert(self._memberships).from_select(
                ["group_id", "subsite_id"],
                select(groups.c.id, legacy).where(legacy > 0),
            )
        ).rowcount
        self._probe.memberships_migrated(created)

        flagged = self._schema.execute(
            update(groups).where(legacy == 0).values(access_all_subsites=True)
        ).rowcount
        self._probe.global_access_migrated(flagged)

        self._schema.rename_column(self._group_table, LEGACY_COLUMN, OBSOLETE_COLUMN)
        self._probe.legacy_column_retired(self._group_table, OBSOLETE_COLUMN)

        return MigrationResult(
            legacy_column_found=True,
            memberships_created=created,
            global_groups_flagged=flagged,
        )

    def _bootstrap_first_install(self) -> MigrationResult:
        groups = self._groups
        memberships = self._memberships

        has_subsite_access = (
            select(groups.c.id)
            .select_from(
                groups.outerjoin(
                    memberships,
                    and_(
                        memberships.c.group_id == groups.c.id,
                        memberships.c.subsite_id > 0,
                    ),
                )
            )
            .where(
                or_(
                    groups.c.access_all_subsites.is_(True),
                    memberships.c.group_id.is_not(None),
                )
            )
            .limit(1)
        )
        if self._schema.execute(has_subsite_access).first() is not None:
            self._probe.migration_not_required(self._group_table)
            return MigrationResult()

        flagged = self._schema.execute(
            update(groups).values(access_all_subsites=True)
        ).rowcount
        self._probe.first_install_bootstrapped(flagged)
        return MigrationResult(global_groups_flagged=flagged, bootstrapped=True)


def run_legacy_migration(
    connection: Connection, probe: LegacyMigrationProbe | None = None
) -> MigrationResult:
    """Run the legacy migration on a synchronous connection.

    Suitable for ``AsyncConnection.run_sync`` and alembic data migrations.
    """
    return LegacySubsiteMigrator(SqlAlchemySchemaInspector(connection), probe).migrate()
