"""add group subsite links

Replace the single groups.subsite_id with the group_subsites link table
and the access_all_subsites flag, then move existing data across.

The flag is added with a false server default so the data migration sees
which groups had global access; new rows default to true afterwards.

Revision ID: 9e3a5d2c8f61
Revises: 4c1f0e9a7b2d
Create Date: 2026-10-02 16:40:07.102953

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from subsites.infrastructure.legacy_migration import (
    LEGACY_COLUMN,
    OBSOLETE_COLUMN,
    run_legacy_migration,
)


# revision identifiers, used by Alembic.
revision: str = "9e3a5d2c8f61"
down_revision: Union[str, Sequence[str], None] = "4c1f0e9a7b2d"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create group_subsites and migrate legacy subsite assignments."""
    op.add_column(
        "groups",
        sa.Column(
            "access_all_subsites",
            sa.Boolean(),
            server_default=sa.false(),
            nullable=False,
        ),
    )
    op.create_table(
        "group_subsites",
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("subsite_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["groups.id"],
            name=op.f("fk_group_subsites_group_id_groups"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "group_id", "subsite_id", name=op.f("pk_group_subsites")
        ),
    )
    op.create_index(
        op.f("ix_group_subsites_subsite_id"),
        "group_subsites",
        ["subsite_id"],
        unique=False,
    )

    run_legacy_migration(op.get_bind())

    op.alter_column("groups", "access_all_subsites", server_default=sa.true())


def downgrade() -> None:
    """Restore groups.subsite_id from the first link of each group."""
    op.alter_column("groups", OBSOLETE_COLUMN, new_column_name=LEGACY_COLUMN)
    op.execute(
        sa.text(
            "UPDATE groups SET subsite_id = CASE "
            "WHEN access_all_subsites THEN 0 "
            "ELSE COALESCE(("
            "SELECT MIN(gs.subsite_id) FROM group_subsites gs "
            "WHERE gs.group_id = groups.id), 0) END"
        )
    )
    op.drop_index(
        op.f("ix_group_subsites_subsite_id"), table_name="group_subsites"
    )
    op.drop_table("group_subsites")
    op.drop_column("groups", "access_all_subsites")
