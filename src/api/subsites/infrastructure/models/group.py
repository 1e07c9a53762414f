"""SQLAlchemy ORM models for the groups and group_subsites tables.

Subsites themselves live outside this context and are referenced by ID
only, so group_subsites.subsite_id carries no foreign key.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, TimestampMixin


class GroupModel(Base, TimestampMixin):
    """ORM model for the groups table.

    Databases migrated from the single-subsite layout also carry an
    ``_obsolete_subsite_id`` column, which is never read.
    """

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    access_all_subsites: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    memberships: Mapped[list[GroupSubsiteModel]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupModel(id={self.id}, title={self.title}, "
            f"access_all_subsites={self.access_all_subsites})>"
        )


class GroupSubsiteModel(Base):
    """ORM model for the group_subsites link table.

    One row per (group, subsite) pair; rows go away with their group.
    """

    __tablename__ = "group_subsites"

    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    subsite_id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    group: Mapped[GroupModel] = relationship(back_populates="memberships")

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupSubsiteModel(group_id={self.group_id}, "
            f"subsite_id={self.subsite_id})>"
        )
