"""Unit test fixtures shared across the subsites tests.

Query scoping and the legacy migration run against an in-memory SQLite
database so the generated SQL is actually executed.
"""

from collections.abc import Iterator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from infrastructure.database.models import Base
from subsites.infrastructure.models import GroupModel, GroupSubsiteModel


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Provide an in-memory SQLite engine with the group tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """Provide a plain session bound to the SQLite engine."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def seeded_groups(session: Session) -> dict[str, int]:
    """Seed groups covering every visibility case.

    Returns:
        Group IDs by title
    """
    groups = [
        GroupModel(title="Everyone", access_all_subsites=True),
        GroupModel(
            title="Shop editors",
            access_all_subsites=False,
            memberships=[GroupSubsiteModel(subsite_id=5)],
        ),
        GroupModel(
            title="Blog editors",
            access_all_subsites=False,
            memberships=[GroupSubsiteModel(subsite_id=7)],
        ),
        GroupModel(
            title="Shop and blog",
            access_all_subsites=False,
            memberships=[
                GroupSubsiteModel(subsite_id=5),
                GroupSubsiteModel(subsite_id=7),
            ],
        ),
        GroupModel(
            title="Global with link",
            access_all_subsites=True,
            memberships=[GroupSubsiteModel(subsite_id=5)],
        ),
        GroupModel(title="Nowhere", access_all_subsites=False),
    ]
    session.add_all(groups)
    session.commit()
    return {group.title: group.id for group in groups}
