"""Synchronous session class backing every AsyncSession.

Bounded contexts attach ORM execution listeners (such as group scoping) to
this class rather than to the global ``Session``, so plain sessions created
by tools and tests are left untouched.
"""

from sqlalchemy.orm import Session


class ScopedSession(Session):
    """Session class that query-scoping listeners are installed on."""
