"""Database infrastructure - shared connection primitives."""

from infrastructure.database.models import Base, TimestampMixin
from infrastructure.database.session import ScopedSession

__all__ = [
    "Base",
    "ScopedSession",
    "TimestampMixin",
]
