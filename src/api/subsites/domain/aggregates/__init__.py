"""Domain aggregates for the subsites context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from subsites.domain.aggregates.group import Group

__all__ = [
    "Group",
]
