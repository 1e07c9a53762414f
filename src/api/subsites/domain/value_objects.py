"""Value objects for the subsites domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.middleware.subsite_context import MAIN_SITE_ID


@dataclass(frozen=True)
class GroupId:
    """Identifier for a Group aggregate.

    Assigned by the database on first insert.
    """

    value: int

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)

    @classmethod
    def from_string(cls, value: str) -> GroupId:
        """Create GroupId from string value.

        Args:
            value: Decimal string

        Returns:
            GroupId instance

        Raises:
            ValueError: If value is not a positive integer
        """
        try:
            parsed = int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid GroupId: {value}") from e

        if parsed <= 0:
            raise ValueError(f"Invalid GroupId: {value}")

        return cls(value=parsed)


def parse_subsite_id(raw_value: str) -> int:
    """Parse a subsite identifier as received from a request.

    Zero is accepted and denotes the main site.

    Raises:
        ValueError: If the value is not a non-negative integer
    """
    subsite_id = int(raw_value.strip())
    if subsite_id < MAIN_SITE_ID:
        raise ValueError(f"Subsite ID must not be negative, got: {subsite_id}")
    return subsite_id
