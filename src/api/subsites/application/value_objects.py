"""Application-layer value objects for the subsites bounded context.

Read-only view objects handed to the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class AccessOptionsMode(StrEnum):
    """How subsite access for a group can be edited by the caller."""

    # Choose between all subsites and a checked subset
    CHOICE = "choice"
    # Check any of several subsites
    CHECKBOXES = "checkboxes"
    # A single (or no) subsite; nothing to choose
    READONLY = "readonly"


@dataclass(frozen=True)
class AccessOptions:
    """The subsite access choices open to a caller for one group.

    Attributes:
        mode: Which kind of control applies
        can_grant_global: The caller may give the group access to all subsites
        subsites: Assignable subsites by ID, main site excluded
    """

    mode: AccessOptionsMode
    can_grant_global: bool
    subsites: dict[int, str] = field(default_factory=dict)
