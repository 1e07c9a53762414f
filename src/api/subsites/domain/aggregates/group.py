"""Group aggregate for the subsites context."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from shared_kernel.middleware.subsite_context import MAIN_SITE_ID
from subsites.domain.value_objects import GroupId


@dataclass
class Group:
    """Security group with subsite-aware visibility.

    A group is either valid in every subsite (``access_all_subsites``) or
    only in the subsites it is explicitly linked to.

    Business rules:
    - New groups have global access unless created restricted
    - Linked subsites are positive IDs; the main site (0) is never linked
    - Links are kept while global access is on, so switching global access
      off restores the previous restriction
    - A restricted group with no links is visible in no subsite
    """

    title: str
    id: GroupId | None = None
    access_all_subsites: bool = True
    subsite_ids: set[int] = field(default_factory=set)

    @classmethod
    def create(
        cls,
        title: str,
        access_all_subsites: bool = True,
        subsite_ids: Iterable[int] = (),
    ) -> Group:
        """Factory method for a group that has not been persisted yet.

        Raises:
            ValueError: If the title is blank or a subsite ID is not positive
        """
        if not title.strip():
            raise ValueError("Group title must not be empty")

        group = cls(title=title.strip(), access_all_subsites=access_all_subsites)
        for subsite_id in subsite_ids:
            group.join_subsite(subsite_id)
        return group

    @property
    def is_persisted(self) -> bool:
        """True once the group has been assigned an identity."""
        return self.id is not None

    def effective_subsite_ids(self, all_subsite_ids: Iterable[int]) -> set[int]:
        """Return the subsites this group is valid in.

        Args:
            all_subsite_ids: Every subsite known to the platform
        """
        if self.access_all_subsites:
            return set(all_subsite_ids)
        return set(self.subsite_ids)

    def is_visible_in(
        self, subsite_id: int | None, main_site_shows_all: bool = True
    ) -> bool:
        """Whether the group is visible under the given subsite context.

        ``None`` means no subsite context and sees everything. The main site
        (0) sees every group too unless ``main_site_shows_all`` is off, in
        which case it only sees global groups.
        """
        if subsite_id is None:
            return True
        if subsite_id == MAIN_SITE_ID and main_site_shows_all:
            return True
        if self.access_all_subsites:
            return True
        return subsite_id in self.subsite_ids

    def allow_all_subsites(self) -> None:
        """Give the group access to every subsite."""
        self.access_all_subsites = True

    def restrict_to(self, subsite_ids: Iterable[int]) -> None:
        """Limit the group to exactly the given subsites.

        Raises:
            ValueError: If a subsite ID is not positive
        """
        requested = set(subsite_ids)
        for subsite_id in requested:
            _check_linkable(subsite_id)
        self.access_all_subsites = False
        self.subsite_ids = requested

    def join_subsite(self, subsite_id: int) -> bool:
        """Link the group to a subsite.

        Returns:
            True if the link was added, False if it already existed

        Raises:
            ValueError: If the subsite ID is not positive
        """
        _check_linkable(subsite_id)
        if subsite_id in self.subsite_ids:
            return False
        self.subsite_ids.add(subsite_id)
        return True

    def describe_access(self, subsite_titles: Mapping[int, str]) -> str:
        """Return the title annotated with where the group applies.

        Used as the label in group trees, e.g. ``"Editors (global group)"``
        or ``"Editors (Shop, Blog)"``.

        Args:
            subsite_titles: Titles of the linked subsites by ID
        """
        if self.access_all_subsites:
            return f"{self.title} (global group)"

        titles = [
            subsite_titles.get(subsite_id, f"#{subsite_id}")
            for subsite_id in sorted(self.subsite_ids)
        ]
        return f"{self.title} ({', '.join(titles)})"


def _check_linkable(subsite_id: int) -> None:
    if subsite_id <= 0:
        raise ValueError(f"Cannot link group to subsite {subsite_id}")
