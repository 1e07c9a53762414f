"""Subsite context value object and request-scoped holder.

The value object is framework-agnostic and carries no business logic,
making it safe for the shared kernel. Resolution from request headers
lives in the subsites bounded context's dependency layer.

Three states are distinguished for ``subsite_id``:

- ``None``: no subsite context at all (scoping is skipped)
- ``0``: the main site, i.e. administering globally
- ``> 0``: a specific subsite
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

MAIN_SITE_ID = 0


@dataclass(frozen=True)
class SubsiteContext:
    """Resolved subsite context for the current request.

    Attributes:
        subsite_id: Active subsite, ``0`` for the main site or ``None``
            when no subsite is selected.
        bypass_filter: The caller opted out of group scoping for this request.
        source: How the context was resolved ('header', 'none', 'system').
    """

    subsite_id: int | None = None
    bypass_filter: bool = False
    source: str = "none"

    @property
    def has_subsite(self) -> bool:
        """True when a specific subsite (not the main site) is active."""
        return bool(self.subsite_id)

    @property
    def is_main_site(self) -> bool:
        """True when administering in the global main-site context."""
        return self.subsite_id == MAIN_SITE_ID


NO_SUBSITE = SubsiteContext()

_current_subsite: ContextVar[SubsiteContext] = ContextVar(
    "current_subsite", default=NO_SUBSITE
)


def current_subsite_context() -> SubsiteContext:
    """Return the subsite context bound to the current request."""
    return _current_subsite.get()


def set_subsite_context(context: SubsiteContext) -> None:
    """Bind a subsite context for the remainder of the current request."""
    _current_subsite.set(context)


@contextmanager
def use_subsite(
    subsite_id: int | None, bypass_filter: bool = False
) -> Iterator[SubsiteContext]:
    """Temporarily bind a subsite context, restoring the previous one on exit.

    Used by background jobs and tests that act within a specific subsite.
    """
    context = SubsiteContext(
        subsite_id=subsite_id, bypass_filter=bypass_filter, source="system"
    )
    token = _current_subsite.set(context)
    try:
        yield context
    finally:
        _current_subsite.reset(token)
