"""Subsite context FastAPI dependency.

Resolves the active subsite from the X-Subsite-ID request header and the
caller's opt-out of group scoping from X-No-Subsite-Filter, then binds the
result to the request-scoped context variable.

A missing header means no subsite context; ``0`` selects the main site.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        subsite: Annotated[SubsiteContext, Depends(get_subsite_context)],
    ):
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from shared_kernel.middleware.observability import (
    DefaultSubsiteContextProbe,
    SubsiteContextProbe,
)
from shared_kernel.middleware.subsite_context import (
    SubsiteContext,
    set_subsite_context,
)
from subsites.domain.value_objects import parse_subsite_id


def get_subsite_context_probe() -> SubsiteContextProbe:
    """Get SubsiteContextProbe instance."""
    return DefaultSubsiteContextProbe()


def resolve_subsite_context(
    x_subsite_id: str | None,
    x_no_subsite_filter: str | None,
    probe: SubsiteContextProbe,
) -> SubsiteContext:
    """Build the subsite context from raw header values.

    Args:
        x_subsite_id: The X-Subsite-ID header value, or None if missing
        x_no_subsite_filter: The X-No-Subsite-Filter header value
        probe: Domain probe for observability

    Returns:
        SubsiteContext for the request

    Raises:
        HTTPException 400: If X-Subsite-ID is not a non-negative integer
    """
    subsite_id: int | None = None
    source = "none"

    if x_subsite_id is not None and x_subsite_id.strip():
        try:
            subsite_id = parse_subsite_id(x_subsite_id)
        except ValueError:
            probe.invalid_subsite_id(raw_value=x_subsite_id)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    "X-Subsite-ID must be a non-negative integer, "
                    f"got: '{x_subsite_id}'"
                ),
            )
        source = "header"

    bypass_filter = (x_no_subsite_filter or "").strip().lower() == "true"
    if bypass_filter:
        probe.filter_bypass_requested(subsite_id=subsite_id)

    probe.subsite_resolved(subsite_id=subsite_id, source=source)
    return SubsiteContext(
        subsite_id=subsite_id,
        bypass_filter=bypass_filter,
        source=source,
    )


async def get_subsite_context(
    probe: Annotated[SubsiteContextProbe, Depends(get_subsite_context_probe)],
    x_subsite_id: Annotated[str | None, Header()] = None,
    x_no_subsite_filter: Annotated[str | None, Header()] = None,
) -> SubsiteContext:
    """Resolve the request's subsite context and bind it for the request.

    Declared async so the context variable is set in the request's own
    task rather than in a threadpool copy.
    """
    context = resolve_subsite_context(x_subsite_id, x_no_subsite_filter, probe)
    set_subsite_context(context)
    return context
