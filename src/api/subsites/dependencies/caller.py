"""Caller identity dependency.

Authentication happens upstream: the gateway in front of this service
verifies the caller and forwards their ID in the X-User-ID header.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header, HTTPException, status


def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """Return the authenticated caller's ID.

    Raises:
        HTTPException 401: If the gateway did not identify the caller
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user_id
