"""HTTP routes for subsite-aware group management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from subsites.application.permissions import provide_permissions
from subsites.application.services import GroupService
from subsites.dependencies.caller import get_current_user_id
from subsites.dependencies.group import get_group_service
from subsites.domain.value_objects import GroupId
from subsites.ports.exceptions import GroupNotFoundError, UnauthorizedError
from subsites.presentation.models import (
    AccessOptionsResponse,
    CreateGroupRequest,
    GroupListResponse,
    GroupResponse,
    PermissionResponse,
    UpdateGroupAccessRequest,
)

router = APIRouter(
    prefix="/subsites",
    tags=["subsites"],
)


def _parse_group_id(group_id: str) -> GroupId:
    try:
        return GroupId.from_string(group_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid group ID format",
        )


@router.get(
    "/groups",
    response_model=GroupListResponse,
    summary="List groups",
    description="List the groups valid in the active subsite (X-Subsite-ID)",
    responses={
        200: {"description": "Groups listed successfully"},
        400: {"description": "Invalid subsite header"},
    },
)
async def list_groups(
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupListResponse:
    """List groups visible in the active subsite.

    Without X-Subsite-ID every group is returned. X-No-Subsite-Filter: true
    lifts the scoping for this request.
    """
    groups = await service.list_groups()
    count = await service.count_groups()
    return GroupListResponse(
        groups=[GroupResponse.from_domain(group) for group in groups],
        count=count,
    )


@router.post("/groups", status_code=status.HTTP_201_CREATED)
async def create_group(
    request: CreateGroupRequest,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    """Create a group in the active subsite.

    Args:
        request: Group creation request
        service: Group service

    Returns:
        GroupResponse with the created group

    Raises:
        HTTPException: 400 if the title or a subsite ID is invalid
    """
    try:
        group = await service.create_group(
            title=request.title,
            access_all_subsites=request.access_all_subsites,
            subsite_ids=request.subsite_ids,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return GroupResponse.from_domain(group)


@router.get("/groups/{group_id}")
async def get_group(
    group_id: str,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    """Get group by ID.

    Lookups by ID are not subsite scoped.

    Raises:
        HTTPException: 400 if group ID is invalid
        HTTPException: 404 if group not found
    """
    group_id_obj = _parse_group_id(group_id)

    try:
        group = await service.get_group(group_id_obj)
    except GroupNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    return GroupResponse.from_domain(group)


@router.put(
    "/groups/{group_id}/access",
    response_model=GroupResponse,
    summary="Update group subsite access",
    description="Change which subsites a group applies to.",
    responses={
        200: {"description": "Access updated successfully"},
        400: {"description": "Invalid group ID or subsite ID"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller cannot edit the group or assign a subsite"},
        404: {"description": "Group not found"},
    },
)
async def update_group_access(
    group_id: str,
    request: UpdateGroupAccessRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    """Update a group's subsite access."""
    group_id_obj = _parse_group_id(group_id)

    try:
        group = await service.update_access(
            user_id=user_id,
            group_id=group_id_obj,
            access_all_subsites=request.access_all_subsites,
            subsite_ids=request.subsite_ids,
        )
    except GroupNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    except UnauthorizedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions to change group access",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return GroupResponse.from_domain(group)


@router.get("/groups/{group_id}/access-options")
async def get_group_access_options(
    group_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[GroupService, Depends(get_group_service)],
) -> AccessOptionsResponse:
    """Describe how the caller may edit a group's subsite access.

    Raises:
        HTTPException: 403 if the caller cannot edit the group
        HTTPException: 404 if group not found
    """
    group_id_obj = _parse_group_id(group_id)

    try:
        options = await service.access_options(user_id, group_id_obj)
    except GroupNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )

    if options is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions to edit group",
        )
    return AccessOptionsResponse.from_value(options)


@router.delete("/groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[GroupService, Depends(get_group_service)],
) -> None:
    """Delete a group and its subsite links.

    Raises:
        HTTPException: 403 if the caller cannot edit the group
        HTTPException: 404 if group not found
    """
    group_id_obj = _parse_group_id(group_id)

    try:
        await service.delete_group(user_id, group_id_obj)
    except GroupNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    except UnauthorizedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions to delete group",
        )


@router.get("/permissions")
async def list_permissions() -> list[PermissionResponse]:
    """List the permissions this context registers, ordered by sort."""
    permissions = provide_permissions()
    return [
        PermissionResponse.from_descriptor(code, descriptor)
        for code, descriptor in sorted(
            permissions.items(), key=lambda item: item[1].sort
        )
    ]
