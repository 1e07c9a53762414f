"""Pydantic models for subsite group API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared_kernel.authorization.types import PermissionDescriptor
from subsites.application.value_objects import AccessOptions, AccessOptionsMode
from subsites.domain.aggregates import Group


class CreateGroupRequest(BaseModel):
    """Request model for creating a group.

    The active subsite comes from the X-Subsite-ID header. A group created
    inside a subsite is linked to it; outside any subsite it is global.
    """

    title: str = Field(..., description="Group title", min_length=1, max_length=255)
    access_all_subsites: bool = Field(
        default=True, description="Whether the group applies to every subsite"
    )
    subsite_ids: list[int] = Field(
        default_factory=list, description="Subsites the group is linked to"
    )


class UpdateGroupAccessRequest(BaseModel):
    """Request model for changing which subsites a group applies to."""

    access_all_subsites: bool = Field(
        ..., description="Whether the group applies to every subsite"
    )
    subsite_ids: list[int] = Field(
        default_factory=list, description="Subsites the group is linked to"
    )


class GroupResponse(BaseModel):
    """Response model for group."""

    id: int = Field(..., description="Group ID")
    title: str = Field(..., description="Group title")
    access_all_subsites: bool = Field(
        ..., description="Whether the group applies to every subsite"
    )
    subsite_ids: list[int] = Field(
        default_factory=list, description="Explicitly linked subsites, ascending"
    )

    @classmethod
    def from_domain(cls, group: Group) -> GroupResponse:
        """Convert domain Group aggregate to API response.

        Args:
            group: Persisted Group domain aggregate

        Returns:
            GroupResponse
        """
        assert group.id is not None
        return cls(
            id=group.id.value,
            title=group.title,
            access_all_subsites=group.access_all_subsites,
            subsite_ids=sorted(group.subsite_ids),
        )


class GroupListResponse(BaseModel):
    """Response model for the groups visible in the active subsite."""

    groups: list[GroupResponse] = Field(default_factory=list)
    count: int = Field(..., description="Number of visible groups")


class SubsiteOptionResponse(BaseModel):
    """A subsite the caller can assign."""

    id: int
    title: str


class AccessOptionsResponse(BaseModel):
    """How the caller may edit a group's subsite access."""

    mode: AccessOptionsMode
    can_grant_global: bool
    subsites: list[SubsiteOptionResponse] = Field(default_factory=list)

    @classmethod
    def from_value(cls, options: AccessOptions) -> AccessOptionsResponse:
        """Convert AccessOptions to API response, subsites ordered by ID."""
        return cls(
            mode=options.mode,
            can_grant_global=options.can_grant_global,
            subsites=[
                SubsiteOptionResponse(id=subsite_id, title=title)
                for subsite_id, title in sorted(options.subsites.items())
            ],
        )


class PermissionResponse(BaseModel):
    """A permission registered by the subsites context."""

    code: str
    name: str
    category: str
    help: str
    sort: int

    @classmethod
    def from_descriptor(
        cls, code: str, descriptor: PermissionDescriptor
    ) -> PermissionResponse:
        """Convert a permission descriptor to API response."""
        return cls(
            code=code,
            name=descriptor.name,
            category=descriptor.category,
            help=descriptor.help,
            sort=descriptor.sort,
        )
