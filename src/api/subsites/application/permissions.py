"""Permissions advertised by the subsites context."""

from __future__ import annotations

from shared_kernel.authorization.types import Permission, PermissionDescriptor


def provide_permissions() -> dict[str, PermissionDescriptor]:
    """Return the permissions this context adds to the registry."""
    return {
        Permission.SECURITY_SUBSITE_GROUP.value: PermissionDescriptor(
            name="Manage subsites for groups",
            category="Roles and access permissions",
            help=(
                "Ability to limit the permissions for a group to one or "
                "more subsites."
            ),
            sort=200,
        ),
    }
