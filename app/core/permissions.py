"""Role-based permissions: one table mapping each role to the operations it may perform."""

from enum import Enum


class Role(str, Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class Permission(str, Enum):
    """Back-office operations gated by role."""

    VIEW_USERS = "users:view"
    CHANGE_ROLES = "users:role"
    BAN_USERS = "users:ban"
    MODERATE_LISTINGS = "listings:moderate"
    MODERATE_MESSAGES = "messages:moderate"
    VIEW_ANALYTICS = "analytics:view"


ROLE_VALUES: tuple[str, ...] = tuple(r.value for r in Role)

_STAFF_PERMISSIONS = frozenset(
    {
        Permission.VIEW_USERS,
        Permission.CHANGE_ROLES,
        Permission.BAN_USERS,
        Permission.MODERATE_LISTINGS,
        Permission.MODERATE_MESSAGES,
        Permission.VIEW_ANALYTICS,
    }
)

# Moderators currently share every admin capability, including role changes.
# Restricting CHANGE_ROLES to admins only is a one-line change here.
ROLE_PERMISSIONS: dict[str, frozenset[Permission]] = {
    Role.ADMIN.value: _STAFF_PERMISSIONS,
    Role.MODERATOR.value: _STAFF_PERMISSIONS,
    Role.USER.value: frozenset(),
}


def has_permission(role: str, permission: Permission) -> bool:
    """True if the role grants the permission. Unknown roles grant nothing."""
    return permission in ROLE_PERMISSIONS.get(role, frozenset())
