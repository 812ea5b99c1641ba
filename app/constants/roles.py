"""
Role Constants

Role names carried in the ``role`` claim of access tokens issued by the
identity provider.
"""

from enum import Enum


class RoleName(str, Enum):
    """Enumeration of role names in the system."""

    MEMBER = "member"
    OWNER = "owner"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


# Role used when a token carries no role claim
DEFAULT_ROLE = RoleName.MEMBER

# Roles allowed to read ledger statistics across users
LEDGER_ADMIN_ROLES = frozenset({RoleName.ADMIN.value, RoleName.SUPERADMIN.value})


def get_default_role_name() -> str:
    """Get the default role name for tokens without a role claim."""
    return DEFAULT_ROLE.value
