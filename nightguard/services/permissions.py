"""
Role ranking and page permissions.

Roles form a strict total order: staff < security < manager < admin.
A user may act when their rank is at least the action's required rank.
"""
from typing import Dict, List, Union

from nightguard.models.enums import UserRole

ROLE_RANK: Dict[UserRole, int] = {
    UserRole.STAFF: 0,
    UserRole.SECURITY: 1,
    UserRole.MANAGER: 2,
    UserRole.ADMIN: 3,
}

# Minimum role per dashboard page. Served to the client so the UI hides
# what the API would refuse anyway.
PAGE_PERMISSIONS: Dict[str, UserRole] = {
    "dashboard": UserRole.STAFF,
    "venues": UserRole.STAFF,
    "incidents": UserRole.STAFF,
    "notifications": UserRole.STAFF,
    "settings": UserRole.STAFF,
    "security_sign_in": UserRole.SECURITY,
    "cctv_register": UserRole.SECURITY,
    "reports": UserRole.MANAGER,
    "users": UserRole.ADMIN,
}

# Document type each role must upload. Roles not listed may upload either.
REQUIRED_DOCUMENT_TYPE = {
    UserRole.SECURITY: "security_license",
    UserRole.STAFF: "rsa_certificate",
}


def role_rank(role: Union[UserRole, str]) -> int:
    """Rank of a role. Raises ValueError for an unknown role name."""
    return ROLE_RANK[UserRole(role)]


def has_permission(role: Union[UserRole, str], required: Union[UserRole, str]) -> bool:
    """True when `role` ranks at or above `required`."""
    return role_rank(role) >= role_rank(required)


def accessible_pages(role: Union[UserRole, str]) -> List[str]:
    """Pages a role may open, in declaration order."""
    return [page for page, required in PAGE_PERMISSIONS.items() if has_permission(role, required)]
