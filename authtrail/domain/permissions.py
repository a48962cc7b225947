"""
Role Permissions

Feature access levels per role. READ on auditLogs lets a role browse the
trail; FULL is needed for destructive operations such as purging it.
"""

from enum import Enum
from typing import Dict, Union

from .entities.enums import UserRole


class AccessLevel(str, Enum):
    full = "full"
    create_edit = "create_edit"
    own = "own"
    read = "read"
    none = "none"


AUDIT_LOGS = "auditLogs"
USER_MANAGEMENT = "userManagement"

ROLE_PERMISSIONS: Dict[UserRole, Dict[str, AccessLevel]] = {
    UserRole.admin: {
        USER_MANAGEMENT: AccessLevel.full,
        AUDIT_LOGS: AccessLevel.full,
    },
    UserRole.pro_user: {
        USER_MANAGEMENT: AccessLevel.none,
        AUDIT_LOGS: AccessLevel.read,
    },
    UserRole.regular_user: {
        USER_MANAGEMENT: AccessLevel.none,
        AUDIT_LOGS: AccessLevel.none,
    },
}

# Levels implied by each granted level
_IMPLIED = {
    AccessLevel.full: {
        AccessLevel.full,
        AccessLevel.create_edit,
        AccessLevel.own,
        AccessLevel.read,
    },
    AccessLevel.create_edit: {
        AccessLevel.create_edit,
        AccessLevel.own,
        AccessLevel.read,
    },
    AccessLevel.own: {AccessLevel.own, AccessLevel.read},
    AccessLevel.read: {AccessLevel.read},
    AccessLevel.none: set(),
}


def access_level(role: Union[UserRole, str], feature: str) -> AccessLevel:
    try:
        role = UserRole(role)
    except ValueError:
        return AccessLevel.none
    return ROLE_PERMISSIONS.get(role, {}).get(feature, AccessLevel.none)


def has_access(role: Union[UserRole, str], feature: str, required: AccessLevel) -> bool:
    return required in _IMPLIED[access_level(role, feature)]
