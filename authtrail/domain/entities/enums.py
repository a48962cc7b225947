"""
Authtrail Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Application role of a user"""

    admin = "Admin"
    pro_user = "Pro User"
    regular_user = "Regular User"


class AuditStatus(str, Enum):
    """Outcome of an audited action"""

    success = "success"
    failed = "failed"
    pending = "pending"


class EventCategory(str, Enum):
    """Broad class of an audited action"""

    authentication = "authentication"
    data_access = "data_access"
    data_modification = "data_modification"
    configuration = "configuration"
    permission = "permission"
    security = "security"
    system = "system"
    user_management = "user_management"


class SeverityLevel(str, Enum):
    """How much attention an audit event deserves"""

    info = "info"
    warning = "warning"
    critical = "critical"


class TokenType(str, Enum):
    access = "access"
    refresh = "refresh"


class AuditAction(str, Enum):
    """
    Every action the audit trail knows about.

    The category of each member is fixed in domain.audit_taxonomy; a string
    that is not a member here cannot be recorded.
    """

    # Authentication
    login = "login"
    logout = "logout"
    register = "register"
    verify_email = "verify-email"
    email_verification = "email_verification"
    password_change = "password_change"
    token_refresh = "token_refresh"
    account_lock = "account_lock"

    # User profile
    profile_update = "profile_update"
    role_change = "role_change"
    permission_change = "permission_change"

    # Content
    content_create = "content_create"
    content_update = "content_update"
    content_delete = "content_delete"
    project_create = "project_create"
    project_update = "project_update"
    project_delete = "project_delete"
    task_create = "task_create"
    task_update = "task_update"
    task_delete = "task_delete"
    task_status_change = "task_status_change"
    task_retrieve = "task_retrieve"
    kb_create = "kb_create"
    kb_update = "kb_update"
    kb_delete = "kb_delete"
    note_create = "note_create"
    note_update = "note_update"
    note_delete = "note_delete"

    # Administration
    admin_action = "admin_action"
    audit_export = "audit_export"
    audit_purge = "audit_purge"
