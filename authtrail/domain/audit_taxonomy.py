"""
Audit Action Taxonomy

Static classification of every AuditAction: its event category, whether a
successful outcome still deserves attention, and the state-diff rules.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from .entities.enums import AuditAction, AuditStatus, EventCategory, SeverityLevel

ACTION_CATEGORIES: Dict[AuditAction, EventCategory] = {
    AuditAction.login: EventCategory.authentication,
    AuditAction.logout: EventCategory.authentication,
    AuditAction.register: EventCategory.user_management,
    AuditAction.verify_email: EventCategory.authentication,
    AuditAction.email_verification: EventCategory.authentication,
    AuditAction.password_change: EventCategory.authentication,
    AuditAction.token_refresh: EventCategory.authentication,
    AuditAction.account_lock: EventCategory.security,
    AuditAction.profile_update: EventCategory.data_modification,
    AuditAction.role_change: EventCategory.permission,
    AuditAction.permission_change: EventCategory.permission,
    AuditAction.content_create: EventCategory.data_modification,
    AuditAction.content_update: EventCategory.data_modification,
    AuditAction.content_delete: EventCategory.data_modification,
    AuditAction.project_create: EventCategory.data_modification,
    AuditAction.project_update: EventCategory.data_modification,
    AuditAction.project_delete: EventCategory.data_modification,
    AuditAction.task_create: EventCategory.data_modification,
    AuditAction.task_update: EventCategory.data_modification,
    AuditAction.task_delete: EventCategory.data_modification,
    AuditAction.task_status_change: EventCategory.data_modification,
    AuditAction.task_retrieve: EventCategory.data_access,
    AuditAction.kb_create: EventCategory.data_modification,
    AuditAction.kb_update: EventCategory.data_modification,
    AuditAction.kb_delete: EventCategory.data_modification,
    AuditAction.note_create: EventCategory.data_modification,
    AuditAction.note_update: EventCategory.data_modification,
    AuditAction.note_delete: EventCategory.data_modification,
    AuditAction.admin_action: EventCategory.system,
    AuditAction.audit_export: EventCategory.data_access,
    AuditAction.audit_purge: EventCategory.system,
}

# Failures in these categories are critical
SENSITIVE_CATEGORIES = frozenset(
    {EventCategory.authentication, EventCategory.permission, EventCategory.security}
)

# Successful outcomes that are still raised to warning
NOTABLE_SUCCESS_ACTIONS = frozenset(
    {
        AuditAction.content_delete,
        AuditAction.project_delete,
        AuditAction.task_delete,
        AuditAction.kb_delete,
        AuditAction.note_delete,
        AuditAction.role_change,
        AuditAction.permission_change,
        AuditAction.account_lock,
        AuditAction.audit_purge,
    }
)

# Actions that legitimately happen before anyone is authenticated
ANONYMOUS_ACTIONS = frozenset(
    {AuditAction.login, AuditAction.register, AuditAction.verify_email}
)

# Keys never diffed nor copied into before/after snapshots
EXCLUDED_STATE_FIELDS = frozenset(
    {
        "password",
        "password_hash",
        "password_confirm",
        "verification_token",
        "__v",
        "version",
        "updated_at",
    }
)


def parse_action(action: Union[AuditAction, str]) -> AuditAction:
    """
    Resolve an action value to its taxonomy member.

    Raises:
        ValueError: if the action is not part of the taxonomy
    """
    if isinstance(action, AuditAction):
        return action
    return AuditAction(action)


def categorize(action: AuditAction) -> EventCategory:
    return ACTION_CATEGORIES[action]


def severity_for(action: AuditAction, status: AuditStatus) -> SeverityLevel:
    """
    Derive severity from action and outcome.

    - failed on an authentication/permission/security action -> critical
    - any other failure -> warning
    - success on deletes, role/permission changes, locks, purges -> warning
    - everything else -> info
    """
    if status == AuditStatus.failed:
        if categorize(action) in SENSITIVE_CATEGORIES:
            return SeverityLevel.critical
        return SeverityLevel.warning
    if status == AuditStatus.success and action in NOTABLE_SUCCESS_ACTIONS:
        return SeverityLevel.warning
    return SeverityLevel.info


def is_tracked_field(key: str) -> bool:
    return not key.startswith("_") and key not in EXCLUDED_STATE_FIELDS


def changed_fields(
    before: Optional[Mapping[str, Any]], after: Optional[Mapping[str, Any]]
) -> List[str]:
    """
    Shallow key-union diff of two state snapshots.

    Nested values are compared as a whole. Internal, secret and
    version-control keys are skipped. Order follows first appearance in
    before, then after.
    """
    before = before or {}
    after = after or {}
    keys = list(before.keys()) + [k for k in after.keys() if k not in before]
    return [
        key
        for key in keys
        if is_tracked_field(key) and before.get(key) != after.get(key)
    ]


def restrict_state(
    state: Optional[Mapping[str, Any]], fields: List[str]
) -> Optional[Dict[str, Any]]:
    """Keep only the given keys of a snapshot (None when nothing is left)."""
    if state is None:
        return None
    restricted = {key: state[key] for key in fields if key in state}
    return restricted or None
