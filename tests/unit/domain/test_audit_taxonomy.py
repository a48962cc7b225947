import pytest

from authtrail.domain import audit_taxonomy
from authtrail.domain.entities import AuditAction, AuditStatus, EventCategory, SeverityLevel


def test_every_action_has_a_category():
    for action in AuditAction:
        assert isinstance(audit_taxonomy.categorize(action), EventCategory)


def test_parse_action_accepts_values_and_rejects_unknown():
    assert audit_taxonomy.parse_action("verify-email") == AuditAction.verify_email
    assert audit_taxonomy.parse_action(AuditAction.login) == AuditAction.login
    with pytest.raises(ValueError):
        audit_taxonomy.parse_action("login_user")


@pytest.mark.parametrize(
    "action, status, expected",
    [
        (AuditAction.login, AuditStatus.failed, SeverityLevel.critical),
        (AuditAction.role_change, AuditStatus.failed, SeverityLevel.critical),
        (AuditAction.account_lock, AuditStatus.failed, SeverityLevel.critical),
        (AuditAction.task_update, AuditStatus.failed, SeverityLevel.warning),
        (AuditAction.task_delete, AuditStatus.success, SeverityLevel.warning),
        (AuditAction.role_change, AuditStatus.success, SeverityLevel.warning),
        (AuditAction.account_lock, AuditStatus.success, SeverityLevel.warning),
        (AuditAction.audit_purge, AuditStatus.success, SeverityLevel.warning),
        (AuditAction.login, AuditStatus.success, SeverityLevel.info),
        (AuditAction.task_delete, AuditStatus.pending, SeverityLevel.info),
    ],
)
def test_severity_rules(action, status, expected):
    assert audit_taxonomy.severity_for(action, status) == expected


def test_changed_fields_skips_secrets_and_internal_keys():
    before = {
        "first_name": "Alice",
        "password": "old",
        "password_hash": "h1",
        "_id": 1,
        "__v": 0,
        "updated_at": "2026-01-01",
        "city": "Porto",
    }
    after = {
        "first_name": "Alicia",
        "password": "new",
        "password_hash": "h2",
        "_id": 2,
        "__v": 1,
        "updated_at": "2026-01-02",
        "city": "Porto",
        "bio": "hi",
    }

    assert audit_taxonomy.changed_fields(before, after) == ["first_name", "bio"]


def test_changed_fields_compares_nested_values_whole():
    before = {"settings": {"theme": "dark", "lang": "en"}}
    after = {"settings": {"theme": "light", "lang": "en"}}

    assert audit_taxonomy.changed_fields(before, after) == ["settings"]


def test_changed_fields_with_missing_side():
    assert audit_taxonomy.changed_fields(None, {"a": 1}) == ["a"]
    assert audit_taxonomy.changed_fields({"a": 1}, None) == ["a"]
    assert audit_taxonomy.changed_fields(None, None) == []


def test_restrict_state_keeps_only_changed_keys():
    state = {"first_name": "Alice", "city": "Porto", "password_hash": "h"}

    assert audit_taxonomy.restrict_state(state, ["first_name"]) == {"first_name": "Alice"}
    assert audit_taxonomy.restrict_state(state, []) is None
    assert audit_taxonomy.restrict_state(None, ["first_name"]) is None
