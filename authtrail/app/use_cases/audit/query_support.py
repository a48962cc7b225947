"""
Helpers shared by the audit query use cases: access checks, date span
validation and criteria building.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

from libs.result import Error, Result, Return
from authtrail.app.repositories.audit_event_repository import AuditEventCriteria
from authtrail.domain.permissions import AUDIT_LOGS, AccessLevel, has_access
from .dtos import AuditEventFilters

DEFAULT_MAX_SPAN_DAYS = 365

DateRange = Tuple[Optional[datetime], Optional[datetime]]


def check_access(role: str, required: AccessLevel) -> Optional[Error]:
    if has_access(role, AUDIT_LOGS, required):
        return None
    if required == AccessLevel.full:
        message = "Full access to audit logs is required"
    else:
        message = "You do not have permission to view audit logs"
    return Error("INSUFFICIENT_PERMISSION", message)


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return (value - value.utcoffset()).replace(tzinfo=None)


def resolve_date_range(
    start: Optional[datetime],
    end: Optional[datetime],
    now: datetime,
    max_days: int = DEFAULT_MAX_SPAN_DAYS,
) -> Result[DateRange]:
    """
    Validate a query date span.

    A lone start runs to now, a lone end starts max_days earlier. No bounds
    at all means unbounded.

    Errors:
        - VALIDATION_FAILED: start >= end or a span longer than max_days
    """
    start, end = naive_utc(start), naive_utc(end)

    if start is None and end is None:
        return Return.ok((None, None))

    if end is None:
        end = max(now, start)
    if start is None:
        start = end - timedelta(days=max_days)

    if start >= end:
        return Return.err(Error("VALIDATION_FAILED", "Start date must be before end date"))
    if end - start > timedelta(days=max_days):
        return Return.err(
            Error("VALIDATION_FAILED", f"Date range cannot exceed {max_days} days")
        )
    return Return.ok((start, end))


def build_criteria(filters: AuditEventFilters, date_range: DateRange) -> AuditEventCriteria:
    start, end = date_range
    return AuditEventCriteria(
        user_id=filters.user_id,
        action=filters.action or None,
        event_category=filters.event_category or None,
        severity_level=filters.severity or None,
        status=filters.status or None,
        start=start,
        end=end,
        search=(filters.search or "").strip() or None,
        resource_type=filters.resource_type or None,
        resource_id=filters.resource_id or None,
    )
