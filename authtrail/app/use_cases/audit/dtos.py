"""
Audit Use Case DTOs

Filters, pages and projections of audit events.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from authtrail.domain.entities import AuditEvent


class AuditEventFilters(BaseModel):
    """Query filters; None means unfiltered"""

    user_id: Optional[UUID] = None
    action: Optional[str] = None
    event_category: Optional[str] = None
    severity: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None


class AuditEventView(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    action: str
    status: str
    event_category: str
    severity_level: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    client_info: Optional[Dict[str, Any]] = None
    journey_id: str
    endpoint: Optional[str] = None
    method: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    before_state: Optional[Dict[str, Any]] = None
    after_state: Optional[Dict[str, Any]] = None
    changed_fields: List[str] = []
    metadata: Optional[Dict[str, Any]] = None
    timestamp: datetime

    @classmethod
    def from_entity(cls, event: AuditEvent) -> "AuditEventView":
        return cls(
            id=event.id,
            user_id=event.user_id,
            action=event.action,
            status=getattr(event.status, "value", event.status),
            event_category=getattr(event.event_category, "value", event.event_category),
            severity_level=getattr(event.severity_level, "value", event.severity_level),
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            client_info=event.client_info,
            journey_id=event.journey_id,
            endpoint=event.endpoint,
            method=event.method,
            resource_type=event.resource_type,
            resource_id=event.resource_id,
            before_state=event.before_state,
            after_state=event.after_state,
            changed_fields=event.changed_fields or [],
            metadata=event.event_metadata,
            timestamp=event.timestamp,
        )


class AuditEventPage(BaseModel):
    events: List[AuditEventView]
    total: int
    page: int
    limit: int
    total_pages: int
    next: Optional[int] = None
    prev: Optional[int] = None


class SearchResults(BaseModel):
    query: str
    count: int
    events: List[AuditEventView]


class PurgeResponse(BaseModel):
    deleted_count: int
    start_date: datetime
    end_date: datetime


class FilterOptions(BaseModel):
    """Values present in the trail plus the full known taxonomy"""

    actions: List[str]
    event_categories: List[str]
    severity_levels: List[str]
    statuses: List[str]
    resource_types: List[str]
    known_actions: List[str]


class ActionCount(BaseModel):
    action: str
    count: int


class UserActivitySummary(BaseModel):
    user_id: UUID
    total_events: int
    by_status: Dict[str, int]
    by_category: Dict[str, int]
    by_severity: Dict[str, int]
    top_actions: List[ActionCount]
    first_activity: Optional[datetime] = None
    last_activity: Optional[datetime] = None


class ExportFile(BaseModel):
    content: str
    media_type: str
    filename: str
    row_count: int
    truncated: bool
