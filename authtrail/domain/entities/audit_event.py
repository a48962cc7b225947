"""
AuditEvent Entity

Immutable log of authentication, authorization and data events.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from ..base import utcnow
from .enums import AuditStatus, EventCategory, SeverityLevel


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - one recorded action, its outcome and its state delta.

    Business Rules:
    - Immutable (never updated)
    - Deleted only through an explicit date-range purge
    - user_id nullable only for login, register and verify-email
    - event_category and severity_level are derived from action and status
    - before_state/after_state hold only the keys listed in changed_fields
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)
    status: AuditStatus
    event_category: EventCategory
    severity_level: SeverityLevel

    # Client metadata
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    client_info: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    journey_id: str = Field(max_length=64)
    endpoint: Optional[str] = Field(default=None, max_length=512)
    method: Optional[str] = Field(default=None, max_length=10)

    # Resource touched by the action
    resource_type: Optional[str] = Field(default=None, max_length=50)
    resource_id: Optional[str] = Field(default=None, max_length=64)

    # State delta
    before_state: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    after_state: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    changed_fields: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    timestamp: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_timestamp", "timestamp"),
        Index("idx_audit_user_journey", "user_id", "journey_id", "timestamp"),
        Index("idx_audit_action_severity", "action", "severity_level", "timestamp"),
        Index("idx_audit_category_status", "event_category", "status", "timestamp"),
        Index("idx_audit_resource", "resource_type", "resource_id"),
    )
