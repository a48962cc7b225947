from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from authtrail.domain.entities import AuditEvent


@dataclass(frozen=True)
class AuditEventCriteria:
    """Filters shared by every audit read; None means unfiltered."""

    user_id: Optional[UUID] = None
    action: Optional[str] = None
    event_category: Optional[str] = None
    severity_level: Optional[str] = None
    status: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    search: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        pass

    @abstractmethod
    async def find(
        self,
        criteria: AuditEventCriteria,
        offset: int = 0,
        limit: int = 25,
        newest_first: bool = True,
    ) -> Tuple[List[AuditEvent], int]:
        """
        Get audit events matching criteria with offset pagination.

        Returns:
            Tuple of (events list, total matching count)
        """
        pass

    @abstractmethod
    async def delete_between(self, start: datetime, end: datetime) -> int:
        """Delete events with start <= timestamp <= end. Returns count deleted."""
        pass

    @abstractmethod
    async def count_by(self, field: str, criteria: AuditEventCriteria) -> Dict[str, int]:
        """Count matching events grouped by a column (action, status, ...)"""
        pass

    @abstractmethod
    async def time_bounds(
        self, criteria: AuditEventCriteria
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Oldest and newest timestamp of matching events"""
        pass

    @abstractmethod
    async def distinct_values(self, field: str) -> List[str]:
        """Distinct stored values of a column, sorted"""
        pass
