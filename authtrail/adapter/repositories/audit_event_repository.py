from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import String, cast, delete, func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from authtrail.app.repositories.audit_event_repository import (
    AuditEventCriteria,
    IAuditEventRepository,
)
from authtrail.domain.entities import AuditEvent

# Columns that may be grouped or listed; anything else is rejected
GROUPABLE_FIELDS = (
    "action",
    "status",
    "event_category",
    "severity_level",
    "resource_type",
    "method",
)

# Columns searched by free-text queries
SEARCHABLE_FIELDS = ("action", "status", "ip_address", "user_agent", "endpoint", "journey_id")


def _column(field: str):
    if field not in GROUPABLE_FIELDS:
        raise ValueError(f"Unsupported audit field: {field}")
    return getattr(AuditEvent, field)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _conditions(criteria: AuditEventCriteria) -> list:
    conditions = []
    if criteria.user_id is not None:
        conditions.append(AuditEvent.user_id == criteria.user_id)
    if criteria.action:
        conditions.append(AuditEvent.action == criteria.action)
    if criteria.event_category:
        conditions.append(AuditEvent.event_category == criteria.event_category)
    if criteria.severity_level:
        conditions.append(AuditEvent.severity_level == criteria.severity_level)
    if criteria.status:
        conditions.append(AuditEvent.status == criteria.status)
    if criteria.start is not None:
        conditions.append(AuditEvent.timestamp >= criteria.start)
    if criteria.end is not None:
        conditions.append(AuditEvent.timestamp <= criteria.end)
    if criteria.resource_type:
        conditions.append(AuditEvent.resource_type == criteria.resource_type)
    if criteria.resource_id:
        conditions.append(AuditEvent.resource_id == criteria.resource_id)
    if criteria.search:
        pattern = f"%{_escape_like(criteria.search.lower())}%"
        conditions.append(
            or_(
                *(
                    func.lower(cast(getattr(AuditEvent, field), String)).like(
                        pattern, escape="\\"
                    )
                    for field in SEARCHABLE_FIELDS
                )
            )
        )
    return conditions


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def find(
        self,
        criteria: AuditEventCriteria,
        offset: int = 0,
        limit: int = 25,
        newest_first: bool = True,
    ) -> Tuple[List[AuditEvent], int]:
        """
        Get audit events matching criteria with offset pagination.

        Ties on timestamp are broken by id so pages never overlap.
        """
        conditions = _conditions(criteria)

        count_stmt = select(func.count()).select_from(AuditEvent).where(*conditions)
        total = (await self.session.exec(count_stmt)).one()

        order = (
            (AuditEvent.timestamp.desc(), AuditEvent.id.desc())
            if newest_first
            else (AuditEvent.timestamp.asc(), AuditEvent.id.asc())
        )
        stmt = (
            select(AuditEvent)
            .where(*conditions)
            .order_by(*order)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def delete_between(self, start: datetime, end: datetime) -> int:
        stmt = delete(AuditEvent).where(
            AuditEvent.timestamp >= start, AuditEvent.timestamp <= end
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count_by(self, field: str, criteria: AuditEventCriteria) -> Dict[str, int]:
        column = _column(field)
        stmt = (
            select(column, func.count())
            .where(*_conditions(criteria))
            .group_by(column)
            .order_by(func.count().desc())
        )
        result = await self.session.exec(stmt)
        return {
            getattr(value, "value", value): count
            for value, count in result.all()
            if value is not None
        }

    async def time_bounds(
        self, criteria: AuditEventCriteria
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        stmt = select(
            func.min(AuditEvent.timestamp), func.max(AuditEvent.timestamp)
        ).where(*_conditions(criteria))
        first, last = (await self.session.exec(stmt)).one()
        return first, last

    async def distinct_values(self, field: str) -> List[str]:
        column = _column(field)
        stmt = select(column).where(column.is_not(None)).distinct()
        result = await self.session.exec(stmt)
        return sorted(getattr(value, "value", value) for value in result.all())
