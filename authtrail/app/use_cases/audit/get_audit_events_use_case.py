"""
Get Audit Events Use Case

Filtered, paginated listing of the audit trail.
"""

import math
from datetime import datetime
from typing import Callable, Optional

from libs.result import Error, Result, Return
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.base import utcnow
from authtrail.domain.permissions import AccessLevel
from .dtos import AuditEventFilters, AuditEventPage, AuditEventView
from .query_support import build_criteria, check_access, resolve_date_range

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100
SORT_NEWEST_FIRST = "-timestamp"
SORT_OLDEST_FIRST = "timestamp"


def page_of(events, total: int, page: int, limit: int) -> AuditEventPage:
    total_pages = math.ceil(total / limit) if total else 0
    return AuditEventPage(
        events=[AuditEventView.from_entity(event) for event in events],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        next=page + 1 if page < total_pages else None,
        prev=page - 1 if page > 1 else None,
    )


def validate_paging(page: int, limit: int) -> Optional[Error]:
    if page < 1:
        return Error("VALIDATION_FAILED", "page must be at least 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        return Error("VALIDATION_FAILED", f"limit must be between 1 and {MAX_PAGE_SIZE}")
    return None


class GetAuditEventsUseCase:
    """
    Use case for listing audit events.

    Business Rules:
    - Caller needs READ access on audit logs
    - start must be before end and the span is at most max_query_days
    - page >= 1, limit 1..100
    - Newest first unless sort=timestamp
    """

    def __init__(
        self,
        uow: UnitOfWork,
        max_query_days: int = 365,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.max_query_days = max_query_days
        self.clock = clock

    async def execute(
        self,
        caller: AuthenticatedUser,
        filters: AuditEventFilters,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort: str = SORT_NEWEST_FIRST,
    ) -> Result[AuditEventPage]:
        """
        Errors:
            - INSUFFICIENT_PERMISSION: caller lacks READ access
            - VALIDATION_FAILED: bad date span, paging or sort
        """
        denied = check_access(caller.role, AccessLevel.read)
        if denied:
            return Return.err(denied)

        invalid = validate_paging(page, limit)
        if invalid:
            return Return.err(invalid)
        if sort not in (SORT_NEWEST_FIRST, SORT_OLDEST_FIRST):
            return Return.err(
                Error("VALIDATION_FAILED", "sort must be 'timestamp' or '-timestamp'")
            )

        date_range = resolve_date_range(
            filters.start_date, filters.end_date, self.clock(), self.max_query_days
        )
        if date_range.is_err():
            return Return.err(date_range.error)

        async with self.uow:
            events, total = await self.uow.audit_events.find(
                build_criteria(filters, date_range.value),
                offset=(page - 1) * limit,
                limit=limit,
                newest_first=sort == SORT_NEWEST_FIRST,
            )
            return Return.ok(page_of(events, total, page, limit))
