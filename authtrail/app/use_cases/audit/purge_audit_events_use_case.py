"""
Purge Audit Events Use Case

The only way audit events are ever deleted.
"""

import logging
from datetime import datetime
from typing import Optional

from libs.result import Error, Result, Return
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.entities import AuditAction, AuditStatus
from authtrail.domain.permissions import AccessLevel
from .dtos import PurgeResponse
from .query_support import check_access, naive_utc

logger = logging.getLogger(__name__)


class PurgeAuditEventsUseCase:
    """
    Delete every audit event in a closed date range.

    Business Rules:
    - Caller needs FULL access on audit logs
    - Both bounds are required and start must be before end
    - Span is not capped; purging old history in one call is allowed
    - The purge itself is audited after the delete
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
    ):
        self.uow = uow
        self.audit = audit

    async def execute(
        self,
        caller: AuthenticatedUser,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> Result[PurgeResponse]:
        denied = check_access(caller.role, AccessLevel.full)
        if denied:
            return Return.err(denied)

        if start_date is None or end_date is None:
            return Return.err(
                Error("VALIDATION_FAILED", "start_date and end_date are required")
            )
        start, end = naive_utc(start_date), naive_utc(end_date)
        if start >= end:
            return Return.err(
                Error("VALIDATION_FAILED", "Start date must be before end date")
            )

        async with self.uow:
            deleted = await self.uow.audit_events.delete_between(start, end)
            await self.uow.commit()

        logger.warning(
            f"User {caller.id} purged {deleted} audit events between {start} and {end}"
        )
        self.audit.record(
            AuditAction.audit_purge,
            AuditStatus.success,
            actor_id=caller.id,
            resource_type="audit_log",
            metadata={
                "deleted_count": deleted,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
            },
        )
        return Return.ok(PurgeResponse(deleted_count=deleted, start_date=start, end_date=end))
