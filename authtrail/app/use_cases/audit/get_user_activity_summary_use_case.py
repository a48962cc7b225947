from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Result, Return
from authtrail.app.repositories.audit_event_repository import AuditEventCriteria
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.base import utcnow
from authtrail.domain.permissions import AccessLevel
from .dtos import ActionCount, UserActivitySummary
from .query_support import check_access, resolve_date_range

TOP_ACTIONS = 10


class GetUserActivitySummaryUseCase:
    """
    Aggregate view of one user's trail.

    Business Rules:
    - Users may always summarize themselves
    - Anyone else needs READ access on audit logs
    - Optional date span follows the query span rules
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
        user_id: UUID,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Result[UserActivitySummary]:
        if caller.id != user_id:
            denied = check_access(caller.role, AccessLevel.read)
            if denied:
                return Return.err(denied)

        date_range = resolve_date_range(
            start_date, end_date, self.clock(), self.max_query_days
        )
        if date_range.is_err():
            return Return.err(date_range.error)
        start, end = date_range.value
        criteria = AuditEventCriteria(user_id=user_id, start=start, end=end)

        async with self.uow:
            repo = self.uow.audit_events
            by_status = await repo.count_by("status", criteria)
            by_category = await repo.count_by("event_category", criteria)
            by_severity = await repo.count_by("severity_level", criteria)
            by_action = await repo.count_by("action", criteria)
            first, last = await repo.time_bounds(criteria)

        top_actions = sorted(by_action.items(), key=lambda item: (-item[1], item[0]))
        return Return.ok(
            UserActivitySummary(
                user_id=user_id,
                total_events=sum(by_status.values()),
                by_status=by_status,
                by_category=by_category,
                by_severity=by_severity,
                top_actions=[
                    ActionCount(action=action, count=count)
                    for action, count in top_actions[:TOP_ACTIONS]
                ],
                first_activity=first,
                last_activity=last,
            )
        )
