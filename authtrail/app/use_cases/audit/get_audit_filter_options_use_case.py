from libs.result import Result, Return
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.entities import AuditAction
from authtrail.domain.permissions import AccessLevel
from .dtos import FilterOptions
from .query_support import check_access


class GetAuditFilterOptionsUseCase:
    """Distinct values stored in the trail, for building filter dropdowns"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, caller: AuthenticatedUser) -> Result[FilterOptions]:
        denied = check_access(caller.role, AccessLevel.read)
        if denied:
            return Return.err(denied)

        async with self.uow:
            repo = self.uow.audit_events
            options = FilterOptions(
                actions=await repo.distinct_values("action"),
                event_categories=await repo.distinct_values("event_category"),
                severity_levels=await repo.distinct_values("severity_level"),
                statuses=await repo.distinct_values("status"),
                resource_types=await repo.distinct_values("resource_type"),
                known_actions=sorted(action.value for action in AuditAction),
            )

        return Return.ok(options)
