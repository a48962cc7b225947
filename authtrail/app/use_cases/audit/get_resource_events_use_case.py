from libs.result import Result, Return
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.permissions import AccessLevel
from .dtos import AuditEventFilters, AuditEventPage
from .get_audit_events_use_case import DEFAULT_PAGE_SIZE, page_of, validate_paging
from .query_support import build_criteria, check_access


class GetResourceEventsUseCase:
    """Timeline of every event that touched one resource, newest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        caller: AuthenticatedUser,
        resource_type: str,
        resource_id: str,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Result[AuditEventPage]:
        denied = check_access(caller.role, AccessLevel.read)
        if denied:
            return Return.err(denied)

        invalid = validate_paging(page, limit)
        if invalid:
            return Return.err(invalid)

        filters = AuditEventFilters(resource_type=resource_type, resource_id=resource_id)
        async with self.uow:
            events, total = await self.uow.audit_events.find(
                build_criteria(filters, (None, None)),
                offset=(page - 1) * limit,
                limit=limit,
            )
            return Return.ok(page_of(events, total, page, limit))
