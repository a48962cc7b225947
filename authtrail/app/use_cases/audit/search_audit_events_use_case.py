from libs.result import Error, Result, Return
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.permissions import AccessLevel
from .dtos import AuditEventFilters, AuditEventView, SearchResults
from .query_support import build_criteria, check_access

SEARCH_LIMIT = 50


class SearchAuditEventsUseCase:
    """
    Free-text search over action, status, IP, user agent, endpoint and
    journey id. Newest first, at most 50 events.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, caller: AuthenticatedUser, query: str) -> Result[SearchResults]:
        denied = check_access(caller.role, AccessLevel.read)
        if denied:
            return Return.err(denied)

        query = (query or "").strip()
        if not query:
            return Return.err(Error("VALIDATION_FAILED", "Please provide a search term"))

        async with self.uow:
            events, _ = await self.uow.audit_events.find(
                build_criteria(AuditEventFilters(search=query), (None, None)),
                limit=SEARCH_LIMIT,
            )
            views = [AuditEventView.from_entity(event) for event in events]

        return Return.ok(SearchResults(query=query, count=len(views), events=views))
