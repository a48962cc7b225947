import asyncio
import logging

from libs.result import Result, Return
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.permissions import AccessLevel
from .query_support import check_access

logger = logging.getLogger(__name__)


class SubscribeAuditEventsUseCase:
    """
    Open a live feed of newly stored audit events.

    Business Rules:
    - Caller needs READ access on audit logs
    - The caller owns the returned queue and must unsubscribe it when done
    """

    def __init__(self, broadcaster: AuditEventBroadcaster):
        self.broadcaster = broadcaster

    async def execute(self, caller: AuthenticatedUser) -> Result[asyncio.Queue]:
        denied = check_access(caller.role, AccessLevel.read)
        if denied:
            return Return.err(denied)

        queue = self.broadcaster.subscribe()
        logger.info(
            f"User {caller.id} subscribed to audit events "
            f"({self.broadcaster.subscriber_count} listening)"
        )
        return Return.ok(queue)
