"""
Audit Recorder

Builds and persists audit events. Recording is best-effort: nothing here
raises to the caller, failed writes are logged and dropped, and nothing is
written once the process has started shutting down.
"""

import hashlib
import logging
import uuid
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union
from uuid import UUID

from authtrail.app.services import server_state
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.app.services.request_context import RequestContext
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain import audit_taxonomy
from authtrail.domain.base import utcnow
from authtrail.domain.client_info import parse_user_agent
from authtrail.domain.entities import AuditAction, AuditEvent, AuditStatus

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], AbstractAsyncContextManager]


def derive_journey_id(
    context: RequestContext, actor_id: Optional[UUID], now: datetime
) -> str:
    """
    Correlation id for related events of one actor.

    An explicit id from the client wins. Otherwise user id, client IP and the
    UTC hour are hashed so requests from the same actor within the same hour
    group together without session state. Without an actor a random id is
    used.
    """
    if context.journey_id:
        return context.journey_id[:64]
    if actor_id is None:
        return uuid.uuid4().hex
    bucket = now.strftime("%Y-%m-%dT%H")
    seed = f"{actor_id}:{context.ip_address or ''}:{bucket}"
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:32]


def build_audit_event(
    context: RequestContext,
    action: AuditAction,
    status: AuditStatus,
    actor_id: Optional[UUID],
    now: datetime,
    before: Optional[Mapping[str, Any]] = None,
    after: Optional[Mapping[str, Any]] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> AuditEvent:
    changed = audit_taxonomy.changed_fields(before, after)
    return AuditEvent(
        user_id=actor_id,
        action=action.value,
        status=status,
        event_category=audit_taxonomy.categorize(action),
        severity_level=audit_taxonomy.severity_for(action, status),
        ip_address=context.ip_address,
        user_agent=context.user_agent,
        client_info=parse_user_agent(context.user_agent),
        journey_id=derive_journey_id(context, actor_id, now),
        endpoint=context.endpoint,
        method=context.method,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        before_state=audit_taxonomy.restrict_state(before, changed),
        after_state=audit_taxonomy.restrict_state(after, changed),
        changed_fields=changed,
        event_metadata=dict(metadata) if metadata else None,
        timestamp=now,
    )


class AuditRecorder:
    """
    Persists audit events through its own unit of work.

    Business Rules:
    - Never raises; storage errors are logged and swallowed, no retry
    - No-op during shutdown
    - Only taxonomy actions are recorded
    - No actor => recorded only for login, register and verify-email
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        broadcaster: Optional[AuditEventBroadcaster] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow_factory = uow_factory
        self.broadcaster = broadcaster
        self.clock = clock

    async def record(
        self,
        context: RequestContext,
        action: Union[AuditAction, str],
        status: AuditStatus,
        *,
        actor_id: Optional[UUID] = None,
        before: Optional[Mapping[str, Any]] = None,
        after: Optional[Mapping[str, Any]] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[AuditEvent]:
        """
        Record one audit event.

        Returns:
            The stored event, or None when it was skipped or could not be stored
        """
        if server_state.is_shutting_down():
            return None

        try:
            action = audit_taxonomy.parse_action(action)
        except ValueError:
            logger.error(f"Refusing to record unknown audit action: {action!r}")
            return None

        if actor_id is None and action not in audit_taxonomy.ANONYMOUS_ACTIONS:
            logger.debug(f"Skipping audit event {action.value}: no actor")
            return None

        try:
            event = build_audit_event(
                context,
                action,
                AuditStatus(status),
                actor_id,
                self.clock(),
                before=before,
                after=after,
                resource_type=resource_type,
                resource_id=resource_id,
                metadata=metadata,
            )
            async with self.uow_factory() as uow:
                await uow.audit_events.create(event)
                await uow.commit()
        except Exception:
            if server_state.is_shutting_down():
                return None
            logger.exception(f"Failed to store audit event {action.value}")
            return None

        if self.broadcaster is not None:
            try:
                await self.broadcaster.publish(event)
            except Exception:
                logger.exception("Failed to broadcast audit event")

        return event
