from typing import Any, Mapping, Optional, Union
from uuid import UUID

from starlette.background import BackgroundTasks

from authtrail.app.services.audit_recorder import AuditRecorder
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.request_context import RequestContext
from authtrail.domain.entities import AuditAction, AuditStatus


class BackgroundAuditTrail(AuditSink):
    """
    AuditSink that defers recording until the response has been sent.

    The tasks belong to the request; route handlers hand them to ClientError
    so failed requests are audited too.
    """

    def __init__(
        self,
        recorder: AuditRecorder,
        context: RequestContext,
        background_tasks: BackgroundTasks,
    ):
        self.recorder = recorder
        self.context = context
        self.background_tasks = background_tasks

    def record(
        self,
        action: Union[AuditAction, str],
        status: AuditStatus,
        *,
        actor_id: Optional[UUID] = None,
        before: Optional[Mapping[str, Any]] = None,
        after: Optional[Mapping[str, Any]] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.background_tasks.add_task(
            self.recorder.record,
            self.context,
            action,
            status,
            actor_id=actor_id,
            before=before,
            after=after,
            resource_type=resource_type,
            resource_id=resource_id,
            metadata=metadata,
        )
