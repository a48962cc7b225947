"""
Export Audit Events Use Case

Writes a filtered slice of the trail as CSV or JSON.
"""

import csv
import io
import json
from datetime import datetime
from typing import Callable, List

from libs.result import Error, Result, Return
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth.dtos import AuthenticatedUser
from authtrail.domain.base import utcnow
from authtrail.domain.entities import AuditAction, AuditStatus
from authtrail.domain.permissions import AccessLevel
from .dtos import AuditEventFilters, AuditEventView, ExportFile
from .query_support import build_criteria, check_access, resolve_date_range

EXPORT_FORMATS = ("csv", "json")

CSV_COLUMNS = [
    "id",
    "timestamp",
    "user_id",
    "action",
    "status",
    "event_category",
    "severity_level",
    "ip_address",
    "user_agent",
    "journey_id",
    "endpoint",
    "method",
    "resource_type",
    "resource_id",
    "changed_fields",
]


def to_csv(views: List[AuditEventView]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for view in views:
        row = view.model_dump(mode="json")
        row["changed_fields"] = ";".join(view.changed_fields)
        writer.writerow(row)
    return buffer.getvalue()


def to_json(views: List[AuditEventView]) -> str:
    return json.dumps([view.model_dump(mode="json") for view in views], indent=2)


class ExportAuditEventsUseCase:
    """
    Business Rules:
    - Caller needs READ access on audit logs
    - Same filters and date span rules as the listing
    - At most max_rows rows, newest first; truncation is reported
    - Every export is audited
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        max_rows: int = 10000,
        max_query_days: int = 365,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.audit = audit
        self.max_rows = max_rows
        self.max_query_days = max_query_days
        self.clock = clock

    async def execute(
        self,
        caller: AuthenticatedUser,
        filters: AuditEventFilters,
        export_format: str = "csv",
    ) -> Result[ExportFile]:
        denied = check_access(caller.role, AccessLevel.read)
        if denied:
            return Return.err(denied)

        export_format = (export_format or "csv").lower()
        if export_format not in EXPORT_FORMATS:
            return Return.err(
                Error("VALIDATION_FAILED", "format must be one of: csv, json")
            )

        now = self.clock()
        date_range = resolve_date_range(
            filters.start_date, filters.end_date, now, self.max_query_days
        )
        if date_range.is_err():
            return Return.err(date_range.error)

        async with self.uow:
            events, total = await self.uow.audit_events.find(
                build_criteria(filters, date_range.value), limit=self.max_rows
            )
            views = [AuditEventView.from_entity(event) for event in events]

        if export_format == "csv":
            content, media_type = to_csv(views), "text/csv"
        else:
            content, media_type = to_json(views), "application/json"

        self.audit.record(
            AuditAction.audit_export,
            AuditStatus.success,
            actor_id=caller.id,
            resource_type="audit_log",
            metadata={
                "format": export_format,
                "row_count": len(views),
                "total_matching": total,
                "filters": filters.model_dump(mode="json", exclude_none=True),
            },
        )

        return Return.ok(
            ExportFile(
                content=content,
                media_type=media_type,
                filename=f"audit-logs-{now.strftime('%Y%m%dT%H%M%S')}.{export_format}",
                row_count=len(views),
                truncated=total > len(views),
            )
        )
