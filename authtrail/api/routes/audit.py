"""
Audit API Routes

Browsing, searching, exporting and purging the audit trail, plus a live
feed of new events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import StreamingResponse

from config import ApplicationConfig
from libs.result import Error
from authtrail.api.audit_trail import BackgroundAuditTrail
from authtrail.api.error import ClientError, ServerError
from authtrail.api.utils.event_stream import audit_event_stream
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.audit import (
    AuditEventFilters,
    AuditEventPage,
    ExportAuditEventsUseCase,
    FilterOptions,
    GetAuditEventsUseCase,
    GetAuditFilterOptionsUseCase,
    GetResourceEventsUseCase,
    GetUserActivitySummaryUseCase,
    PurgeAuditEventsUseCase,
    PurgeResponse,
    SearchAuditEventsUseCase,
    SearchResults,
    SubscribeAuditEventsUseCase,
    UserActivitySummary,
)
from authtrail.app.use_cases.auth import AuthenticatedUser
from authtrail.depends import (
    get_audit_broadcaster,
    get_audit_trail,
    get_current_user,
    get_unit_of_work,
)

router = APIRouter(prefix="/audit-logs", tags=["Audit"])

ERROR_STATUS = {
    "VALIDATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "INSUFFICIENT_PERMISSION": status.HTTP_403_FORBIDDEN,
}


def raise_for(error: Error, audit: Optional[BackgroundAuditTrail] = None):
    background = audit.background_tasks if audit else None
    if error.code in ERROR_STATUS:
        raise ClientError(error, status_code=ERROR_STATUS[error.code], background=background)
    raise ServerError(error, background=background)


def get_filters(
    user_id: Optional[UUID] = Query(None),
    action: Optional[str] = Query(None),
    event_category: Optional[str] = Query(None),
    severity: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    search: Optional[str] = Query(None),
    resource_type: Optional[str] = Query(None),
    resource_id: Optional[str] = Query(None),
) -> AuditEventFilters:
    return AuditEventFilters(
        user_id=user_id,
        action=action,
        event_category=event_category,
        severity=severity,
        status=status,
        start_date=start_date,
        end_date=end_date,
        search=search,
        resource_type=resource_type,
        resource_id=resource_id,
    )


@router.get("", status_code=status.HTTP_200_OK, response_model=AuditEventPage)
async def get_audit_logs(
    filters: AuditEventFilters = Depends(get_filters),
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(25, description="Events per page (1-100)"),
    sort: str = Query("-timestamp", description="'-timestamp' (newest first) or 'timestamp'"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List audit events.

    Raises:
        - 400 Bad Request: Invalid date span, paging or sort
        - 401 Unauthorized: Missing or invalid token
        - 403 Forbidden: No READ access to audit logs
    """
    use_case = GetAuditEventsUseCase(uow, max_query_days=ApplicationConfig.AUDIT_MAX_QUERY_DAYS)
    result = await use_case.execute(current_user, filters, page=page, limit=limit, sort=sort)

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.get("/search", status_code=status.HTTP_200_OK, response_model=SearchResults)
async def search_audit_logs(
    q: Optional[str] = Query(None, description="Search term"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await SearchAuditEventsUseCase(uow).execute(current_user, q)

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.get("/filters", status_code=status.HTTP_200_OK, response_model=FilterOptions)
async def get_filter_options(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetAuditFilterOptionsUseCase(uow).execute(current_user)

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.get("/export", status_code=status.HTTP_200_OK)
async def export_audit_logs(
    filters: AuditEventFilters = Depends(get_filters),
    format: str = Query("csv", description="csv or json"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
):
    """
    Download matching events as a CSV or JSON attachment.

    Raises:
        - 400 Bad Request: Unknown format or invalid date span
        - 403 Forbidden: No READ access to audit logs
    """
    use_case = ExportAuditEventsUseCase(
        uow,
        audit,
        max_rows=ApplicationConfig.AUDIT_EXPORT_MAX_ROWS,
        max_query_days=ApplicationConfig.AUDIT_MAX_QUERY_DAYS,
    )
    result = await use_case.execute(current_user, filters, export_format=format)

    if result.is_err():
        raise_for(result.error, audit)

    export = result.value
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export.filename}"',
            "X-Export-Row-Count": str(export.row_count),
            "X-Export-Truncated": str(export.truncated).lower(),
        },
        background=audit.background_tasks,
    )


@router.get(
    "/users/{user_id}/summary",
    status_code=status.HTTP_200_OK,
    response_model=UserActivitySummary,
)
async def get_user_activity_summary(
    user_id: UUID,
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = GetUserActivitySummaryUseCase(
        uow, max_query_days=ApplicationConfig.AUDIT_MAX_QUERY_DAYS
    )
    result = await use_case.execute(current_user, user_id, start_date, end_date)

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.get(
    "/resources/{resource_type}/{resource_id}",
    status_code=status.HTTP_200_OK,
    response_model=AuditEventPage,
)
async def get_resource_events(
    resource_type: str,
    resource_id: str,
    page: int = Query(1),
    limit: int = Query(25),
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetResourceEventsUseCase(uow).execute(
        current_user, resource_type, resource_id, page=page, limit=limit
    )

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.delete("", status_code=status.HTTP_200_OK, response_model=PurgeResponse)
async def purge_audit_logs(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
):
    """
    Delete every audit event between start_date and end_date.

    Raises:
        - 400 Bad Request: Missing bounds or start_date not before end_date
        - 403 Forbidden: FULL access to audit logs required
    """
    result = await PurgeAuditEventsUseCase(uow, audit).execute(
        current_user, start_date, end_date
    )

    if result.is_err():
        raise_for(result.error, audit)

    return result.value


@router.get("/stream", status_code=status.HTTP_200_OK)
async def stream_audit_logs(
    request: Request,
    current_user: AuthenticatedUser = Depends(get_current_user),
    broadcaster: AuditEventBroadcaster = Depends(get_audit_broadcaster),
):
    """
    Live feed of newly stored audit events as server-sent events.

    Raises:
        - 401 Unauthorized: Missing or invalid token
        - 403 Forbidden: No READ access to audit logs
    """
    result = await SubscribeAuditEventsUseCase(broadcaster).execute(current_user)

    if result.is_err():
        raise_for(result.error)

    return StreamingResponse(
        audit_event_stream(broadcaster, result.value, request.is_disconnected),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
