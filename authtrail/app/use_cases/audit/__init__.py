"""
Audit Use Cases

All audit-related business logic.
"""

from .get_audit_events_use_case import GetAuditEventsUseCase
from .search_audit_events_use_case import SearchAuditEventsUseCase
from .purge_audit_events_use_case import PurgeAuditEventsUseCase
from .get_audit_filter_options_use_case import GetAuditFilterOptionsUseCase
from .get_user_activity_summary_use_case import GetUserActivitySummaryUseCase
from .get_resource_events_use_case import GetResourceEventsUseCase
from .export_audit_events_use_case import ExportAuditEventsUseCase
from .subscribe_audit_events_use_case import SubscribeAuditEventsUseCase
from .dtos import (
    AuditEventFilters,
    AuditEventPage,
    AuditEventView,
    ExportFile,
    FilterOptions,
    PurgeResponse,
    SearchResults,
    UserActivitySummary,
)

__all__ = [
    "GetAuditEventsUseCase",
    "SearchAuditEventsUseCase",
    "PurgeAuditEventsUseCase",
    "GetAuditFilterOptionsUseCase",
    "GetUserActivitySummaryUseCase",
    "GetResourceEventsUseCase",
    "ExportAuditEventsUseCase",
    "SubscribeAuditEventsUseCase",
    "AuditEventFilters",
    "AuditEventPage",
    "AuditEventView",
    "ExportFile",
    "FilterOptions",
    "PurgeResponse",
    "SearchResults",
    "UserActivitySummary",
]
