"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows and the caller's profile
- audit/: Audit trail queries and maintenance
"""

from .auth import (
    GetProfileUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterUseCase,
    ResendVerificationUseCase,
    UpdateProfileUseCase,
    VerifyAccessTokenUseCase,
    VerifyEmailUseCase,
)
from .audit import (
    ExportAuditEventsUseCase,
    GetAuditEventsUseCase,
    GetAuditFilterOptionsUseCase,
    GetResourceEventsUseCase,
    GetUserActivitySummaryUseCase,
    PurgeAuditEventsUseCase,
    SearchAuditEventsUseCase,
    SubscribeAuditEventsUseCase,
)

__all__ = [
    # Auth
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "VerifyAccessTokenUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    # Audit
    "GetAuditEventsUseCase",
    "SearchAuditEventsUseCase",
    "PurgeAuditEventsUseCase",
    "GetAuditFilterOptionsUseCase",
    "GetUserActivitySummaryUseCase",
    "GetResourceEventsUseCase",
    "ExportAuditEventsUseCase",
    "SubscribeAuditEventsUseCase",
]
