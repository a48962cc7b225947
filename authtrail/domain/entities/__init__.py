"""
Authtrail Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserRole,
    AuditStatus,
    EventCategory,
    SeverityLevel,
    TokenType,
    AuditAction,
)

# Export all entities
from .user import User
from .audit_event import AuditEvent
from .revoked_token import RevokedToken

__all__ = [
    # Enums
    "UserRole",
    "AuditStatus",
    "EventCategory",
    "SeverityLevel",
    "TokenType",
    "AuditAction",
    # Entities
    "User",
    "AuditEvent",
    "RevokedToken",
]
