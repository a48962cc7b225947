"""
Verify Email Use Case

Handles email verification via the single-use token from the verification link.
"""

from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.base import utcnow
from authtrail.domain.entities import AuditAction, AuditStatus
from .dtos import VerifyEmailResponse


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Token must match a user's verification_token
    - Token must not be expired
    - Sets is_verified and clears the token (single-use)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.audit = audit
        self.clock = clock

    async def execute(self, token: str) -> Result[VerifyEmailResponse]:
        """
        Execute email verification use case.

        Errors:
            - INVALID_TOKEN: token unknown or expired
        """
        async with self.uow:
            user = await self.uow.users.get_by_verification_token(token)

            expired = (
                user is not None
                and (
                    user.verification_token_expires_at is None
                    or user.verification_token_expires_at < self.clock()
                )
            )
            if user is None or expired:
                self.audit.record(
                    AuditAction.verify_email,
                    AuditStatus.failed,
                    actor_id=user.id if user else None,
                    metadata={"reason": "expired" if expired else "unknown_token"},
                )
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired verification token")
                )

            user.is_verified = True
            user.verification_token = None
            user.verification_token_expires_at = None
            await self.uow.users.update(user)
            await self.uow.commit()

        self.audit.record(
            AuditAction.verify_email,
            AuditStatus.success,
            actor_id=user.id,
            before={"is_verified": False},
            after={"is_verified": True},
            resource_type="user",
            resource_id=str(user.id),
            metadata={"email": user.email},
        )

        return Return.ok(
            VerifyEmailResponse(
                status="verified",
                message="Email verified successfully. You can now log in.",
            )
        )
