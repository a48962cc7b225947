"""
Resend Verification Email Use Case

Issues a fresh verification token for an unverified account.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from libs.result import Error, Result, Return
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.base import utcnow
from authtrail.domain.entities import AuditAction, AuditStatus
from .dtos import ResendVerificationResponse
from .register_use_case import verification_link

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If an account exists for this email, a verification link has been sent."


class ResendVerificationUseCase:
    """
    Use case for resending email verification.

    Business Rules:
    - New token replaces the old one and the expiry restarts
    - Unknown emails get the same answer as known ones
    - Already verified accounts are told so
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        frontend_url: str,
        verification_ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.audit = audit
        self.frontend_url = frontend_url
        self.verification_ttl = verification_ttl
        self.clock = clock

    async def execute(self, email: str) -> Result[ResendVerificationResponse]:
        """
        Errors:
            - ALREADY_VERIFIED: the account is verified already
        """
        email = email.strip().lower()

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                return Return.ok(
                    ResendVerificationResponse(status="sent", message=GENERIC_MESSAGE)
                )

            if user.is_verified:
                return Return.err(Error("ALREADY_VERIFIED", "Email is already verified"))

            token = secrets.token_hex(20)
            user.verification_token = token
            user.verification_token_expires_at = self.clock() + self.verification_ttl
            await self.uow.users.update(user)
            await self.uow.commit()

        logger.info(
            f"Verification link for {email}: {verification_link(self.frontend_url, token)}"
        )
        self.audit.record(
            AuditAction.email_verification,
            AuditStatus.pending,
            actor_id=user.id,
            metadata={"email": email},
        )

        return Return.ok(ResendVerificationResponse(status="sent", message=GENERIC_MESSAGE))
