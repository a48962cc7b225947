from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Result, Return
from authtrail.api.utils.jwt import hash_token, token_expiry
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.base import utcnow
from authtrail.domain.entities import AuditAction, AuditStatus, RevokedToken, TokenType
from .dtos import LogoutResponse


class LogoutUseCase:
    """
    Revoke the caller's tokens.

    Business Rules:
    - The access token is blacklisted until its own expiry
    - A presented refresh token is blacklisted too
    - Tokens already past expiry are not stored
    - Expired blacklist entries are purged on the way
    - Logout always succeeds
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

    async def execute(
        self,
        user_id: Optional[UUID] = None,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ) -> Result[LogoutResponse]:
        now = self.clock()
        revoked = []

        async with self.uow:
            for token, token_type in (
                (access_token, TokenType.access),
                (refresh_token, TokenType.refresh),
            ):
                if not token:
                    continue
                expires_at = token_expiry(token)
                if expires_at is None or expires_at <= now:
                    continue
                await self.uow.revoked_tokens.add(
                    RevokedToken(
                        token_hash=hash_token(token),
                        user_id=user_id,
                        token_type=token_type,
                        expires_at=expires_at,
                        revoked_at=now,
                    )
                )
                revoked.append(token_type.value)

            await self.uow.revoked_tokens.purge_expired(now)
            await self.uow.commit()

        self.audit.record(
            AuditAction.logout,
            AuditStatus.success,
            actor_id=user_id,
            metadata={"revoked": revoked},
        )
        return Return.ok(LogoutResponse(message="Logged out successfully"))
