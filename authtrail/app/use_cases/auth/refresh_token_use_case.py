"""
Refresh Token Use Case

Mints a new access token from the refresh token cookie.
"""

from datetime import datetime
from typing import Callable, Optional

from libs.result import Error, Result, Return
from authtrail.api.utils.jwt import create_access_token, decode_refresh_token, hash_token
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.base import utcnow
from authtrail.domain.entities import AuditAction, AuditStatus
from .dtos import RefreshTokenResponse


class RefreshTokenUseCase:
    """
    Use case for refreshing JWT access tokens.

    Business Rules:
    - The refresh token itself is not rotated
    - A refresh token revoked at logout is rejected
    - The token's user must still exist
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

    async def execute(self, refresh_token: Optional[str]) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Errors:
            - TOKEN_MISSING: no refresh token presented
            - TOKEN_INVALID / TOKEN_EXPIRED: decoding failed
            - TOKEN_BLACKLISTED: revoked at logout
            - USER_NOT_FOUND: subject no longer exists
        """
        if not refresh_token:
            return Return.err(Error("TOKEN_MISSING", "Refresh token is required"))

        decoded = decode_refresh_token(refresh_token)
        if decoded.is_err():
            return Return.err(decoded.error)
        user_id = decoded.value["user_id"]

        async with self.uow:
            if await self.uow.revoked_tokens.is_revoked(
                hash_token(refresh_token), self.clock()
            ):
                self.audit.record(
                    AuditAction.token_refresh,
                    AuditStatus.failed,
                    actor_id=user_id,
                    metadata={"reason": "revoked"},
                )
                return Return.err(Error("TOKEN_BLACKLISTED", "Token has been revoked"))

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

        self.audit.record(AuditAction.token_refresh, AuditStatus.success, actor_id=user_id)
        return Return.ok(RefreshTokenResponse(access_token=create_access_token(user_id)))
