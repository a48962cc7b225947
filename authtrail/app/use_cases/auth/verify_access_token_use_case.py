from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from authtrail.api.utils.jwt import decode_access_token, hash_token
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.base import utcnow
from .dtos import AuthenticatedUser


class VerifyAccessTokenUseCase:
    """
    Resolve the caller behind a bearer access token.

    Business Rules:
    - Checks run in order: signature, expiry, blacklist, user lookup
    - A token signed with another secret is TOKEN_INVALID, never TOKEN_EXPIRED
    - A revoked token is rejected until its own expiry
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, token: str) -> Result[AuthenticatedUser]:
        """
        Errors:
            - TOKEN_INVALID / TOKEN_EXPIRED: decoding failed
            - TOKEN_BLACKLISTED: token was revoked at logout
            - USER_NOT_FOUND: subject no longer exists
        """
        decoded = decode_access_token(token)
        if decoded.is_err():
            return Return.err(decoded.error)
        payload = decoded.value

        async with self.uow:
            if await self.uow.revoked_tokens.is_revoked(hash_token(token), self.clock()):
                return Return.err(Error("TOKEN_BLACKLISTED", "Token has been revoked"))

            user = await self.uow.users.get_by_id(payload["user_id"])
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            return Return.ok(
                AuthenticatedUser(
                    id=user.id,
                    email=user.email,
                    role=getattr(user.role, "value", user.role),
                    token=token,
                )
            )
