"""
Login Use Case

Authenticates a user behind the login guard and issues access and refresh tokens.
"""

import logging
from datetime import datetime
from typing import Callable

import bcrypt

from libs.result import Error, Result, Return
from authtrail.api.utils.jwt import create_access_token, create_refresh_token
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.base import utcnow
from authtrail.domain.entities import AuditAction, AuditStatus
from authtrail.domain.login_guard import LockoutPolicy, is_locked, remaining_lock_minutes
from .dtos import LoginCommand, LoginResponse, UserView

logger = logging.getLogger(__name__)

# Compared against when the email is unknown so both paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(12))


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Lockout is checked before the password, a locked account is rejected
      even with the right password
    - Each wrong password increments the failure counter atomically
    - Reaching the max failed attempts locks the account for the lock duration
    - A lock lapses on its own; counters only reset on a successful login
    - Unverified accounts cannot log in
    - Unknown email and wrong password get the same answer
    - Success resets counters, remembers the client IP, sets last_login_at
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        policy: LockoutPolicy = LockoutPolicy(),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.audit = audit
        self.policy = policy
        self.clock = clock

    async def execute(self, command: LoginCommand) -> Result[LoginResponse]:
        """
        Execute login use case.

        Returns:
            Result with LoginResponse containing tokens and the user, or Error

        Errors:
            - INVALID_CREDENTIALS: unknown email or wrong password
            - ACCOUNT_LOCKED: too many failed attempts
            - ACCOUNT_UNVERIFIED: email not verified yet
        """
        email = command.email.strip().lower()

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                bcrypt.checkpw(command.password.encode("utf-8"), _DUMMY_HASH)
                self.audit.record(
                    AuditAction.login,
                    AuditStatus.failed,
                    metadata={"email": email, "reason": "unknown_email"},
                )
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid credentials"))

            now = self.clock()
            if is_locked(user.account_locked_until, now):
                minutes = remaining_lock_minutes(user.account_locked_until, now)
                self.audit.record(
                    AuditAction.login,
                    AuditStatus.failed,
                    actor_id=user.id,
                    metadata={"email": email, "reason": "account_locked"},
                )
                return Return.err(
                    Error(
                        "ACCOUNT_LOCKED",
                        f"Account locked. Try again in {minutes} minutes.",
                    )
                )

            password_valid = bcrypt.checkpw(
                command.password.encode("utf-8"), user.password_hash.encode("utf-8")
            )

            if not password_valid:
                user = await self.uow.users.record_failed_login(user)
                attempts = user.failed_login_attempts
                self.audit.record(
                    AuditAction.login,
                    AuditStatus.failed,
                    actor_id=user.id,
                    metadata={
                        "email": email,
                        "reason": "invalid_password",
                        "failed_attempts": attempts,
                    },
                )

                if self.policy.should_lock(attempts):
                    locked_until = self.policy.lock_until(now)
                    await self.uow.users.lock_account(user, locked_until)
                    await self.uow.commit()
                    logger.warning(
                        f"Account {user.id} locked after {attempts} failed login attempts"
                    )
                    self.audit.record(
                        AuditAction.account_lock,
                        AuditStatus.success,
                        actor_id=user.id,
                        before={"account_locked_until": None},
                        after={"account_locked_until": locked_until.isoformat()},
                        resource_type="user",
                        resource_id=str(user.id),
                        metadata={"failed_attempts": attempts},
                    )
                    return Return.err(
                        Error(
                            "ACCOUNT_LOCKED",
                            "Account locked due to too many failed login attempts. "
                            f"Try again in {self.policy.lock_minutes} minutes.",
                        )
                    )

                await self.uow.commit()
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid credentials"))

            if not user.is_verified:
                self.audit.record(
                    AuditAction.login,
                    AuditStatus.failed,
                    actor_id=user.id,
                    metadata={"email": email, "reason": "unverified"},
                )
                return Return.err(
                    Error(
                        "ACCOUNT_UNVERIFIED",
                        "Account not verified. Please check your email.",
                    )
                )

            user.remember_ip(command.ip_address)
            user.last_login_at = now
            user = await self.uow.users.reset_login_failures(user)
            await self.uow.commit()

            view = UserView.from_entity(user)

        access_token = create_access_token(user.id)
        refresh_token = create_refresh_token(user.id)

        self.audit.record(
            AuditAction.login,
            AuditStatus.success,
            actor_id=user.id,
            metadata={"email": email},
        )

        return Return.ok(
            LoginResponse(
                access_token=access_token,
                refresh_token=refresh_token,
                user=view,
            )
        )
