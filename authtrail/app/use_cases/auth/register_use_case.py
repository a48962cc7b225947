import logging
import re
import secrets
from datetime import datetime, timedelta
from typing import Callable

import bcrypt

from libs.result import Error, Result, Return
from authtrail.app.repositories.user_repository import DuplicateUserError
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.base import utcnow
from authtrail.domain.entities import AuditAction, AuditStatus, User
from .dtos import RegisterCommand, RegisterResponse, UserView

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 30
USERNAME_ATTEMPTS = 10


def username_base(first_name: str, last_name: str) -> str:
    base = re.sub(r"[^a-z0-9]", "", f"{first_name}{last_name}".lower())
    return (base or "user")[: USERNAME_MAX_LENGTH - 4]


def verification_link(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/verify-email/{token}"


class RegisterUseCase:
    """
    Register Use Case

    Business Rules:
    - Email is stored lower-case and must be unique
    - Username, when omitted, is <first><last> lower-case alnum plus 4 random digits
    - Password hashed with bcrypt cost factor 12
    - Account starts unverified with a single-use verification token
    - The verification link is logged, no mail is sent
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

    async def _generate_username(self, first_name: str, last_name: str) -> str:
        base = username_base(first_name, last_name)
        for _ in range(USERNAME_ATTEMPTS):
            candidate = f"{base}{secrets.randbelow(10000):04d}"
            if await self.uow.users.get_by_username(candidate) is None:
                return candidate
        return f"{base[: USERNAME_MAX_LENGTH - 8]}{secrets.token_hex(4)}"

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute register use case

        Returns:
            Result[RegisterResponse], or Error(USER_EXISTS) if the email or
            username is taken
        """
        email = command.email.strip().lower()

        async with self.uow:
            if await self.uow.users.get_by_email(email):
                self.audit.record(
                    AuditAction.register,
                    AuditStatus.failed,
                    metadata={"email": email, "reason": "user_exists"},
                )
                return Return.err(Error("USER_EXISTS", "User already exists"))

            if command.username:
                username = command.username.strip().lower()
                if await self.uow.users.get_by_username(username):
                    return Return.err(Error("USER_EXISTS", "User already exists"))
            else:
                username = await self._generate_username(
                    command.first_name, command.last_name
                )

            password_hash = bcrypt.hashpw(
                command.password.encode("utf-8"), bcrypt.gensalt(12)
            )
            verification_token = secrets.token_hex(20)
            now = self.clock()

            user = User(
                email=email,
                username=username,
                first_name=command.first_name.strip(),
                last_name=command.last_name.strip(),
                password_hash=password_hash.decode("utf-8"),
                is_verified=False,
                verification_token=verification_token,
                verification_token_expires_at=now + self.verification_ttl,
                created_at=now,
                updated_at=now,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateUserError:
                # Lost a race with a concurrent registration
                self.audit.record(
                    AuditAction.register,
                    AuditStatus.failed,
                    metadata={"email": email, "reason": "user_exists"},
                )
                return Return.err(Error("USER_EXISTS", "User already exists"))
            await self.uow.commit()

        logger.info(
            f"Verification link for {email}: "
            f"{verification_link(self.frontend_url, verification_token)}"
        )

        view = UserView.from_entity(user)
        self.audit.record(
            AuditAction.register,
            AuditStatus.success,
            actor_id=user.id,
            after=view.snapshot(),
            resource_type="user",
            resource_id=str(user.id),
            metadata={"email": email},
        )

        return Return.ok(
            RegisterResponse(
                message="Registration successful. Please check your email to verify your account.",
                user=view,
            )
        )
