from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from authtrail.app.services.audit_sink import AuditSink
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.domain.entities import AuditAction, AuditStatus
from .dtos import UpdateProfileCommand, UserView


class GetProfileUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserView]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            return Return.ok(UserView.from_entity(user))


class UpdateProfileUseCase:
    """
    Update the caller's own profile.

    Business Rules:
    - At least one field must be provided
    - Email is stored lower-case and must not belong to another user
    - Username must not belong to another user
    - Role, verification and credentials cannot be changed here
    - The change is audited with before/after snapshots
    """

    def __init__(self, uow: UnitOfWork, audit: AuditSink):
        self.uow = uow
        self.audit = audit

    async def execute(
        self, user_id: UUID, command: UpdateProfileCommand
    ) -> Result[UserView]:
        """
        Errors:
            - VALIDATION_FAILED: nothing to update
            - EMAIL_IN_USE / USERNAME_IN_USE: taken by another user
            - USER_NOT_FOUND: caller no longer exists
        """
        changes = command.model_dump(exclude_none=True)
        if not changes:
            return Return.err(Error("VALIDATION_FAILED", "No fields provided for update"))

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if "email" in changes:
                changes["email"] = changes["email"].strip().lower()
                if changes["email"] != user.email:
                    other = await self.uow.users.get_by_email(changes["email"])
                    if other is not None and other.id != user.id:
                        return Return.err(Error("EMAIL_IN_USE", "Email already in use"))

            if "username" in changes:
                changes["username"] = changes["username"].strip().lower()
                other = await self.uow.users.get_by_username(changes["username"])
                if other is not None and other.id != user.id:
                    return Return.err(
                        Error("USERNAME_IN_USE", "Username already in use")
                    )

            before = UserView.from_entity(user).snapshot()
            for field, value in changes.items():
                setattr(user, field, value)
            user = await self.uow.users.update(user)
            await self.uow.commit()

            after = UserView.from_entity(user)

        self.audit.record(
            AuditAction.profile_update,
            AuditStatus.success,
            actor_id=user.id,
            before=before,
            after=after.snapshot(),
            resource_type="user",
            resource_id=str(user.id),
        )
        return Return.ok(after)
