"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from authtrail.domain.entities import User


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - validated signup intent

    Created by API layer after request validation passes.
    """

    first_name: str
    last_name: str
    email: str
    password: str
    username: Optional[str] = None


class LoginCommand(BaseModel):
    email: str
    password: str
    ip_address: Optional[str] = None


class UpdateProfileCommand(BaseModel):
    """Profile fields a user may change; None means unchanged"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    website: Optional[str] = None
    job_title: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class UserView(BaseModel):
    """Public projection of a user; never carries credentials"""

    id: UUID
    email: str
    username: Optional[str] = None
    first_name: str
    last_name: str
    role: str
    is_verified: bool
    avatar: str = ""
    bio: str = ""
    country: str = ""
    city: str = ""
    website: str = ""
    job_title: str = ""
    created_at: datetime
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            role=getattr(user.role, "value", user.role),
            is_verified=user.is_verified,
            avatar=user.avatar,
            bio=user.bio,
            country=user.country,
            city=user.city,
            website=user.website,
            job_title=user.job_title,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

    def snapshot(self) -> dict:
        """JSON-safe dict for audit before/after state"""
        return self.model_dump(mode="json")


class RegisterResponse(BaseModel):
    message: str
    user: UserView


class LoginResponse(BaseModel):
    """Response for user login use case; refresh_token goes to a cookie"""

    access_token: str
    refresh_token: str
    user: UserView


class RefreshTokenResponse(BaseModel):
    access_token: str


class LogoutResponse(BaseModel):
    message: str


class AuthenticatedUser(BaseModel):
    """Caller resolved from a verified access token"""

    id: UUID
    email: str
    role: str
    token: str


class VerifyEmailResponse(BaseModel):
    """Response for email verification use case"""

    status: str
    message: str


class ResendVerificationResponse(BaseModel):
    """Response for resend verification email use case"""

    status: str
    message: str
