"""
User Entity

Credential record plus the public profile of a person using the app.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from ..base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - credentials, lockout state and profile.

    Business Rules:
    - Email must be unique across all users (stored lower-case)
    - Username is optional on signup and generated when absent
    - Password stored as bcrypt hash (cost factor 12), never serialized
    - Email verification required before the first login
    - account_locked_until in the future blocks every login attempt
    - failed_login_attempts resets to 0 on a successful login
    - ip_addresses is append-only
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    username: Optional[str] = Field(default=None, unique=True, index=True, max_length=30)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    role: UserRole = Field(default=UserRole.regular_user)

    # Email verification
    is_verified: bool = Field(default=False)
    verification_token: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )
    verification_token_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Login guard state
    failed_login_attempts: int = Field(default=0)
    account_locked_until: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Profile
    avatar: str = Field(default="", max_length=500)
    bio: str = Field(default="", max_length=500)
    country: str = Field(default="", max_length=100)
    city: str = Field(default="", max_length=100)
    website: str = Field(default="", max_length=255)
    job_title: str = Field(default="", max_length=100)

    # Known client addresses
    ip_address: Optional[str] = Field(default=None, max_length=45)
    ip_addresses: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_is_verified", "is_verified"),)

    def remember_ip(self, ip_address: Optional[str]) -> None:
        """Record the last seen address and append it to the known set."""
        if not ip_address:
            return
        self.ip_address = ip_address
        if ip_address not in (self.ip_addresses or []):
            # Reassign so the JSON column is flagged dirty
            self.ip_addresses = [*(self.ip_addresses or []), ip_address]
