from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from authtrail.domain.entities import User


class DuplicateUserError(Exception):
    """A unique user field (email, username, verification token) is already taken"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        pass

    @abstractmethod
    async def get_by_verification_token(self, token: str) -> Optional[User]:
        """Get user by email verification token"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create a new user

        Raises:
            DuplicateUserError: a unique field collides with an existing row
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def record_failed_login(self, user: User) -> User:
        """Atomically increment failed_login_attempts and return the refreshed user"""
        pass

    @abstractmethod
    async def lock_account(self, user: User, until: datetime) -> User:
        """Set account_locked_until"""
        pass

    @abstractmethod
    async def reset_login_failures(self, user: User) -> User:
        """Zero failed_login_attempts and clear account_locked_until"""
        pass
