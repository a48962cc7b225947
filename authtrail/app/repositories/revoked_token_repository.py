from abc import ABC, abstractmethod
from datetime import datetime

from authtrail.domain.entities import RevokedToken


class IRevokedTokenRepository(ABC):
    """Token blacklist interface - a key/value store with TTL semantics"""

    @abstractmethod
    async def add(self, revoked_token: RevokedToken) -> RevokedToken:
        """Blacklist a token hash (idempotent)"""
        pass

    @abstractmethod
    async def is_revoked(self, token_hash: str, now: datetime) -> bool:
        """True if the hash is blacklisted and the entry has not expired"""
        pass

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Delete entries past their expiry. Returns count of deleted entries."""
        pass
