from abc import ABC, abstractmethod

from authtrail.app.repositories.audit_event_repository import IAuditEventRepository
from authtrail.app.repositories.revoked_token_repository import IRevokedTokenRepository
from authtrail.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    audit_events: IAuditEventRepository
    revoked_tokens: IRevokedTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
