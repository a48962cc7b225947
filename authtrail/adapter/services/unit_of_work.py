from sqlmodel.ext.asyncio.session import AsyncSession

from authtrail.adapter.repositories.audit_event_repository import AuditEventRepository
from authtrail.adapter.repositories.revoked_token_repository import RevokedTokenRepository
from authtrail.adapter.repositories.user_repository import UserRepository
from authtrail.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        self.revoked_tokens = RevokedTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
