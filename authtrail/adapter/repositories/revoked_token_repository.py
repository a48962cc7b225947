from datetime import datetime

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from authtrail.app.repositories.revoked_token_repository import IRevokedTokenRepository
from authtrail.domain.entities import RevokedToken


class RevokedTokenRepository(IRevokedTokenRepository):
    """Token blacklist backed by the revoked_tokens table"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, revoked_token: RevokedToken) -> RevokedToken:
        existing = await self.session.get(RevokedToken, revoked_token.token_hash)
        if existing is not None:
            return existing
        self.session.add(revoked_token)
        await self.session.flush()
        await self.session.refresh(revoked_token)
        return revoked_token

    async def is_revoked(self, token_hash: str, now: datetime) -> bool:
        stmt = select(RevokedToken.token_hash).where(
            RevokedToken.token_hash == token_hash,
            RevokedToken.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def purge_expired(self, now: datetime) -> int:
        stmt = delete(RevokedToken).where(RevokedToken.expires_at <= now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
