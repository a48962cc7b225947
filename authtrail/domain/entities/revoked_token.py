"""
RevokedToken Entity

Tokens invalidated before their natural expiry.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import TokenType


class RevokedToken(SQLModel, table=True):
    """
    RevokedToken entity - blacklist entry keyed by the token's SHA-256 hash.

    Business Rules:
    - The raw token is never stored
    - expires_at mirrors the token's own exp claim; past that the entry is
      meaningless and may be purged
    - Lives in the credentials database so every process sees it
    """

    __tablename__ = "revoked_tokens"

    token_hash: str = Field(primary_key=True, max_length=64)
    user_id: Optional[UUID] = Field(default=None, index=True)
    token_type: TokenType = Field(default=TokenType.access)

    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    revoked_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_revoked_token_expires_at", "expires_at"),)
