import hashlib
import uuid
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from config import ApplicationConfig
from libs.result import Error, Result, Return
from authtrail.domain.entities import TokenType

ALGORITHM = "HS256"


def _encode(user_id: UUID, token_type: TokenType, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "type": token_type.value,
        "jti": uuid.uuid4().hex,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def create_access_token(user_id: UUID) -> str:
    """
    Generate JWT access token

    Args:
        user_id: User UUID

    Returns:
        JWT token string (HS256, ACCESS_TOKEN_EXPIRE_MINUTES expiry)
    """
    return _encode(
        user_id,
        TokenType.access,
        ApplicationConfig.JWT_SECRET,
        timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: UUID) -> str:
    """
    Generate JWT refresh token, signed with its own secret.

    Returns:
        JWT token string (HS256, REFRESH_TOKEN_EXPIRE_DAYS expiry)
    """
    return _encode(
        user_id,
        TokenType.refresh,
        ApplicationConfig.REFRESH_TOKEN_SECRET,
        timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def _decode(token: str, secret: str, expected_type: TokenType) -> Result[dict]:
    # python-jose checks the signature before the exp claim
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        return Return.err(Error("TOKEN_EXPIRED", "Token has expired"))
    except JWTError:
        return Return.err(Error("TOKEN_INVALID", "Token is invalid"))

    if payload.get("type") != expected_type.value:
        return Return.err(Error("TOKEN_INVALID", "Unexpected token type"))
    try:
        payload["user_id"] = UUID(str(payload.get("user_id")))
    except ValueError:
        return Return.err(Error("TOKEN_INVALID", "Token subject is invalid"))
    return Return.ok(payload)


def decode_access_token(token: str) -> Result[dict]:
    """
    Verify and decode an access token

    Returns:
        Result with the payload (user_id as UUID), or Error
        TOKEN_INVALID / TOKEN_EXPIRED
    """
    return _decode(token, ApplicationConfig.JWT_SECRET, TokenType.access)


def decode_refresh_token(token: str) -> Result[dict]:
    return _decode(token, ApplicationConfig.REFRESH_TOKEN_SECRET, TokenType.refresh)


def token_expiry(token: str) -> Optional[datetime]:
    """Naive UTC expiry read from the unverified claims, None if unreadable"""
    try:
        exp = jwt.get_unverified_claims(token).get("exp")
    except JWTError:
        return None
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, UTC).replace(tzinfo=None)


def hash_token(token: str) -> str:
    """Blacklist key of a token; the raw token is never stored"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
