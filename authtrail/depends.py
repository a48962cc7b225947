import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import BackgroundTasks, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from authtrail.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from authtrail.api.audit_trail import BackgroundAuditTrail
from authtrail.api.error import ClientError
from authtrail.api.utils.request_context import build_request_context
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.app.services.audit_recorder import AuditRecorder
from authtrail.app.services.request_context import RequestContext
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth import AuthenticatedUser, VerifyAccessTokenUseCase

logger = logging.getLogger(__name__)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

audit_broadcaster = AuditEventBroadcaster()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@asynccontextmanager
async def open_unit_of_work():
    """Standalone unit of work for writes that outlive the request session"""
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            yield uow


def get_audit_broadcaster() -> AuditEventBroadcaster:
    return audit_broadcaster


def get_audit_recorder() -> AuditRecorder:
    return AuditRecorder(open_unit_of_work, broadcaster=audit_broadcaster)


def get_request_context(request: Request) -> RequestContext:
    return build_request_context(request)


def get_audit_trail(
    background_tasks: BackgroundTasks,
    context: RequestContext = Depends(get_request_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
) -> BackgroundAuditTrail:
    return BackgroundAuditTrail(recorder, context, background_tasks)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Optional[AuthenticatedUser]:
    """
    Resolve the bearer token if one is presented.

    Returns:
        The caller, or None when there is no token or it does not verify
    """
    if credentials is None or not credentials.credentials:
        return None
    result = await VerifyAccessTokenUseCase(uow).execute(credentials.credentials)
    if result.is_err():
        logger.info(f"Access token rejected: {result.error.code}")
        return None
    return result.value


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> AuthenticatedUser:
    """
    Dependency to extract and verify the JWT from the Authorization header.

    Raises:
        ClientError: 401 TOKEN_MISSING without a token, 401 NOT_AUTHORIZED
            for any verification failure (the reason is only logged)
    """
    if credentials is None or not credentials.credentials:
        raise ClientError(
            Error("TOKEN_MISSING", "Not authorized, no token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await VerifyAccessTokenUseCase(uow).execute(credentials.credentials)
    if result.is_err():
        logger.info(f"Access token rejected: {result.error.code}")
        raise ClientError(
            Error("NOT_AUTHORIZED", "Not authorized"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return result.value
