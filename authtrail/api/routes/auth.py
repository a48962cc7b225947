"""
Authentication API Routes

Register, login, token refresh, logout, email verification and the caller's
own profile.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from libs.result import Error
from authtrail.api.audit_trail import BackgroundAuditTrail
from authtrail.api.error import ClientError, ServerError
from authtrail.api.utils.cookies import (
    REFRESH_COOKIE_NAME,
    clear_refresh_cookie,
    set_refresh_cookie,
)
from authtrail.app.services.request_context import RequestContext
from authtrail.app.services.unit_of_work import UnitOfWork
from authtrail.app.use_cases.auth import (
    AuthenticatedUser,
    GetProfileUseCase,
    LoginCommand,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    ResendVerificationResponse,
    ResendVerificationUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
    UserView,
    VerifyEmailResponse,
    VerifyEmailUseCase,
)
from authtrail.depends import (
    get_audit_trail,
    get_current_user,
    get_optional_user,
    get_request_context,
    get_unit_of_work,
)
from authtrail.domain.login_guard import LockoutPolicy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _verification_ttl() -> timedelta:
    return timedelta(hours=ApplicationConfig.VERIFICATION_TOKEN_HOURS)


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    username: Optional[str] = Field(
        None, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_]+$"
    )
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (min 8 chars)")


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
):
    """
    Register a new, unverified account.

    Raises:
        - 400 Bad Request: User already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = RegisterCommand(
        first_name=request.first_name,
        last_name=request.last_name,
        username=request.username,
        email=request.email,
        password=request.password,
    )

    use_case = RegisterUseCase(
        uow,
        audit,
        frontend_url=ApplicationConfig.FRONTEND_URL,
        verification_ttl=_verification_ttl(),
    )
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "USER_EXISTS":
            raise ClientError(error, background=audit.background_tasks)
        raise ServerError(error, background=audit.background_tasks)

    return result.value


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class LoginResponseBody(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserView


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponseBody)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
    context: RequestContext = Depends(get_request_context),
):
    """
    Authenticate and issue tokens.

    The access token is returned in the body, the refresh token only as the
    HttpOnly refreshToken cookie.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Account locked or not verified
    """
    use_case = LoginUseCase(uow, audit, policy=LockoutPolicy.from_config(ApplicationConfig))
    result = await use_case.execute(
        LoginCommand(
            email=request.email,
            password=request.password,
            ip_address=context.ip_address,
        )
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(
                error,
                status_code=status.HTTP_401_UNAUTHORIZED,
                background=audit.background_tasks,
            )
        elif error.code in ("ACCOUNT_LOCKED", "ACCOUNT_UNVERIFIED"):
            raise ClientError(
                error,
                status_code=status.HTTP_403_FORBIDDEN,
                background=audit.background_tasks,
            )
        raise ServerError(error, background=audit.background_tasks)

    login_response = result.value
    set_refresh_cookie(response, login_response.refresh_token)
    return LoginResponseBody(
        access_token=login_response.access_token, user=login_response.user
    )


class AccessTokenBody(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post(
    "/refresh-token", status_code=status.HTTP_200_OK, response_model=AccessTokenBody
)
async def refresh_token(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
):
    """
    Mint a new access token from the refreshToken cookie.

    Raises:
        - 401 Unauthorized: No cookie, or the refresh token does not verify
    """
    use_case = RefreshTokenUseCase(uow, audit)
    result = await use_case.execute(request.cookies.get(REFRESH_COOKIE_NAME))

    if result.is_err():
        error = result.error
        if error.code == "TOKEN_MISSING":
            raise ClientError(
                error,
                status_code=status.HTTP_401_UNAUTHORIZED,
                background=audit.background_tasks,
            )
        logger.info(f"Refresh token rejected: {error.code}")
        raise ClientError(
            Error("NOT_AUTHORIZED", "Not authorized"),
            status_code=status.HTTP_401_UNAUTHORIZED,
            background=audit.background_tasks,
        )

    return AccessTokenBody(access_token=result.value.access_token)


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
    current_user: Optional[AuthenticatedUser] = Depends(get_optional_user),
):
    """
    Revoke the presented tokens and clear the refresh cookie.

    Always succeeds; an invalid or missing bearer token only means there is
    nothing to revoke.
    """
    use_case = LogoutUseCase(uow, audit)
    result = await use_case.execute(
        user_id=current_user.id if current_user else None,
        access_token=current_user.token if current_user else None,
        refresh_token=request.cookies.get(REFRESH_COOKIE_NAME),
    )

    if result.is_err():
        raise ServerError(result.error, background=audit.background_tasks)

    clear_refresh_cookie(response)
    return result.value


@router.get(
    "/verify-email/{token}",
    status_code=status.HTTP_200_OK,
    response_model=VerifyEmailResponse,
)
async def verify_email(
    token: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
):
    """
    Raises:
        - 400 Bad Request: Invalid or expired verification token
    """
    result = await VerifyEmailUseCase(uow, audit).execute(token)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_TOKEN":
            raise ClientError(error, background=audit.background_tasks)
        raise ServerError(error, background=audit.background_tasks)

    return result.value


class ResendVerificationRequest(BaseModel):
    email: EmailStr


@router.post(
    "/resend-verification",
    status_code=status.HTTP_200_OK,
    response_model=ResendVerificationResponse,
)
async def resend_verification(
    request: ResendVerificationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
):
    """
    Raises:
        - 400 Bad Request: Email already verified
    """
    use_case = ResendVerificationUseCase(
        uow,
        audit,
        frontend_url=ApplicationConfig.FRONTEND_URL,
        verification_ttl=_verification_ttl(),
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "ALREADY_VERIFIED":
            raise ClientError(error, background=audit.background_tasks)
        raise ServerError(error, background=audit.background_tasks)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserView)
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetProfileUseCase(uow).execute(current_user.id)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    username: Optional[str] = Field(
        None, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_]+$"
    )
    email: Optional[EmailStr] = None
    avatar: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=500)
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    job_title: Optional[str] = Field(None, max_length=100)


@router.put("/me", status_code=status.HTTP_200_OK, response_model=UserView)
async def update_me(
    request: UpdateProfileRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: BackgroundAuditTrail = Depends(get_audit_trail),
):
    """
    Raises:
        - 400 Bad Request: Nothing to update, or email/username taken
        - 401 Unauthorized: Missing or invalid token
    """
    command = UpdateProfileCommand(**request.model_dump(exclude_none=True))
    result = await UpdateProfileUseCase(uow, audit).execute(current_user.id, command)

    if result.is_err():
        error = result.error
        if error.code in ("VALIDATION_FAILED", "EMAIL_IN_USE", "USERNAME_IN_USE"):
            raise ClientError(error, background=audit.background_tasks)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(
                error,
                status_code=status.HTTP_404_NOT_FOUND,
                background=audit.background_tasks,
            )
        raise ServerError(error, background=audit.background_tasks)

    return result.value
