"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .verify_access_token_use_case import VerifyAccessTokenUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .profile_use_cases import GetProfileUseCase, UpdateProfileUseCase
from .dtos import (
    AuthenticatedUser,
    LoginCommand,
    LoginResponse,
    LogoutResponse,
    RefreshTokenResponse,
    RegisterCommand,
    RegisterResponse,
    ResendVerificationResponse,
    UpdateProfileCommand,
    UserView,
    VerifyEmailResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "VerifyAccessTokenUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    "UpdateProfileCommand",
    # DTOs - Responses
    "RegisterResponse",
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "VerifyEmailResponse",
    "ResendVerificationResponse",
    "AuthenticatedUser",
    "UserView",
]
