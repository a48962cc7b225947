from fastapi import Response

from config import ApplicationConfig

REFRESH_COOKIE_NAME = "refreshToken"
JOURNEY_COOKIE_NAME = "journeyId"


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """HttpOnly, SameSite=Strict, scoped to the auth routes, Secure in production"""
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=ApplicationConfig.REFRESH_COOKIE_EXPIRE_DAYS * 24 * 60 * 60,
        path=ApplicationConfig.AUTH_COOKIE_PATH,
        secure=ApplicationConfig.is_production(),
        httponly=True,
        samesite="strict",
    )


def clear_refresh_cookie(response: Response) -> None:
    # Attributes must match the ones used when setting, or browsers keep the cookie
    response.delete_cookie(
        key=REFRESH_COOKIE_NAME,
        path=ApplicationConfig.AUTH_COOKIE_PATH,
        secure=ApplicationConfig.is_production(),
        httponly=True,
        samesite="strict",
    )
