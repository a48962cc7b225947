from typing import Optional

from fastapi import Request

from authtrail.app.services.request_context import RequestContext
from .cookies import JOURNEY_COOKIE_NAME

JOURNEY_HEADER = "X-Journey-Id"


def client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, else the socket peer"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first[:45]
    if request.client:
        return request.client.host
    return None


def build_request_context(request: Request) -> RequestContext:
    user_agent = request.headers.get("user-agent")
    return RequestContext(
        ip_address=client_ip(request),
        user_agent=user_agent[:512] if user_agent else None,
        endpoint=request.url.path[:512],
        method=request.method,
        journey_id=request.headers.get(JOURNEY_HEADER)
        or request.cookies.get(JOURNEY_COOKIE_NAME),
    )
