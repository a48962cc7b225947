from starlette.requests import Request

from authtrail.api.utils.request_context import build_request_context


def make_request(headers=None, client=("203.0.113.9", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/auth/login",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
        "server": ("test", 80),
        "scheme": "http",
    }
    return Request(scope)


def test_context_from_socket_peer():
    context = build_request_context(make_request({"User-Agent": "curl/8.0"}))

    assert context.ip_address == "203.0.113.9"
    assert context.user_agent == "curl/8.0"
    assert context.endpoint == "/auth/login"
    assert context.method == "POST"
    assert context.journey_id is None
    assert not hasattr(context, "user_id")


def test_forwarded_for_and_journey_header():
    context = build_request_context(
        make_request({"X-Forwarded-For": "198.51.100.7, 10.0.0.1", "X-Journey-Id": "abc"})
    )

    assert context.ip_address == "198.51.100.7"
    assert context.journey_id == "abc"


def test_journey_cookie():
    context = build_request_context(make_request({"Cookie": "journeyId=from-cookie"}))

    assert context.journey_id == "from-cookie"
