from typing import Dict, Optional

from user_agents import parse

UNKNOWN = "Unknown"


def _device_type(user_agent) -> str:
    if user_agent.is_bot:
        return "bot"
    if user_agent.is_tablet:
        return "tablet"
    if user_agent.is_mobile:
        return "mobile"
    if user_agent.is_pc:
        return "desktop"
    return "unknown"


def parse_user_agent(user_agent: Optional[str]) -> Dict[str, Optional[str]]:
    """Split a User-Agent header into browser, OS and device type (uap-core rules)."""
    if not user_agent:
        return {
            "browser": UNKNOWN,
            "browser_version": None,
            "os": UNKNOWN,
            "os_version": None,
            "device": "unknown",
        }

    parsed = parse(user_agent)
    return {
        "browser": parsed.browser.family if parsed.browser.family != "Other" else UNKNOWN,
        "browser_version": parsed.browser.version_string or None,
        "os": parsed.os.family if parsed.os.family != "Other" else UNKNOWN,
        "os_version": parsed.os.version_string or None,
        "device": _device_type(parsed),
    }
